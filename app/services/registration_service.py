"""
Registration service - identity creation and profile provisioning

Every new identity gets a profile and a role grant in the same transaction as
the user row. Employee codes are sequential: EMP0001, EMP0002, ...
"""
from datetime import datetime
from typing import Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.constants import (
    DEFAULT_DEPARTMENT,
    DEFAULT_PROFILE_NAME,
    EMPLOYEE_CODE_PREFIX,
    EMPLOYEE_CODE_WIDTH,
)
from app.core.logging import get_logger
from app.core.security import hash_password, validate_password
from app.models.invitation import Invitation
from app.models.profile import Profile
from app.models.user import User
from app.models.user_role import AppRole
from app.services import invitation_service
from app.services.audit_service import log_audit
from app.services.role_service import add_role
from app.utils.datetime_utils import ensure_utc, now_utc
from app.utils.enums import enum_to_str

logger = get_logger(__name__)


def format_employee_code(ordinal: int) -> str:
    return f"{EMPLOYEE_CODE_PREFIX}{ordinal:0{EMPLOYEE_CODE_WIDTH}d}"


def next_employee_code(db: Session) -> str:
    """
    Next code in the EMP sequence.

    Codes are never reassigned, so the next ordinal is one past the highest
    ordinal ever issued that is still on file.
    """
    highest = 0
    codes = db.query(Profile.employee_code).filter(
        Profile.employee_code.like(f"{EMPLOYEE_CODE_PREFIX}%")
    ).all()
    for (code,) in codes:
        suffix = code[len(EMPLOYEE_CODE_PREFIX):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return format_employee_code(highest + 1)


def _clean(value: Optional[str], default: str) -> str:
    value = (value or "").strip()
    return value or default


def provision_profile(
    db: Session,
    user: User,
    name: Optional[str] = None,
    department: Optional[str] = None,
    role: AppRole = AppRole.EMPLOYEE,
) -> Profile:
    """
    Create the profile and the initial role grant for a new identity.

    Must run after the user row is flushed. The caller commits.
    """
    role_value = enum_to_str(role)
    profile = Profile(
        id=user.id,
        name=_clean(name, DEFAULT_PROFILE_NAME),
        email=user.email,
        employee_code=next_employee_code(db),
        department=_clean(department, DEFAULT_DEPARTMENT),
        role=role_value,
        created_at=user.created_at,
        updated_at=user.created_at,
    )
    db.add(profile)
    add_role(db, user.id, role)
    db.flush()
    return profile


def register(
    db: Session,
    email: str,
    password: str,
    name: Optional[str] = None,
    department: Optional[str] = None,
    invite_token: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Tuple[User, Optional[Invitation]]:
    """
    Register a new identity

    A usable invitation token overrides the submitted email, name, department
    and role, and is marked accepted. An unknown, used or expired token falls
    back to the submitted fields with the employee role.

    Args:
        db: Database session
        email: Login email
        password: Plain password (6..72 bytes)
        name: Display name; defaults to "New User"
        department: Department; defaults to "General"
        invite_token: Optional invitation token
        now: Registration instant; defaults to the current time

    Returns:
        (created User, accepted Invitation or None)

    Raises:
        HTTPException: 400 for an invalid password, 409 if the email is taken
    """
    try:
        password = validate_password(password)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    invitation = invitation_service.lookup_pending(db, invite_token, now=now)
    role = AppRole.EMPLOYEE
    if invitation is not None:
        email = invitation.email
        name = invitation.name
        department = invitation.department
        role = AppRole(invitation.role)
    elif invite_token:
        logger.info("Signup with unusable invitation token; using submitted fields")

    email = email.strip().lower()
    if db.query(User.id).filter(User.email == email).first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered"
        )

    user = User(
        email=email,
        password_hash=hash_password(password),
        active=True,
        created_at=ensure_utc(now) if now else now_utc(),
    )
    db.add(user)
    try:
        db.flush()
        profile = provision_profile(db, user, name=name, department=department, role=role)
        if invitation is not None:
            invitation_service.mark_accepted(invitation)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered"
        )
    db.refresh(user)

    logger.info("Registered user %s as %s (%s)", user.id, profile.employee_code, role.value)
    log_audit(
        db=db,
        actor_id=user.id,
        action="AUTH_SIGNUP",
        entity_type="users",
        entity_id=user.id,
        meta={"email": user.email, "employee_code": profile.employee_code, "role": role.value},
    )
    if invitation is not None:
        log_audit(
            db=db,
            actor_id=user.id,
            action="INVITATION_ACCEPT",
            entity_type="invitations",
            entity_id=invitation.id,
            meta={"role": invitation.role},
        )
    return user, invitation
