"""
Role service - role grants (user_roles is insert only)
"""
import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.user import User
from app.models.user_role import AppRole, UserRole
from app.services.access_policy import Action, Resource, authorize, has_role
from app.services.audit_service import log_audit
from app.utils.datetime_utils import now_utc
from app.utils.enums import enum_to_str

logger = logging.getLogger(__name__)


def list_user_roles(db: Session, user_id: int) -> List[UserRole]:
    """Role grants of a user, oldest first."""
    return (
        db.query(UserRole)
        .filter(UserRole.user_id == user_id)
        .order_by(UserRole.created_at.asc(), UserRole.id.asc())
        .all()
    )


def add_role(db: Session, user_id: int, role: AppRole) -> UserRole:
    """
    Insert a grant without an authorization check.

    Used by registration and bootstrap, which run on behalf of the system.
    The caller commits.
    """
    grant = UserRole(user_id=user_id, role=enum_to_str(role), created_at=now_utc())
    db.add(grant)
    return grant


def grant_role(
    db: Session,
    actor_id: int,
    user_id: int,
    role: AppRole,
) -> UserRole:
    """
    Grant a role to a user

    Args:
        db: Database session
        actor_id: ID of the user granting the role (must be manager or admin)
        user_id: ID of the user receiving the role
        role: Role to grant

    Returns:
        Created UserRole

    Raises:
        HTTPException: 403 unless the actor is manager/admin, 404 if the user
            does not exist, 409 if the user already holds the role
    """
    authorize(db, actor_id, Resource.USER_ROLES, Action.INSERT)

    if db.query(User.id).filter(User.id == user_id).first() is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    role_value = enum_to_str(role)
    if has_role(db, user_id, role_value):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"User already has role '{role_value}'"
        )

    grant = add_role(db, user_id, role)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"User already has role '{role_value}'"
        )
    db.refresh(grant)

    logger.info("Role %s granted to user %s by user %s", role_value, user_id, actor_id)
    log_audit(
        db=db,
        actor_id=actor_id,
        action="ROLE_GRANT",
        entity_type="user_roles",
        entity_id=grant.id,
        meta={"user_id": user_id, "role": role_value},
    )
    return grant
