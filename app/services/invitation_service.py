"""
Invitation service - token invitations consumed by registration

Expiry is lazy: a pending invitation past `expires_at` keeps its stored status
and is reported as expired when read.
"""
import logging
import secrets
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.invitation import Invitation, InvitationStatus
from app.models.user_role import AppRole
from app.services.access_policy import Action, Resource, authorize
from app.services.audit_service import log_audit
from app.utils.datetime_utils import ensure_utc, now_utc
from app.utils.enums import enum_to_str

logger = logging.getLogger(__name__)


def generate_token() -> str:
    """64 hex characters from 32 random bytes"""
    return secrets.token_hex(32)


def invitation_link(token: str) -> str:
    return f"{settings.APP_BASE_URL.rstrip('/')}/auth?invite={token}"


def is_expired(invitation: Invitation, now: Optional[datetime] = None) -> bool:
    current = ensure_utc(now) if now else now_utc()
    return ensure_utc(invitation.expires_at) < current


def effective_status(invitation: Invitation, now: Optional[datetime] = None) -> str:
    """Stored status, except pending invitations past their expiry read as expired"""
    if invitation.status == InvitationStatus.PENDING.value and is_expired(invitation, now):
        return InvitationStatus.EXPIRED.value
    return invitation.status


def create_invitation(
    db: Session,
    actor_id: int,
    email: str,
    name: str,
    department: str,
    role: AppRole,
    now: Optional[datetime] = None,
) -> Invitation:
    """
    Create a pending invitation (manager/admin only)

    Args:
        db: Database session
        actor_id: ID of the inviting user
        email: Invitee email
        name: Invitee display name
        department: Invitee department
        role: Role granted when the invitation is accepted
        now: Creation instant; defaults to the current time

    Returns:
        Created Invitation

    Raises:
        HTTPException: 403 unless the actor is manager/admin
    """
    authorize(db, actor_id, Resource.INVITATIONS, Action.INSERT)

    created_at = ensure_utc(now) if now else now_utc()
    invitation = Invitation(
        email=email.strip().lower(),
        name=name.strip(),
        department=department.strip(),
        role=enum_to_str(role),
        invited_by=actor_id,
        token=generate_token(),
        status=InvitationStatus.PENDING.value,
        created_at=created_at,
        expires_at=created_at + timedelta(days=settings.INVITATION_EXPIRY_DAYS),
    )
    db.add(invitation)
    db.commit()
    db.refresh(invitation)

    logger.info("Invitation %s created for %s by user %s", invitation.id, invitation.email, actor_id)
    log_audit(
        db=db,
        actor_id=actor_id,
        action="INVITATION_CREATE",
        entity_type="invitations",
        entity_id=invitation.id,
        meta={
            "email": invitation.email,
            "role": invitation.role,
            "expires_at": invitation.expires_at,
        }
    )
    return invitation


def list_invitations(db: Session, actor_id: int) -> List[Invitation]:
    """All invitations, newest first (manager/admin only)"""
    authorize(db, actor_id, Resource.INVITATIONS, Action.READ)
    return db.query(Invitation).order_by(Invitation.created_at.desc(), Invitation.id.desc()).all()


def lookup_pending(db: Session, token: Optional[str], now: Optional[datetime] = None) -> Optional[Invitation]:
    """
    Find a usable invitation by token.

    Returns None when the token is unknown, already accepted or expired.
    """
    if not token:
        return None
    invitation = db.query(Invitation).filter(
        Invitation.token == token,
        Invitation.status == InvitationStatus.PENDING.value,
    ).first()
    if invitation is None or is_expired(invitation, now):
        return None
    return invitation


def mark_accepted(invitation: Invitation) -> None:
    """Flag the invitation as used. The caller commits."""
    invitation.status = InvitationStatus.ACCEPTED.value
