"""
Invitation endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_user
from app.models.invitation import Invitation
from app.models.user import User
from app.schemas.invitation import InvitationCreate, InvitationOut, InvitationPrefillOut
from app.services import invitation_service

router = APIRouter()


def _to_out(invitation: Invitation) -> InvitationOut:
    return InvitationOut(
        id=invitation.id,
        email=invitation.email,
        name=invitation.name,
        department=invitation.department,
        role=invitation.role,
        status=invitation_service.effective_status(invitation),
        invited_by=invitation.invited_by,
        token=invitation.token,
        link=invitation_service.invitation_link(invitation.token),
        expires_at=invitation.expires_at,
        created_at=invitation.created_at,
    )


@router.post("", response_model=InvitationOut, status_code=status.HTTP_201_CREATED)
async def create_invitation(
    invitation_data: InvitationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Invite a new member (manager/admin only)

    The response carries the invitation link to share with the invitee.
    """
    invitation = invitation_service.create_invitation(
        db,
        actor_id=current_user.id,
        email=invitation_data.email,
        name=invitation_data.name,
        department=invitation_data.department,
        role=invitation_data.role,
    )
    return _to_out(invitation)


@router.get("", response_model=List[InvitationOut])
async def list_invitations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """All invitations, newest first, with expired ones reported as expired"""
    return [_to_out(i) for i in invitation_service.list_invitations(db, current_user.id)]


@router.get("/lookup/{token}", response_model=Optional[InvitationPrefillOut])
async def lookup_invitation(
    token: str,
    db: Session = Depends(get_db)
):
    """
    Registration prefill for an invitation token (no authentication)

    Returns null when the token is unknown, already used or expired.
    """
    return invitation_service.lookup_pending(db, token)
