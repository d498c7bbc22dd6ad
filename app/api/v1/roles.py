"""
Role grant endpoints
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_user
from app.models.user import User
from app.schemas.role import RoleGrantRequest, UserRoleOut
from app.services import role_service

router = APIRouter()


@router.get("/user/{user_id}", response_model=List[UserRoleOut])
async def list_user_roles(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List a user's role grants (any authenticated user)."""
    return role_service.list_user_roles(db, user_id)


@router.post("", response_model=UserRoleOut, status_code=status.HTTP_201_CREATED)
async def grant_role(
    grant: RoleGrantRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Grant a role to a user (manager/admin only).

    Returns 409 if the user already holds the role.
    """
    return role_service.grant_role(db, actor_id=current_user.id, user_id=grant.user_id, role=grant.role)
