"""
Profile endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_user
from app.models.user import User
from app.schemas.profile import ProfileOut, ProfileUpdate
from app.services import profile_service

router = APIRouter()


@router.get("", response_model=List[ProfileOut])
async def list_profiles(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List all profiles ordered by name"""
    return profile_service.list_profiles(db)


@router.get("/me", response_model=Optional[ProfileOut])
async def get_my_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return profile_service.get_profile(db, current_user.id)


@router.patch("/me", response_model=ProfileOut)
async def update_my_profile(
    update_data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return profile_service.update_profile(
        db,
        actor_id=current_user.id,
        profile_id=current_user.id,
        name=update_data.name,
        department=update_data.department,
    )


@router.get("/{profile_id}", response_model=Optional[ProfileOut])
async def get_profile(
    profile_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Profile by id, or null when it does not exist"""
    return profile_service.get_profile(db, profile_id)


@router.patch("/{profile_id}", response_model=ProfileOut)
async def update_profile(
    profile_id: int,
    update_data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Update a profile

    Allowed for the owner, managers and admins.
    """
    return profile_service.update_profile(
        db,
        actor_id=current_user.id,
        profile_id=profile_id,
        name=update_data.name,
        department=update_data.department,
    )
