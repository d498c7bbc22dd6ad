"""
Settings endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_user
from app.models.user import User
from app.schemas.settings import LateThresholdIn, LateThresholdOut
from app.services import settings_service

router = APIRouter()


@router.get("/late-threshold", response_model=LateThresholdOut)
async def get_late_threshold(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Current late threshold (the configured default when unset)"""
    threshold = settings_service.get_late_threshold(db)
    return LateThresholdOut(hours=threshold.hours, minutes=threshold.minutes)


@router.put("/late-threshold", response_model=LateThresholdOut)
async def update_late_threshold(
    threshold_data: LateThresholdIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Set the late threshold (manager/admin only)"""
    threshold = settings_service.update_late_threshold(
        db,
        actor_id=current_user.id,
        hours=threshold_data.hours,
        minutes=threshold_data.minutes,
    )
    return LateThresholdOut(hours=threshold.hours, minutes=threshold.minutes)
