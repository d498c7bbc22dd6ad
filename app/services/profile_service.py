"""
Profile service - profile reads and edits
"""
import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.profile import Profile
from app.services.access_policy import Action, Resource, authorize
from app.services.audit_service import log_audit
from app.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)


def list_profiles(db: Session) -> List[Profile]:
    """All profiles ordered by name (readable by any authenticated user)."""
    return db.query(Profile).order_by(Profile.name.asc(), Profile.id.asc()).all()


def get_profile(db: Session, profile_id: int) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.id == profile_id).first()


def update_profile(
    db: Session,
    actor_id: int,
    profile_id: int,
    name: Optional[str] = None,
    department: Optional[str] = None,
) -> Profile:
    """
    Update name and/or department

    The employee code and email are not editable here.

    Raises:
        HTTPException: 404 if the profile is missing, 403 unless the actor is
            the owner or a manager/admin
    """
    profile = get_profile(db, profile_id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found"
        )
    authorize(db, actor_id, Resource.PROFILES, Action.UPDATE, owner_id=profile.id)

    changes = {}
    if name is not None and name.strip() and name.strip() != profile.name:
        changes["name"] = {"old": profile.name, "new": name.strip()}
        profile.name = name.strip()
    if department is not None and department.strip() and department.strip() != profile.department:
        changes["department"] = {"old": profile.department, "new": department.strip()}
        profile.department = department.strip()

    if not changes:
        return profile

    profile.updated_at = now_utc()
    db.commit()
    db.refresh(profile)

    logger.info("Profile %s updated by user %s: %s", profile.id, actor_id, ", ".join(changes))
    log_audit(
        db=db,
        actor_id=actor_id,
        action="PROFILE_UPDATE",
        entity_type="profiles",
        entity_id=profile.id,
        meta=changes,
    )
    return profile
