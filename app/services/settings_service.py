"""
Settings service - key/value settings, currently the late threshold
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.constants import SETTING_LATE_THRESHOLD
from app.core.config import settings
from app.models.setting import Setting
from app.services.access_policy import Action, Resource, authorize
from app.services.attendance_rules import LateThreshold
from app.services.audit_service import log_audit
from app.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)


def default_late_threshold() -> LateThreshold:
    """Threshold used when no settings row exists"""
    return LateThreshold(
        hours=settings.DEFAULT_LATE_THRESHOLD_HOURS,
        minutes=settings.DEFAULT_LATE_THRESHOLD_MINUTES,
    )


def get_setting(db: Session, key: str) -> Optional[Setting]:
    return db.query(Setting).filter(Setting.key == key).first()


def get_late_threshold(db: Session) -> LateThreshold:
    """
    Load the late threshold from the settings table.

    Falls back to the configured default when the row is missing or unusable.
    """
    row = get_setting(db, SETTING_LATE_THRESHOLD)
    default = default_late_threshold()
    if row is None:
        return default
    value = row.value if isinstance(row.value, dict) else None
    return LateThreshold.from_value(value, default)


def update_late_threshold(
    db: Session,
    actor_id: int,
    hours: int,
    minutes: int,
) -> LateThreshold:
    """
    Upsert the late threshold (manager/admin only)

    Args:
        db: Database session
        actor_id: ID of the user changing the setting
        hours: 0..23
        minutes: 0..59

    Returns:
        The stored LateThreshold

    Raises:
        HTTPException: 403 if the actor is not a manager or admin
        ValueError: if hours/minutes are out of range
    """
    row = get_setting(db, SETTING_LATE_THRESHOLD)
    authorize(db, actor_id, Resource.SETTINGS, Action.UPDATE if row else Action.INSERT)

    threshold = LateThreshold(hours=hours, minutes=minutes)
    previous = row.value if row else None

    if row is None:
        row = Setting(key=SETTING_LATE_THRESHOLD, value=threshold.to_value())
        db.add(row)
    else:
        row.value = threshold.to_value()
        row.updated_at = now_utc()
    db.commit()

    logger.info("Late threshold set to %02d:%02d by user %s", hours, minutes, actor_id)
    log_audit(
        db=db,
        actor_id=actor_id,
        action="SETTINGS_UPDATE",
        entity_type="settings",
        entity_id=row.id,
        meta={"key": SETTING_LATE_THRESHOLD, "old": previous, "new": threshold.to_value()},
    )
    return threshold


def seed_late_threshold(db: Session) -> bool:
    """Insert the default late threshold if the row is missing. Returns True when a row was created."""
    if get_setting(db, SETTING_LATE_THRESHOLD) is not None:
        return False
    db.add(Setting(key=SETTING_LATE_THRESHOLD, value=default_late_threshold().to_value()))
    db.commit()
    logger.info("Seeded default late threshold")
    return True
