"""
Attendance service - business logic for the attendance ledger
"""
import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from app.constants import (
    OVERRIDE_REASON_MAX_LENGTH,
    OVERRIDE_REASON_MIN_LENGTH,
    TEAM_ATTENDANCE_DEFAULT_LIMIT,
)
from app.models.attendance import AttendanceRecord, AttendanceStatus
from app.models.profile import Profile
from app.services.access_policy import (
    Action,
    Resource,
    authorize,
    is_allowed,
    is_privileged,
    visible_owner_ids,
)
from app.services.attendance_rules import (
    check_in_status,
    derive_total_hours,
    override_original_status,
)
from app.services.audit_service import log_audit
from app.services.settings_service import get_late_threshold
from app.utils.datetime_utils import ensure_utc, local_date, local_tz, now_utc
from app.utils.enums import enum_to_str

logger = logging.getLogger(__name__)


def get_record_for_date(db: Session, user_id: int, on_date: date) -> Optional[AttendanceRecord]:
    return db.query(AttendanceRecord).filter(
        AttendanceRecord.user_id == user_id,
        AttendanceRecord.date == on_date,
    ).first()


def get_today(db: Session, user_id: int, now: Optional[datetime] = None) -> Optional[AttendanceRecord]:
    """The caller's record for today (in the configured timezone), or None"""
    return get_record_for_date(db, user_id, local_date(now))


def check_in(db: Session, user_id: int, now: Optional[datetime] = None) -> AttendanceRecord:
    """
    Record a check-in for today

    Status is `late` when the check-in time of day is strictly after the
    configured threshold, otherwise `present`.

    Args:
        db: Database session
        user_id: ID of the user checking in (always the caller)
        now: Check-in instant; defaults to the current time

    Returns:
        Created AttendanceRecord

    Raises:
        HTTPException: 409 if a record already exists for (user, today)
    """
    authorize(db, user_id, Resource.ATTENDANCE, Action.INSERT, owner_id=user_id)

    check_in_time = ensure_utc(now) if now else now_utc()
    record_date = local_date(check_in_time)

    if get_record_for_date(db, user_id, record_date) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Already checked in today"
        )

    threshold = get_late_threshold(db)
    record_status = check_in_status(check_in_time, threshold, local_tz())

    record = AttendanceRecord(
        user_id=user_id,
        date=record_date,
        check_in_time=check_in_time,
        status=record_status.value,
        total_hours=None,
    )
    db.add(record)
    try:
        db.commit()
    except IntegrityError:
        # Concurrent check-in won the unique (user_id, date) race
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Already checked in today"
        )
    db.refresh(record)

    if record_status == AttendanceStatus.LATE:
        logger.info(
            "User %s checked in late on %s (threshold %02d:%02d)",
            user_id, record_date, threshold.hours, threshold.minutes,
        )
    else:
        logger.debug("User %s checked in on %s", user_id, record_date)

    log_audit(
        db=db,
        actor_id=user_id,
        action="ATTENDANCE_CHECK_IN",
        entity_type="attendance",
        entity_id=record.id,
        meta={
            "date": record_date,
            "check_in_time": check_in_time,
            "status": record.status,
        }
    )
    return record


def check_out(db: Session, user_id: int, now: Optional[datetime] = None) -> AttendanceRecord:
    """
    Record a check-out on today's record and derive total hours

    Status is not recomputed.

    Raises:
        HTTPException: 404 if no check-in today, 409 if already checked out,
            400 if the check-out is not after the check-in
    """
    check_out_time = ensure_utc(now) if now else now_utc()
    record = get_record_for_date(db, user_id, local_date(check_out_time))

    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Check-in not found for today"
        )

    authorize(db, user_id, Resource.ATTENDANCE, Action.UPDATE, owner_id=record.user_id)

    if record.check_out_time is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Already checked out today"
        )

    check_in_time = ensure_utc(record.check_in_time)
    if check_in_time is not None and check_out_time <= check_in_time:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Check-out time must be after check-in time"
        )

    record.check_out_time = check_out_time
    record.total_hours = derive_total_hours(check_in_time, check_out_time)
    db.commit()
    db.refresh(record)

    logger.debug("User %s checked out, %.2f hours", user_id, record.total_hours or 0)
    log_audit(
        db=db,
        actor_id=user_id,
        action="ATTENDANCE_CHECK_OUT",
        entity_type="attendance",
        entity_id=record.id,
        meta={
            "date": record.date,
            "check_out_time": check_out_time,
            "total_hours": record.total_hours,
        }
    )
    return record


def _clean_reason(reason: Optional[str]) -> str:
    cleaned = (reason or "").strip()
    if len(cleaned) < OVERRIDE_REASON_MIN_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Reason must be at least {OVERRIDE_REASON_MIN_LENGTH} characters"
        )
    if len(cleaned) > OVERRIDE_REASON_MAX_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Reason must be at most {OVERRIDE_REASON_MAX_LENGTH} characters"
        )
    return cleaned


def _get_or_404(db: Session, record_id: int) -> AttendanceRecord:
    record = db.query(AttendanceRecord).filter(AttendanceRecord.id == record_id).first()
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Attendance record not found"
        )
    return record


def override_status(
    db: Session,
    actor_id: int,
    record_id: int,
    new_status: AttendanceStatus,
    reason: str,
    now: Optional[datetime] = None,
) -> AttendanceRecord:
    """
    Privileged status edit with an audit trail

    `original_status` keeps the prior status only when the status changes;
    `modified_by`, `modified_at` and the trimmed reason are always recorded.
    Concurrent edits are last-write-wins.

    Raises:
        HTTPException: 403 unless manager/admin, 404 if the record is missing,
            400 if the reason is too short or too long
    """
    if not is_privileged(db, actor_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: only managers and admins can edit attendance status"
        )
    record = _get_or_404(db, record_id)
    cleaned_reason = _clean_reason(reason)

    new_value = enum_to_str(new_status)
    previous = record.status

    record.status = new_value
    record.original_status = override_original_status(previous, new_value)
    record.modification_reason = cleaned_reason
    record.modified_by = actor_id
    record.modified_at = ensure_utc(now) if now else now_utc()
    db.commit()
    db.refresh(record)

    logger.info(
        "Attendance %s status %s -> %s by user %s",
        record.id, previous, new_value, actor_id,
    )
    log_audit(
        db=db,
        actor_id=actor_id,
        action="ATTENDANCE_OVERRIDE",
        entity_type="attendance",
        entity_id=record.id,
        meta={
            "user_id": record.user_id,
            "date": record.date,
            "old_status": previous,
            "new_status": new_value,
            "reason": cleaned_reason,
        }
    )
    return record


def update_notes(db: Session, actor_id: int, record_id: int, notes: Optional[str]) -> AttendanceRecord:
    """Set free-text notes (owner, manager or admin)"""
    record = _get_or_404(db, record_id)
    authorize(db, actor_id, Resource.ATTENDANCE, Action.UPDATE, owner_id=record.user_id)
    record.notes = notes.strip() if notes else None
    db.commit()
    db.refresh(record)
    return record


def delete_record(db: Session, actor_id: int, record_id: int) -> None:
    """
    Delete an attendance record (manager/admin only)

    Raises:
        HTTPException: 403 unless manager/admin, 404 if missing
    """
    authorize(db, actor_id, Resource.ATTENDANCE, Action.DELETE)
    record = _get_or_404(db, record_id)
    meta = {"user_id": record.user_id, "date": record.date, "status": record.status}

    db.delete(record)
    db.commit()

    logger.info("Attendance %s deleted by user %s", record_id, actor_id)
    log_audit(
        db=db,
        actor_id=actor_id,
        action="ATTENDANCE_DELETE",
        entity_type="attendance",
        entity_id=record_id,
        meta=meta,
    )


def get_record(db: Session, actor_id: int, record_id: int) -> Optional[AttendanceRecord]:
    """A single record if it exists and is visible to the actor, else None"""
    record = db.query(AttendanceRecord).filter(AttendanceRecord.id == record_id).first()
    if record is None:
        return None
    if not is_allowed(db, actor_id, Resource.ATTENDANCE, Action.READ, owner_id=record.user_id):
        return None
    return record


def _apply_date_range(query, from_date: Optional[date], to_date: Optional[date]):
    if from_date:
        query = query.filter(AttendanceRecord.date >= from_date)
    if to_date:
        query = query.filter(AttendanceRecord.date <= to_date)
    return query


def list_my(
    db: Session,
    user_id: int,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> List[AttendanceRecord]:
    """The caller's own records in range, newest first"""
    query = db.query(AttendanceRecord).filter(AttendanceRecord.user_id == user_id)
    query = _apply_date_range(query, from_date, to_date)
    return query.order_by(AttendanceRecord.date.desc()).all()


def summarize(records: Iterable[AttendanceRecord]) -> Dict[str, float]:
    """Per-status day counts plus total hours"""
    summary = {
        "present": 0,
        "absent": 0,
        "late": 0,
        "half_day": 0,
        "total_hours": 0.0,
    }
    for record in records:
        key = record.status.replace("-", "_")
        if key in summary:
            summary[key] += 1
        if record.total_hours is not None:
            summary["total_hours"] += record.total_hours
    return summary


def list_team(
    db: Session,
    actor_id: int,
    search: Optional[str] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    limit: int = TEAM_ATTENDANCE_DEFAULT_LIMIT,
) -> List[Tuple[AttendanceRecord, Profile, Optional[Profile]]]:
    """
    Visible records joined with the owner's profile and the modifier's profile

    Managers and admins see everyone; other users only see their own rows.
    `search` matches name, employee code or department, case-insensitively.
    """
    modifier = aliased(Profile)
    query = (
        db.query(AttendanceRecord, Profile, modifier)
        .join(Profile, Profile.id == AttendanceRecord.user_id)
        .outerjoin(modifier, modifier.id == AttendanceRecord.modified_by)
    )

    owner_ids = visible_owner_ids(db, actor_id, Resource.ATTENDANCE)
    if owner_ids is not None:
        query = query.filter(AttendanceRecord.user_id.in_(owner_ids))

    query = _apply_date_range(query, from_date, to_date)

    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(
            Profile.name.ilike(pattern),
            Profile.employee_code.ilike(pattern),
            Profile.department.ilike(pattern),
        ))

    return (
        query.order_by(AttendanceRecord.date.desc(), AttendanceRecord.id.desc())
        .limit(limit)
        .all()
    )
