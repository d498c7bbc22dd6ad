"""
Attendance endpoints
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from app.constants import TEAM_ATTENDANCE_DEFAULT_LIMIT
from app.core.deps import get_db, get_current_user, require_privileged
from app.models.user import User
from app.schemas.attendance import (
    AttendanceOut,
    AttendanceSummary,
    AttendanceUpdate,
    AuditEntryOut,
    MyAttendanceResponse,
    TeamAttendanceItem,
    TeamAttendanceResponse,
)
from app.services import attendance_service
from app.services.audit_service import list_audit_entries

router = APIRouter()


def _check_range(from_date: Optional[date], to_date: Optional[date]) -> None:
    if from_date and to_date and from_date > to_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="from_date must be <= to_date"
        )


@router.post("/check-in", response_model=AttendanceOut, status_code=status.HTTP_201_CREATED)
async def check_in(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Check in for today

    Status is "late" when the time of day is after the configured threshold.
    Returns 409 if already checked in today.
    """
    return attendance_service.check_in(db, current_user.id)


@router.post("/check-out", response_model=AttendanceOut)
async def check_out(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Check out for today and compute total hours

    Returns 404 without a check-in today and 409 if already checked out.
    """
    return attendance_service.check_out(db, current_user.id)


@router.get("/today", response_model=Optional[AttendanceOut])
async def get_today(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """The caller's record for today, or null"""
    return attendance_service.get_today(db, current_user.id)


@router.get("/my", response_model=MyAttendanceResponse)
async def list_my_attendance(
    from_date: Optional[date] = Query(None, alias="from", description="Start date (YYYY-MM-DD)"),
    to_date: Optional[date] = Query(None, alias="to", description="End date (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Own records, newest first, with per-status counts"""
    _check_range(from_date, to_date)
    records = attendance_service.list_my(db, current_user.id, from_date, to_date)
    return MyAttendanceResponse(
        items=[AttendanceOut.model_validate(r) for r in records],
        summary=AttendanceSummary(**attendance_service.summarize(records)),
    )


@router.get("/team", response_model=TeamAttendanceResponse)
async def list_team_attendance(
    search: Optional[str] = Query(None, description="Name, employee code or department"),
    from_date: Optional[date] = Query(None, alias="from", description="Start date (YYYY-MM-DD)"),
    to_date: Optional[date] = Query(None, alias="to", description="End date (YYYY-MM-DD)"),
    limit: int = Query(TEAM_ATTENDANCE_DEFAULT_LIMIT, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Attendance with employee details

    Managers and admins see everyone; other users see only their own rows.
    """
    _check_range(from_date, to_date)
    rows = attendance_service.list_team(
        db,
        current_user.id,
        search=search,
        from_date=from_date,
        to_date=to_date,
        limit=limit,
    )
    items = []
    for record, profile, modifier in rows:
        base = AttendanceOut.model_validate(record).model_dump()
        items.append(TeamAttendanceItem(
            **base,
            employee_name=profile.name,
            employee_code=profile.employee_code,
            department=profile.department,
            modifier_name=modifier.name if modifier else None,
        ))
    return TeamAttendanceResponse(items=items, total=len(items))


@router.get("/{record_id}", response_model=Optional[AttendanceOut])
async def get_attendance(
    record_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """A single record, or null when missing or not visible to the caller"""
    return attendance_service.get_record(db, current_user.id, record_id)


@router.get("/{record_id}/audit", response_model=List[AuditEntryOut])
async def get_attendance_audit(
    record_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_privileged)
):
    """Audit trail of a record (manager/admin only)"""
    return list_audit_entries(db, "attendance", record_id)


@router.patch("/{record_id}", response_model=AttendanceOut)
async def update_attendance(
    record_id: int,
    update_data: AttendanceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Edit a record

    A status change is a manager/admin override and needs a reason
    (3-500 characters). Notes can be edited by the owner.
    """
    record = None
    if update_data.status is not None:
        record = attendance_service.override_status(
            db,
            actor_id=current_user.id,
            record_id=record_id,
            new_status=update_data.status,
            reason=update_data.reason,
        )
    if "notes" in update_data.model_fields_set:
        record = attendance_service.update_notes(db, current_user.id, record_id, update_data.notes)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Nothing to update"
        )
    return record


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attendance(
    record_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a record (manager/admin only)"""
    attendance_service.delete_record(db, current_user.id, record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
