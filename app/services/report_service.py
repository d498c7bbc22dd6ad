"""
Report service - attendance data for CSV export
"""
from datetime import date, datetime
from typing import Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.attendance import AttendanceRecord
from app.models.profile import Profile
from app.services.access_policy import Resource, visible_owner_ids
from app.utils.datetime_utils import to_local

ATTENDANCE_CSV_HEADERS = [
    "Date",
    "Employee Name",
    "Employee ID",
    "Department",
    "Status",
    "Check In",
    "Check Out",
    "Total Hours",
]

MISSING = "N/A"


def format_time(dt: Optional[datetime]) -> Optional[str]:
    """HH:MM:SS in the configured timezone"""
    if dt is None:
        return None
    return to_local(dt).strftime("%H:%M:%S")


def format_hours(hours: Optional[float]) -> Optional[str]:
    if hours is None:
        return None
    return f"{hours:.2f}"


def attendance_filename(user_id: Optional[int] = None) -> str:
    if user_id is not None:
        return f"employee_{user_id}_attendance.csv"
    return "all_employees_attendance.csv"


def get_attendance_rows(
    db: Session,
    actor_id: int,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    user_id: Optional[int] = None,
) -> List[Dict]:
    """
    Get attendance rows for export with role-based scoping

    Managers and admins export everyone; other users only their own rows.

    Args:
        db: Database session
        actor_id: ID of the requesting user
        from_date: Optional start date (inclusive)
        to_date: Optional end date (inclusive)
        user_id: Optional filter on a single user

    Returns:
        List of dictionaries keyed by ATTENDANCE_CSV_HEADERS

    Raises:
        HTTPException: 400 if from_date > to_date, 403 when exporting
            another user's rows without manager/admin role
    """
    if from_date and to_date and from_date > to_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="from_date must be <= to_date"
        )

    query = db.query(AttendanceRecord, Profile).join(
        Profile, Profile.id == AttendanceRecord.user_id
    )

    owner_ids = visible_owner_ids(db, actor_id, Resource.ATTENDANCE)
    if owner_ids is not None:
        if user_id is not None and user_id not in owner_ids:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only export your own attendance"
            )
        query = query.filter(AttendanceRecord.user_id.in_(owner_ids))

    if user_id is not None:
        query = query.filter(AttendanceRecord.user_id == user_id)
    if from_date:
        query = query.filter(AttendanceRecord.date >= from_date)
    if to_date:
        query = query.filter(AttendanceRecord.date <= to_date)

    results = query.order_by(AttendanceRecord.date.desc(), Profile.employee_code.asc()).all()

    return [
        {
            "Date": record.date.isoformat(),
            "Employee Name": profile.name,
            "Employee ID": profile.employee_code,
            "Department": profile.department,
            "Status": record.status,
            "Check In": format_time(record.check_in_time),
            "Check Out": format_time(record.check_out_time),
            "Total Hours": format_hours(record.total_hours),
        }
        for record, profile in results
    ]
