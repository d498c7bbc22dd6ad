"""
Report endpoints - CSV exports
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_user
from app.models.user import User
from app.services.audit_service import log_audit
from app.services.report_service import (
    ATTENDANCE_CSV_HEADERS,
    MISSING,
    attendance_filename,
    get_attendance_rows,
)
from app.utils.csv_export import stream_csv

router = APIRouter()


@router.get("/attendance.csv")
async def export_attendance_csv(
    from_date: Optional[date] = Query(None, alias="from", description="Start date (YYYY-MM-DD)"),
    to_date: Optional[date] = Query(None, alias="to", description="End date (YYYY-MM-DD)"),
    user_id: Optional[int] = Query(None, description="Filter by user ID"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Export attendance data as CSV

    Role-based scoping:
    - MANAGER / ADMIN: all employees
    - EMPLOYEE: only own records

    Times are HH:MM:SS in the configured timezone, hours have two decimals,
    and missing values are written as N/A.
    """
    rows = get_attendance_rows(
        db=db,
        actor_id=current_user.id,
        from_date=from_date,
        to_date=to_date,
        user_id=user_id,
    )

    log_audit(
        db=db,
        actor_id=current_user.id,
        action="REPORT_EXPORT",
        entity_type="report",
        entity_id=None,
        meta={
            "report_type": "attendance",
            "from_date": from_date,
            "to_date": to_date,
            "user_id": user_id,
            "row_count": len(rows)
        }
    )

    return stream_csv(
        headers=ATTENDANCE_CSV_HEADERS,
        rows=rows,
        filename=attendance_filename(user_id),
        missing=MISSING,
    )
