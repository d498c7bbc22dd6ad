"""
Dashboard service - per-user and team attendance statistics
"""
from collections import Counter
from datetime import date, timedelta
from typing import Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.constants import ROLE_EMPLOYEE
from app.models.attendance import AttendanceRecord, AttendanceStatus
from app.models.profile import Profile
from app.services import attendance_service
from app.services.access_policy import is_privileged
from app.utils.datetime_utils import local_date

NOT_MARKED = "not marked"
TREND_DAYS = 7

PRESENT = AttendanceStatus.PRESENT.value
ABSENT = AttendanceStatus.ABSENT.value
LATE = AttendanceStatus.LATE.value


def employee_dashboard(db: Session, user_id: int, today: Optional[date] = None) -> Dict:
    """Today's status and month-to-date counts for one user"""
    today = today or local_date()
    today_record = attendance_service.get_record_for_date(db, user_id, today)
    month_records = attendance_service.list_my(db, user_id, today.replace(day=1), today)
    counts = Counter(record.status for record in month_records)

    return {
        "today_status": today_record.status if today_record else NOT_MARKED,
        "today": today_record,
        "present_days": counts[PRESENT],
        "absent_days": counts[ABSENT],
        "late_days": counts[LATE],
        "total_hours": sum(record.total_hours or 0 for record in month_records),
    }


def _statuses_between(db: Session, start: date, end: date) -> List[AttendanceRecord]:
    return db.query(AttendanceRecord).filter(
        AttendanceRecord.date >= start,
        AttendanceRecord.date <= end,
    ).all()


def manager_dashboard(db: Session, actor_id: int, today: Optional[date] = None) -> Dict:
    """
    Team statistics for managers and admins

    Returns today's totals, a 7-day trend ending today and the month-to-date
    status distribution.

    Raises:
        HTTPException: 403 unless the actor is manager/admin
    """
    if not is_privileged(db, actor_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: manager or admin role required"
        )

    today = today or local_date()
    total_employees = db.query(Profile).filter(Profile.role == ROLE_EMPLOYEE).count()

    trend_start = today - timedelta(days=TREND_DAYS - 1)
    month_start = today.replace(day=1)
    records = _statuses_between(db, min(trend_start, month_start), today)

    today_counts = Counter(r.status for r in records if r.date == today)

    trend = []
    for offset in range(TREND_DAYS - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_counts = Counter(r.status for r in records if r.date == day)
        trend.append({
            "date": day,
            "present": day_counts[PRESENT],
            "absent": day_counts[ABSENT],
            "late": day_counts[LATE],
        })

    month_counts = Counter(r.status for r in records if r.date >= month_start)
    distribution = [
        {"name": "Present", "value": month_counts[PRESENT]},
        {"name": "Late", "value": month_counts[LATE]},
        {"name": "Absent", "value": month_counts[ABSENT]},
    ]

    present_today = today_counts[PRESENT]
    return {
        "total_employees": total_employees,
        "present_today": present_today,
        "absent_today": today_counts[ABSENT],
        "late_today": today_counts[LATE],
        "attendance_rate": round(present_today / total_employees * 100) if total_employees else 0,
        "weekly_trend": trend,
        "monthly_distribution": distribution,
    }
