"""
Dashboard schemas
"""
from datetime import date
from typing import List, Optional
from pydantic import BaseModel

from app.schemas.attendance import AttendanceOut


class EmployeeDashboardOut(BaseModel):
    today_status: str  # attendance status or "not marked"
    today: Optional[AttendanceOut] = None
    present_days: int
    absent_days: int
    late_days: int
    total_hours: float


class TrendPoint(BaseModel):
    date: date
    present: int
    absent: int
    late: int


class DistributionSlice(BaseModel):
    name: str
    value: int


class ManagerDashboardOut(BaseModel):
    total_employees: int
    present_today: int
    absent_today: int
    late_today: int
    attendance_rate: int  # percent of employees present today
    weekly_trend: List[TrendPoint]
    monthly_distribution: List[DistributionSlice]
