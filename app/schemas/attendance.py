"""
Attendance schemas. All datetimes are serialized in the configured timezone.
"""
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_serializer

from app.models.attendance import AttendanceStatus
from app.utils.datetime_utils import iso_local


class AttendanceOut(BaseModel):
    """Schema for attendance output"""
    id: int
    user_id: int
    date: date
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    status: str
    total_hours: Optional[float] = None
    notes: Optional[str] = None
    modified_by: Optional[int] = None
    modified_at: Optional[datetime] = None
    original_status: Optional[str] = None
    modification_reason: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("check_in_time", "check_out_time", "modified_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt: Optional[datetime]) -> Optional[str]:
        return iso_local(dt)


class AttendanceUpdate(BaseModel):
    """
    Edit an attendance record.

    Setting `status` is a privileged override and requires `reason`
    (3-500 characters after trimming). `notes` may be set by the owner.
    """
    status: Optional[AttendanceStatus] = None
    reason: Optional[str] = Field(None, description="Why the status was changed")
    notes: Optional[str] = Field(None, max_length=1000)


class AttendanceSummary(BaseModel):
    """Per-status day counts"""
    present: int = 0
    absent: int = 0
    late: int = 0
    half_day: int = 0
    total_hours: float = 0.0


class MyAttendanceResponse(BaseModel):
    items: List[AttendanceOut]
    summary: AttendanceSummary


class TeamAttendanceItem(AttendanceOut):
    """Attendance row joined with the owner's profile and the modifier's name"""
    employee_name: str
    employee_code: str
    department: str
    modifier_name: Optional[str] = None


class TeamAttendanceResponse(BaseModel):
    items: List[TeamAttendanceItem]
    total: int


class AuditEntryOut(BaseModel):
    id: int
    actor_id: int
    action: str
    entity_type: str
    entity_id: Optional[int] = None
    meta_json: Optional[Dict[str, Any]] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt: Optional[datetime]) -> Optional[str]:
        return iso_local(dt)
