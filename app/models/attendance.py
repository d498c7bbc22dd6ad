"""
Attendance record model (one row per user per calendar date)
"""
from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, String, Float, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from app.db.base import Base


class AttendanceStatus(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    HALF_DAY = "half-day"


class AttendanceRecord(Base):
    __tablename__ = "attendance"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)  # calendar date in settings.TZ
    check_in_time = Column(DateTime(timezone=True), nullable=True)  # UTC
    check_out_time = Column(DateTime(timezone=True), nullable=True)  # UTC
    status = Column(String, nullable=False, default=AttendanceStatus.PRESENT.value)
    total_hours = Column(Float, nullable=True)  # derived; unset until check-out
    notes = Column(Text, nullable=True)

    # Audit override fields, written only by manager/admin edits
    modified_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    modified_at = Column(DateTime(timezone=True), nullable=True)
    original_status = Column(String, nullable=True)
    modification_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_attendance_user_date"),
    )

    # Relationships
    user = relationship("User", foreign_keys=[user_id], backref="attendance_records")
    modifier = relationship("User", foreign_keys=[modified_by])
