"""
Derived attendance fields: lateness and total hours.

Pure functions, called by the attendance write path right before a row is
persisted. Nothing here touches the database; the late threshold is loaded by
settings_service and passed in.
"""
from dataclasses import dataclass
from datetime import datetime, time, timezone
from typing import Any, Mapping, Optional
from zoneinfo import ZoneInfo

from app.models.attendance import AttendanceStatus

DEFAULT_LATE_HOURS = 9
DEFAULT_LATE_MINUTES = 15


@dataclass(frozen=True)
class LateThreshold:
    """Time of day after which a check-in counts as late."""
    hours: int = DEFAULT_LATE_HOURS
    minutes: int = DEFAULT_LATE_MINUTES

    def __post_init__(self):
        if not 0 <= self.hours <= 23:
            raise ValueError("hours must be between 0 and 23")
        if not 0 <= self.minutes <= 59:
            raise ValueError("minutes must be between 0 and 59")

    @property
    def as_time(self) -> time:
        return time(self.hours, self.minutes)

    @classmethod
    def from_value(cls, value: Optional[Mapping[str, Any]], default: "LateThreshold") -> "LateThreshold":
        """
        Build from a stored JSON value ({"hours": 9, "minutes": 15}).

        A missing or unusable value falls back to `default`; missing minutes mean 0.
        """
        if not value or value.get("hours") is None:
            return default
        try:
            return cls(hours=int(value["hours"]), minutes=int(value.get("minutes") or 0))
        except (TypeError, ValueError):
            return default

    def to_value(self) -> dict:
        return {"hours": self.hours, "minutes": self.minutes}


def wall_clock(instant: datetime, tz: ZoneInfo) -> time:
    """Time of day of `instant` in `tz`; naive instants are taken as UTC."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(tz).time()


def is_late(check_in: datetime, threshold: LateThreshold, tz: ZoneInfo) -> bool:
    """True iff the check-in time of day is strictly after the threshold (9:15:00 is on time)."""
    return wall_clock(check_in, tz) > threshold.as_time


def check_in_status(check_in: datetime, threshold: LateThreshold, tz: ZoneInfo) -> AttendanceStatus:
    return AttendanceStatus.LATE if is_late(check_in, threshold, tz) else AttendanceStatus.PRESENT


def derive_total_hours(check_in: Optional[datetime], check_out: Optional[datetime]) -> Optional[float]:
    """
    Hours between check-in and check-out, unrounded.

    Returns None (not 0) unless both timestamps are present.
    """
    if check_in is None or check_out is None:
        return None
    if check_in.tzinfo is None:
        check_in = check_in.replace(tzinfo=timezone.utc)
    if check_out.tzinfo is None:
        check_out = check_out.replace(tzinfo=timezone.utc)
    return (check_out - check_in).total_seconds() / 3600


def override_original_status(current_status: str, new_status: str) -> Optional[str]:
    """Prior status to record on a manager edit: kept only when the status actually changes."""
    return current_status if current_status != new_status else None
