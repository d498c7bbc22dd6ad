"""
Tests for late marking and total hours derivation
"""
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from app.models.attendance import AttendanceStatus
from app.services.attendance_rules import (
    LateThreshold,
    check_in_status,
    derive_total_hours,
    is_late,
    override_original_status,
)

UTC = ZoneInfo("UTC")
THRESHOLD = LateThreshold(9, 15)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def test_exact_threshold_is_not_late():
    assert is_late(utc(2024, 1, 1, 9, 15, 0), THRESHOLD, UTC) is False


def test_one_second_after_threshold_is_late():
    assert is_late(utc(2024, 1, 1, 9, 15, 1), THRESHOLD, UTC) is True


def test_before_threshold_is_present():
    assert check_in_status(utc(2024, 1, 1, 8, 59), THRESHOLD, UTC) == AttendanceStatus.PRESENT


def test_after_threshold_is_late():
    assert check_in_status(utc(2024, 1, 1, 9, 20), THRESHOLD, UTC) == AttendanceStatus.LATE


def test_naive_datetime_treated_as_utc():
    assert is_late(datetime(2024, 1, 1, 9, 16), THRESHOLD, UTC) is True
    assert is_late(datetime(2024, 1, 1, 9, 14), THRESHOLD, UTC) is False


def test_wall_clock_uses_configured_timezone():
    kolkata = ZoneInfo("Asia/Kolkata")
    # 03:50 UTC is 09:20 in Kolkata (+05:30)
    assert is_late(utc(2024, 1, 1, 3, 50), THRESHOLD, kolkata) is True
    # 03:40 UTC is 09:10 in Kolkata
    assert is_late(utc(2024, 1, 1, 3, 40), THRESHOLD, kolkata) is False


def test_total_hours_full_day():
    hours = derive_total_hours(utc(2024, 1, 1, 9, 20), utc(2024, 1, 1, 17, 20))
    assert hours == pytest.approx(8.0)


def test_total_hours_fractional_not_rounded():
    hours = derive_total_hours(utc(2024, 1, 1, 9, 0), utc(2024, 1, 1, 9, 20))
    assert hours == pytest.approx(1 / 3)


def test_total_hours_unset_without_check_out():
    assert derive_total_hours(utc(2024, 1, 1, 9, 0), None) is None
    assert derive_total_hours(None, utc(2024, 1, 1, 17, 0)) is None


def test_threshold_from_value_defaults():
    default = LateThreshold()
    assert LateThreshold.from_value(None, default) == default
    assert LateThreshold.from_value({}, default) == default
    assert LateThreshold.from_value({"hours": 10}, default) == LateThreshold(10, 0)
    assert LateThreshold.from_value({"hours": 8, "minutes": 45}, default) == LateThreshold(8, 45)
    assert LateThreshold.from_value({"hours": 99, "minutes": 0}, default) == default
    assert LateThreshold.from_value({"hours": "x"}, default) == default


@pytest.mark.parametrize("hours,minutes", [(-1, 0), (24, 0), (9, 60), (9, -5)])
def test_threshold_rejects_out_of_range(hours, minutes):
    with pytest.raises(ValueError):
        LateThreshold(hours, minutes)


def test_override_original_status_only_on_change():
    assert override_original_status("present", "absent") == "present"
    assert override_original_status("present", "present") is None
