"""
Tests for the attendance CSV export
"""
import csv
import io
from datetime import date, datetime, timezone

import pytest
from fastapi import status

from app.models.attendance import AttendanceRecord
from app.services.report_service import ATTENDANCE_CSV_HEADERS


def get_auth_token(client, email, password="testpass123"):
    """Helper to get auth token"""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": password}
    )
    return response.json()["access_token"]


def auth(client, email):
    return {"Authorization": f"Bearer {get_auth_token(client, email)}"}


def parse_csv(text):
    return list(csv.DictReader(io.StringIO(text)))


@pytest.fixture
def records(db, employee, other_employee):
    rows = [
        AttendanceRecord(
            user_id=employee.id,
            date=date(2024, 1, 1),
            check_in_time=datetime(2024, 1, 1, 9, 20, tzinfo=timezone.utc),
            check_out_time=datetime(2024, 1, 1, 17, 30, tzinfo=timezone.utc),
            status="late",
            total_hours=8 + 10 / 60,
        ),
        AttendanceRecord(
            user_id=employee.id,
            date=date(2024, 1, 2),
            check_in_time=datetime(2024, 1, 2, 8, 55, 5, tzinfo=timezone.utc),
            status="present",
        ),
        AttendanceRecord(
            user_id=other_employee.id,
            date=date(2024, 1, 1),
            status="absent",
        ),
    ]
    db.add_all(rows)
    db.commit()
    return rows


def test_csv_columns_and_formatting(client, db, manager, employee, records):
    response = client.get("/api/v1/reports/attendance.csv", headers=auth(client, manager.email))
    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="all_employees_attendance.csv"' in response.headers["content-disposition"]

    lines = response.text.splitlines()
    assert lines[0] == ",".join(ATTENDANCE_CSV_HEADERS)

    rows = parse_csv(response.text)
    assert len(rows) == 3
    assert [r["Date"] for r in rows] == sorted((r["Date"] for r in rows), reverse=True)

    late = next(r for r in rows if r["Status"] == "late")
    assert late["Employee Name"] == "Alice Employee"
    assert late["Employee ID"] == employee.profile.employee_code
    assert late["Department"] == "Engineering"
    assert late["Check In"] == "09:20:00"
    assert late["Check Out"] == "17:30:00"
    assert late["Total Hours"] == "8.17"

    open_day = next(r for r in rows if r["Status"] == "present")
    assert open_day["Check In"] == "08:55:05"
    assert open_day["Check Out"] == "N/A"
    assert open_day["Total Hours"] == "N/A"

    absent = next(r for r in rows if r["Status"] == "absent")
    assert absent["Check In"] == "N/A"


def test_csv_filtered_by_user_and_range(client, db, admin, employee, records):
    response = client.get(
        "/api/v1/reports/attendance.csv",
        params={"user_id": employee.id, "from": "2024-01-02", "to": "2024-01-31"},
        headers=auth(client, admin.email),
    )
    assert f'filename="employee_{employee.id}_attendance.csv"' in response.headers["content-disposition"]
    rows = parse_csv(response.text)
    assert [r["Date"] for r in rows] == ["2024-01-02"]


def test_employee_export_scoped_to_own_rows(client, db, employee, records):
    response = client.get("/api/v1/reports/attendance.csv", headers=auth(client, employee.email))
    rows = parse_csv(response.text)
    assert len(rows) == 2
    assert {r["Employee Name"] for r in rows} == {"Alice Employee"}


def test_employee_cannot_export_other_user(client, db, employee, other_employee, records):
    response = client.get(
        "/api/v1/reports/attendance.csv",
        params={"user_id": other_employee.id},
        headers=auth(client, employee.email),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_invalid_range_rejected(client, db, manager):
    response = client.get(
        "/api/v1/reports/attendance.csv",
        params={"from": "2024-02-01", "to": "2024-01-01"},
        headers=auth(client, manager.email),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_empty_export_has_header_only(client, db, manager):
    response = client.get("/api/v1/reports/attendance.csv", headers=auth(client, manager.email))
    assert response.text.splitlines() == [",".join(ATTENDANCE_CSV_HEADERS)]
