"""
Tests for dashboard statistics
"""
from datetime import date

import pytest
from fastapi import status

from app.models.attendance import AttendanceRecord


def get_auth_token(client, email, password="testpass123"):
    """Helper to get auth token"""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": password}
    )
    return response.json()["access_token"]


def auth(client, email):
    return {"Authorization": f"Bearer {get_auth_token(client, email)}"}


@pytest.fixture
def march(db, employee, other_employee):
    entries = [
        (employee, date(2024, 2, 28), "present", 8.0),  # previous month
        (employee, date(2024, 3, 1), "present", 8.0),
        (employee, date(2024, 3, 4), "late", 7.0),
        (employee, date(2024, 3, 5), "absent", None),
        (employee, date(2024, 3, 6), "present", 8.5),
        (other_employee, date(2024, 3, 5), "late", 6.0),
        (other_employee, date(2024, 3, 6), "absent", None),
    ]
    for user, day, record_status, hours in entries:
        db.add(AttendanceRecord(user_id=user.id, date=day, status=record_status, total_hours=hours))
    db.commit()


def test_employee_dashboard(client, db, employee, march, clock):
    clock.set(2024, 3, 6, 12, 0)
    response = client.get("/api/v1/dashboard/employee", headers=auth(client, employee.email))
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["today_status"] == "present"
    assert data["today"]["date"] == "2024-03-06"
    assert data["present_days"] == 2
    assert data["late_days"] == 1
    assert data["absent_days"] == 1
    assert data["total_hours"] == pytest.approx(23.5)


def test_employee_dashboard_not_marked(client, db, employee, clock):
    clock.set(2024, 3, 7, 12, 0)
    data = client.get("/api/v1/dashboard/employee", headers=auth(client, employee.email)).json()
    assert data["today_status"] == "not marked"
    assert data["today"] is None
    assert data["total_hours"] == 0


def test_manager_dashboard(client, db, manager, march, clock):
    clock.set(2024, 3, 6, 12, 0)
    response = client.get("/api/v1/dashboard/manager", headers=auth(client, manager.email))
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["total_employees"] == 2
    assert data["present_today"] == 1
    assert data["absent_today"] == 1
    assert data["late_today"] == 0
    assert data["attendance_rate"] == 50

    trend = data["weekly_trend"]
    assert [point["date"] for point in trend] == [
        "2024-02-29", "2024-03-01", "2024-03-02", "2024-03-03",
        "2024-03-04", "2024-03-05", "2024-03-06",
    ]
    assert trend[5] == {"date": "2024-03-05", "present": 0, "absent": 1, "late": 1}

    assert data["monthly_distribution"] == [
        {"name": "Present", "value": 2},
        {"name": "Late", "value": 2},
        {"name": "Absent", "value": 2},
    ]


def test_manager_dashboard_forbidden_for_employee(client, db, employee):
    response = client.get("/api/v1/dashboard/manager", headers=auth(client, employee.email))
    assert response.status_code == status.HTTP_403_FORBIDDEN
