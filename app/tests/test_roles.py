"""
Tests for role grants and role lookups
"""
import pytest
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.audit_log import AuditLog
from app.models.user_role import AppRole, UserRole
from app.services.access_policy import has_role, is_privileged
from app.services.role_service import grant_role


def get_auth_token(client, email, password="testpass123"):
    """Helper to get auth token"""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": password}
    )
    return response.json()["access_token"]


def auth(client, email):
    return {"Authorization": f"Bearer {get_auth_token(client, email)}"}


def test_employee_cannot_grant_roles(client, db, employee, other_employee):
    before = db.query(UserRole).count()
    response = client.post(
        "/api/v1/roles",
        json={"user_id": employee.id, "role": "admin"},
        headers=auth(client, employee.email),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert db.query(UserRole).count() == before
    assert not has_role(db, employee.id, AppRole.ADMIN)


def test_manager_grants_role(client, db, manager, employee):
    response = client.post(
        "/api/v1/roles",
        json={"user_id": employee.id, "role": "manager"},
        headers=auth(client, manager.email),
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["role"] == "manager"
    assert response.json()["user_id"] == employee.id
    assert is_privileged(db, employee.id)
    assert db.query(AuditLog).filter(AuditLog.action == "ROLE_GRANT").count() == 1


def test_duplicate_grant_409(client, db, admin, employee):
    response = client.post(
        "/api/v1/roles",
        json={"user_id": employee.id, "role": "employee"},
        headers=auth(client, admin.email),
    )
    assert response.status_code == status.HTTP_409_CONFLICT


def test_grant_to_unknown_user_404(client, db, admin):
    response = client.post(
        "/api/v1/roles",
        json={"user_id": 9999, "role": "manager"},
        headers=auth(client, admin.email),
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_grant_unknown_role_422(client, db, admin, employee):
    response = client.post(
        "/api/v1/roles",
        json={"user_id": employee.id, "role": "superuser"},
        headers=auth(client, admin.email),
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_grant_role_service_rejects_non_privileged(db: Session, employee, other_employee):
    with pytest.raises(HTTPException) as exc_info:
        grant_role(db, actor_id=employee.id, user_id=other_employee.id, role=AppRole.MANAGER)
    assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN


def test_any_user_can_list_roles(client, db, employee, make_user):
    multi = make_user("multi@company.com", roles=("employee", "manager"))
    response = client.get(f"/api/v1/roles/user/{multi.id}", headers=auth(client, employee.email))
    assert response.status_code == status.HTTP_200_OK
    assert sorted(r["role"] for r in response.json()) == ["employee", "manager"]


def test_my_roles_flags(client, db, employee, admin):
    data = client.get("/api/v1/auth/me/roles", headers=auth(client, employee.email)).json()
    assert data["roles"] == ["employee"]
    assert data["is_employee"] is True
    assert data["is_manager"] is False

    data = client.get("/api/v1/auth/me/roles", headers=auth(client, admin.email)).json()
    assert data["roles"] == ["admin"]
    assert data["is_manager"] is True
