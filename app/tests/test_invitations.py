"""
Tests for the invitation workflow
"""
import re
from datetime import timedelta

from fastapi import status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import decode_token
from app.models.invitation import Invitation
from app.models.profile import Profile
from app.models.user_role import UserRole
from app.services import invitation_service


def get_auth_token(client, email, password="testpass123"):
    """Helper to get auth token"""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": password}
    )
    return response.json()["access_token"]


def auth(client, email):
    return {"Authorization": f"Bearer {get_auth_token(client, email)}"}


def invite(client, inviter, **overrides):
    payload = {
        "email": "invitee@company.com",
        "name": "Ivy Invitee",
        "department": "Research",
        "role": "manager",
    }
    payload.update(overrides)
    return client.post("/api/v1/invitations", json=payload, headers=auth(client, inviter.email))


def signup(client, email, token=None, **fields):
    payload = {"email": email, "password": "secret123", **fields}
    if token:
        payload["invite_token"] = token
    return client.post("/api/v1/auth/signup", json=payload)


def test_manager_creates_invitation(client, db, manager, clock):
    response = invite(client, manager)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert re.fullmatch(r"[0-9a-f]{64}", data["token"])
    assert data["status"] == "pending"
    assert data["invited_by"] == manager.id
    assert data["link"] == f"{settings.APP_BASE_URL}/auth?invite={data['token']}"

    invitation = db.query(Invitation).one()
    expected_expiry = clock.current + timedelta(days=7)
    assert invitation.expires_at.replace(tzinfo=None) == expected_expiry.replace(tzinfo=None)


def test_tokens_are_unique():
    tokens = {invitation_service.generate_token() for _ in range(50)}
    assert len(tokens) == 50


def test_employee_cannot_invite(client, db, employee):
    response = invite(client, employee)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert db.query(Invitation).count() == 0


def test_employee_cannot_list_invitations(client, db, employee):
    response = client.get("/api/v1/invitations", headers=auth(client, employee.email))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_invitation_validation(client, db, manager):
    assert invite(client, manager, email="bad").status_code == 422
    assert invite(client, manager, name="").status_code == 422
    assert invite(client, manager, name="   ").status_code == 422
    assert invite(client, manager, department="x" * 101).status_code == 422
    assert invite(client, manager, role="owner").status_code == 422


def test_signup_with_invitation_grants_role(client, db: Session, manager, clock):
    token = invite(client, manager).json()["token"]
    clock.set(2024, 1, 3, 10, 0)

    response = signup(client, "whatever@company.com", token=token, name="Ignored", department="Ignored")
    assert response.status_code == status.HTTP_201_CREATED
    user_id = int(decode_token(response.json()["access_token"])["sub"])

    profile = db.query(Profile).filter(Profile.id == user_id).one()
    assert profile.email == "invitee@company.com"
    assert profile.name == "Ivy Invitee"
    assert profile.department == "Research"
    assert profile.role == "manager"
    assert [r.role for r in db.query(UserRole).filter(UserRole.user_id == user_id)] == ["manager"]

    invitation = db.query(Invitation).one()
    db.refresh(invitation)
    assert invitation.status == "accepted"


def test_invitation_token_is_single_use(client, db: Session, manager):
    token = invite(client, manager).json()["token"]
    assert signup(client, "first@company.com", token=token).status_code == 201

    response = signup(client, "second@company.com", token=token, name="Second")
    assert response.status_code == status.HTTP_201_CREATED
    user_id = int(decode_token(response.json()["access_token"])["sub"])
    profile = db.query(Profile).filter(Profile.id == user_id).one()
    assert profile.email == "second@company.com"
    assert profile.role == "employee"


def test_expired_pending_invitation_not_usable(client, db: Session, manager, clock):
    token = invite(client, manager).json()["token"]
    clock.set(2024, 1, 9, 8, 1)  # one day past expiry

    assert invitation_service.lookup_pending(db, token) is None
    lookup = client.get(f"/api/v1/invitations/lookup/{token}")
    assert lookup.status_code == status.HTTP_200_OK
    assert lookup.json() is None

    response = signup(client, "late.joiner@company.com", token=token, name="Late Joiner")
    assert response.status_code == status.HTTP_201_CREATED
    user_id = int(decode_token(response.json()["access_token"])["sub"])
    profile = db.query(Profile).filter(Profile.id == user_id).one()
    assert profile.role == "employee"
    assert profile.name == "Late Joiner"

    # Expiry is lazy: the stored status is untouched, listings report it as expired
    invitation = db.query(Invitation).one()
    db.refresh(invitation)
    assert invitation.status == "pending"
    listed = client.get("/api/v1/invitations", headers=auth(client, manager.email)).json()
    assert [i["status"] for i in listed] == ["expired"]


def test_lookup_returns_prefill_for_pending(client, db, manager):
    token = invite(client, manager).json()["token"]
    response = client.get(f"/api/v1/invitations/lookup/{token}")
    assert response.json() == {
        "email": "invitee@company.com",
        "name": "Ivy Invitee",
        "department": "Research",
        "role": "manager",
    }


def test_lookup_unknown_token(client, db):
    assert client.get("/api/v1/invitations/lookup/deadbeef").json() is None
