"""
Tests for the access rule table
"""
import pytest
from fastapi import HTTPException

from app.services.access_policy import (
    Action,
    Resource,
    authorize,
    has_role,
    is_allowed,
    is_privileged,
    visible_owner_ids,
)


def test_has_role_and_is_privileged(db, employee, manager, admin):
    assert has_role(db, employee.id, "employee")
    assert not has_role(db, employee.id, "manager")
    assert not is_privileged(db, employee.id)
    assert is_privileged(db, manager.id)
    assert is_privileged(db, admin.id)


@pytest.mark.parametrize("action,owner_allowed,stranger_allowed,manager_allowed", [
    (Action.READ, True, False, True),
    (Action.INSERT, True, False, False),
    (Action.UPDATE, True, False, True),
    (Action.DELETE, False, False, True),
])
def test_attendance_rules(db, employee, other_employee, manager, action,
                          owner_allowed, stranger_allowed, manager_allowed):
    owner = employee.id
    assert is_allowed(db, employee.id, Resource.ATTENDANCE, action, owner) is owner_allowed
    assert is_allowed(db, other_employee.id, Resource.ATTENDANCE, action, owner) is stranger_allowed
    assert is_allowed(db, manager.id, Resource.ATTENDANCE, action, owner) is manager_allowed


def test_role_grants_are_privileged_and_insert_only(db, employee, admin):
    assert is_allowed(db, employee.id, Resource.USER_ROLES, Action.READ)
    assert not is_allowed(db, employee.id, Resource.USER_ROLES, Action.INSERT)
    assert is_allowed(db, admin.id, Resource.USER_ROLES, Action.INSERT)
    assert not is_allowed(db, admin.id, Resource.USER_ROLES, Action.UPDATE)
    assert not is_allowed(db, admin.id, Resource.USER_ROLES, Action.DELETE)


def test_settings_readable_by_all_writable_by_privileged(db, employee, manager):
    assert is_allowed(db, employee.id, Resource.SETTINGS, Action.READ)
    assert not is_allowed(db, employee.id, Resource.SETTINGS, Action.UPDATE)
    assert is_allowed(db, manager.id, Resource.SETTINGS, Action.UPDATE)


def test_authorize_raises_403(db, employee):
    with pytest.raises(HTTPException) as exc_info:
        authorize(db, employee.id, Resource.ATTENDANCE, Action.DELETE)
    assert exc_info.value.status_code == 403


def test_visible_owner_ids(db, employee, manager):
    assert visible_owner_ids(db, employee.id, Resource.ATTENDANCE) == [employee.id]
    assert visible_owner_ids(db, manager.id, Resource.ATTENDANCE) is None
    assert visible_owner_ids(db, employee.id, Resource.PROFILES) is None
    assert visible_owner_ids(db, employee.id, Resource.INVITATIONS) == []
