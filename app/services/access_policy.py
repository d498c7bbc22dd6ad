"""
Access policy: role predicates and per-table access rules.

Every service checks this table before it reads or writes. A rule that
evaluates false rejects the operation with 403 before anything is changed.
List queries are narrowed to the rows the caller may see instead.

    resource      read                  insert       update                delete
    attendance    owner|manager|admin   owner        owner|manager|admin   manager|admin
    user_roles    authenticated         manager|admin  -                   -
    profiles      authenticated         owner        owner|manager|admin   -
    settings      authenticated         manager|admin  manager|admin       manager|admin
    invitations   manager|admin         manager|admin  manager|admin       -
"""
import enum
import logging
from typing import Callable, Dict, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.constants import PRIVILEGED_ROLES
from app.models.user_role import UserRole, AppRole
from app.utils.enums import enum_to_str

logger = logging.getLogger(__name__)


class Action(str, enum.Enum):
    READ = "read"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class Resource(str, enum.Enum):
    ATTENDANCE = "attendance"
    USER_ROLES = "user_roles"
    PROFILES = "profiles"
    SETTINGS = "settings"
    INVITATIONS = "invitations"


def has_role(db: Session, user_id: int, role) -> bool:
    """True iff a user_roles row exists for (user_id, role)."""
    return db.query(UserRole.id).filter(
        UserRole.user_id == user_id,
        UserRole.role == enum_to_str(role),
    ).first() is not None


def get_user_roles(db: Session, user_id: int) -> List[str]:
    """All roles granted to a user, alphabetically."""
    rows = db.query(UserRole.role).filter(UserRole.user_id == user_id).order_by(UserRole.role).all()
    return [role for (role,) in rows]


def is_privileged(db: Session, user_id: int) -> bool:
    """Manager or admin."""
    return db.query(UserRole.id).filter(
        UserRole.user_id == user_id,
        UserRole.role.in_(PRIVILEGED_ROLES),
    ).first() is not None


# Rule signature: (db, actor_id, owner_id) -> bool
Rule = Callable[[Session, int, Optional[int]], bool]


def _authenticated(db: Session, actor_id: int, owner_id: Optional[int]) -> bool:
    return True


def _owner(db: Session, actor_id: int, owner_id: Optional[int]) -> bool:
    return owner_id is not None and actor_id == owner_id


def _privileged(db: Session, actor_id: int, owner_id: Optional[int]) -> bool:
    return is_privileged(db, actor_id)


def _owner_or_privileged(db: Session, actor_id: int, owner_id: Optional[int]) -> bool:
    return _owner(db, actor_id, owner_id) or is_privileged(db, actor_id)


RULES: Dict[Tuple[Resource, Action], Rule] = {
    (Resource.ATTENDANCE, Action.READ): _owner_or_privileged,
    (Resource.ATTENDANCE, Action.INSERT): _owner,
    (Resource.ATTENDANCE, Action.UPDATE): _owner_or_privileged,
    (Resource.ATTENDANCE, Action.DELETE): _privileged,
    (Resource.USER_ROLES, Action.READ): _authenticated,
    (Resource.USER_ROLES, Action.INSERT): _privileged,
    (Resource.PROFILES, Action.READ): _authenticated,
    (Resource.PROFILES, Action.INSERT): _owner,
    (Resource.PROFILES, Action.UPDATE): _owner_or_privileged,
    (Resource.SETTINGS, Action.READ): _authenticated,
    (Resource.SETTINGS, Action.INSERT): _privileged,
    (Resource.SETTINGS, Action.UPDATE): _privileged,
    (Resource.SETTINGS, Action.DELETE): _privileged,
    (Resource.INVITATIONS, Action.READ): _privileged,
    (Resource.INVITATIONS, Action.INSERT): _privileged,
    (Resource.INVITATIONS, Action.UPDATE): _privileged,
}


def is_allowed(
    db: Session,
    actor_id: int,
    resource: Resource,
    action: Action,
    owner_id: Optional[int] = None,
) -> bool:
    """Evaluate the rule for (resource, action). Combinations without a rule are denied."""
    rule = RULES.get((resource, action))
    if rule is None:
        return False
    return rule(db, actor_id, owner_id)


def authorize(
    db: Session,
    actor_id: int,
    resource: Resource,
    action: Action,
    owner_id: Optional[int] = None,
) -> None:
    """
    Raise 403 unless the actor may perform `action` on `resource`.

    Raises:
        HTTPException: 403 Forbidden
    """
    if not is_allowed(db, actor_id, resource, action, owner_id):
        logger.info(
            "Access denied: actor=%s action=%s resource=%s owner=%s",
            actor_id, action.value, resource.value, owner_id,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Access denied: cannot {action.value} {resource.value}",
        )


def visible_owner_ids(db: Session, actor_id: int, resource: Resource) -> Optional[List[int]]:
    """
    Owner ids whose rows the actor may read, or None when every row is visible.

    Used to narrow list queries the same way a read rule narrows single rows.
    """
    rule = RULES.get((resource, Action.READ))
    if rule is _authenticated:
        return None
    if rule in (_privileged, _owner_or_privileged) and is_privileged(db, actor_id):
        return None
    if rule in (_owner, _owner_or_privileged):
        return [actor_id]
    return []


__all__ = [
    "Action",
    "Resource",
    "AppRole",
    "has_role",
    "get_user_roles",
    "is_privileged",
    "is_allowed",
    "authorize",
    "visible_owner_ids",
]
