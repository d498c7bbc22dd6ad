"""
Database initialization helpers
Seed the late threshold and an initial admin when none exists
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.constants import ROLE_ADMIN
from app.core.config import settings
from app.core.security import hash_password
from app.models.user import User
from app.models.user_role import AppRole, UserRole
from app.services.registration_service import provision_profile
from app.services.settings_service import seed_late_threshold
from app.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)

INITIAL_ADMIN_NAME = "System Administrator"
INITIAL_ADMIN_DEPARTMENT = "Administration"


def admin_exists(db: Session) -> bool:
    return db.query(UserRole.id).filter(UserRole.role == ROLE_ADMIN).first() is not None


def bootstrap_initial_admin(
    db: Session,
    email: Optional[str] = None,
    password: Optional[str] = None,
) -> Optional[User]:
    """
    Create the initial admin identity if no admin role exists

    Returns the created user, or None when an admin already exists. An
    existing user with the same email is promoted instead of recreated.
    """
    if admin_exists(db):
        logger.info("Admin user already exists, skipping initial bootstrap")
        return None

    email = (email or settings.INITIAL_ADMIN_EMAIL).strip().lower()
    password = password or settings.INITIAL_ADMIN_PASSWORD

    user = db.query(User).filter(User.email == email).first()
    if user is not None:
        db.add(UserRole(user_id=user.id, role=AppRole.ADMIN.value, created_at=now_utc()))
        if user.profile is not None:
            user.profile.role = AppRole.ADMIN.value
        db.commit()
        logger.info("Promoted existing user %s to admin", user.id)
        return user

    user = User(
        email=email,
        password_hash=hash_password(password),
        active=True,
        created_at=now_utc(),
    )
    db.add(user)
    db.flush()
    profile = provision_profile(
        db,
        user,
        name=INITIAL_ADMIN_NAME,
        department=INITIAL_ADMIN_DEPARTMENT,
        role=AppRole.ADMIN,
    )
    db.commit()
    db.refresh(user)

    logger.info("Initial admin user created: %s (%s)", email, profile.employee_code)
    logger.info("Password: [set via INITIAL_ADMIN_PASSWORD environment variable]")
    return user


def init_db(db: Session) -> None:
    """
    Seed defaults: the late threshold setting and an initial admin

    Safe to run repeatedly.
    """
    seed_late_threshold(db)
    bootstrap_initial_admin(db)
