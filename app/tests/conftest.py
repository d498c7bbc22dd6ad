"""
Pytest configuration and fixtures
"""
import os

# Settings are read at import time; configure before the app is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-pytest-0123456789abcdef")
os.environ["APP_ENV"] = "local"
os.environ["TZ"] = "UTC"

from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.main import app  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.core.deps import get_db  # noqa: E402
from app.core.security import hash_password  # noqa: E402

# Import all models to ensure they're registered with Base.metadata
from app.models import (  # noqa: E402,F401
    User,
    Profile,
    UserRole,
    AppRole,
    AttendanceRecord,
    Invitation,
    Setting,
    AuditLog,
)
from app.services.registration_service import provision_profile  # noqa: E402
from app.services.role_service import add_role  # noqa: E402


# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# Enable foreign keys for SQLite
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_PASSWORD = "testpass123"

# Modules that bind now_utc by name; the clock fixture patches all of them
CLOCK_TARGETS = (
    "app.utils.datetime_utils.now_utc",
    "app.services.attendance_service.now_utc",
    "app.services.audit_service.now_utc",
    "app.services.invitation_service.now_utc",
    "app.services.registration_service.now_utc",
)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Test client fixture with database override"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


class Clock:
    """Settable current time used by the services under test"""

    def __init__(self, current: datetime):
        self.current = current

    def set(self, *args) -> datetime:
        self.current = datetime(*args, tzinfo=timezone.utc)
        return self.current


@pytest.fixture
def clock(monkeypatch):
    """Freeze 'now' at 2024-01-01 08:00 UTC; tests move it with clock.set(...)"""
    frozen = Clock(datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc))
    for target in CLOCK_TARGETS:
        monkeypatch.setattr(target, lambda: frozen.current)
    return frozen


@pytest.fixture
def make_user(db):
    """Factory creating an identity with profile and role grants"""
    def _make(
        email: str,
        password: str = DEFAULT_PASSWORD,
        name: str = "Test User",
        department: str = "Engineering",
        roles=("employee",),
        active: bool = True,
    ) -> User:
        user = User(
            email=email,
            password_hash=hash_password(password),
            active=active,
            created_at=datetime.now(timezone.utc),
        )
        db.add(user)
        db.flush()
        provision_profile(db, user, name=name, department=department, role=AppRole(roles[0]))
        for role in roles[1:]:
            add_role(db, user.id, AppRole(role))
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def employee(make_user):
    return make_user("alice@company.com", name="Alice Employee", department="Engineering")


@pytest.fixture
def other_employee(make_user):
    return make_user("bob@company.com", name="Bob Builder", department="Operations")


@pytest.fixture
def manager(make_user):
    return make_user("maria@company.com", name="Maria Manager", department="Engineering", roles=("manager",))


@pytest.fixture
def admin(make_user):
    return make_user("root@company.com", name="Ada Admin", department="Administration", roles=("admin",))
