"""
Attendance Tracker Backend - Main Application Entry Point
"""
import logging
from urllib.parse import urlparse, urlunparse

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError

from app.api.router import api_router
from app.core.config import settings
from app.core.constants import DEFAULT_VERSION
from app.core.errors import (
    http_exception_handler,
    validation_exception_handler,
    operational_error_handler,
    generic_exception_handler,
)
from app.core.logging import setup_logging
from app.db.init_db import bootstrap_initial_admin
from app.db.session import SessionLocal
from app.services.settings_service import seed_late_threshold

# Setup logging first
setup_logging()
logger = logging.getLogger(__name__)


def _mask_database_url(url: str) -> str:
    """Mask password in DATABASE_URL for safe logging; show full path for sqlite."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return "***"
    if parsed.scheme.startswith("sqlite"):
        return url
    if parsed.password:
        netloc = f"{parsed.username}:****@{parsed.hostname or ''}"
        if parsed.port:
            netloc += f":{parsed.port}"
        return urlunparse(parsed._replace(netloc=netloc))
    return url


# Create FastAPI app
app = FastAPI(
    title="Attendance Tracker Backend",
    description="Check-in/check-out, team attendance review, audit overrides, invitations and reports",
    version=settings.VERSION or DEFAULT_VERSION
)

# Configure CORS - must be before other middleware
allowed_origins = settings.get_allowed_origins_list()
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allowed_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

# Register exception handlers
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(OperationalError, operational_error_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include all API routes under /api/v1
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def startup_log_config() -> None:
    """Log DATABASE_URL and timezone at startup so they can be verified against Alembic."""
    logger.info("DATABASE_URL (app): %s", _mask_database_url(settings.DATABASE_URL))
    logger.info("Attendance timezone: %s", settings.TZ)


@app.on_event("startup")
def bootstrap_defaults() -> None:
    """
    Seed the late threshold and create the initial admin if none exists.
    This ensures the system always has at least one admin user.
    """
    db = SessionLocal()
    try:
        seed_late_threshold(db)
        bootstrap_initial_admin(db)
    except OperationalError as e:
        # Tables might not exist before the first migration
        db.rollback()
        if "no such table" in str(e).lower() or "does not exist" in str(e).lower():
            logger.warning("Database tables not ready yet, skipping initial bootstrap")
        else:
            logger.error("Database error during bootstrap: %s", e)
    finally:
        db.close()
