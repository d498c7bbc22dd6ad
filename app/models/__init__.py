"""
Database models
"""
from app.models.user import User
from app.models.profile import Profile
from app.models.user_role import UserRole, AppRole
from app.models.attendance import AttendanceRecord, AttendanceStatus
from app.models.invitation import Invitation, InvitationStatus
from app.models.setting import Setting
from app.models.audit_log import AuditLog

__all__ = [
    "User",
    "Profile",
    "UserRole",
    "AppRole",
    "AttendanceRecord",
    "AttendanceStatus",
    "Invitation",
    "InvitationStatus",
    "Setting",
    "AuditLog",
]
