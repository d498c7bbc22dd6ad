"""
Invitation schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_serializer, field_validator

from app.models.user_role import AppRole
from app.utils.datetime_utils import iso_local


class InvitationCreate(BaseModel):
    """Schema for creating an invitation"""
    email: EmailStr = Field(..., max_length=255)
    name: str = Field(..., min_length=1, max_length=100)
    department: str = Field(..., min_length=1, max_length=100)
    role: AppRole = AppRole.EMPLOYEE

    @field_validator("name", "department")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class InvitationOut(BaseModel):
    """Schema for invitation output. `status` is the effective status (pending past expiry reads expired)."""
    id: int
    email: str
    name: str
    department: str
    role: str
    status: str
    invited_by: int
    token: str
    link: str
    expires_at: datetime
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("expires_at", "created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt: Optional[datetime]) -> Optional[str]:
        return iso_local(dt)


class InvitationPrefillOut(BaseModel):
    """Registration prefill for a usable invitation token"""
    email: str
    name: str
    department: str
    role: str

    model_config = ConfigDict(from_attributes=True)
