"""
Role grant schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_serializer

from app.models.user_role import AppRole
from app.utils.datetime_utils import iso_local


class RoleGrantRequest(BaseModel):
    """Grant a role to a user"""
    user_id: int = Field(..., gt=0)
    role: AppRole


class UserRoleOut(BaseModel):
    id: int
    user_id: int
    role: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt: Optional[datetime]) -> Optional[str]:
        return iso_local(dt)
