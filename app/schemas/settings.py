"""
Settings schemas
"""
from pydantic import BaseModel, Field


class LateThresholdIn(BaseModel):
    """Time of day after which check-ins are late"""
    hours: int = Field(..., ge=0, le=23)
    minutes: int = Field(0, ge=0, le=59)


class LateThresholdOut(BaseModel):
    hours: int
    minutes: int
