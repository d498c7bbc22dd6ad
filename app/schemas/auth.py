"""
Authentication schemas
"""
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field


class SignupRequest(BaseModel):
    """Signup request schema. A valid invite_token overrides email, name, department and role."""
    email: EmailStr = Field(..., max_length=255, description="Login email")
    password: str = Field(..., min_length=6, max_length=72, description="Password (6-72 characters)")
    name: Optional[str] = Field(None, max_length=100, description="Display name")
    department: Optional[str] = Field(None, max_length=100, description="Department")
    invite_token: Optional[str] = Field(None, description="Invitation token from the invite link")


class LoginRequest(BaseModel):
    """Login request schema"""
    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., description="Password")


class TokenResponse(BaseModel):
    """Token response schema"""
    access_token: str
    token_type: str = "bearer"
    user_id: Optional[int] = None


class MyRolesOut(BaseModel):
    """Roles held by the caller"""
    user_id: int
    roles: List[str]
    is_manager: bool  # manager or admin
    is_employee: bool
