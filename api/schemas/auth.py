"""
Pydantic schemas for the auth API.
"""

from datetime import datetime
from typing import Any

from pydantic import Field

from .common import CamelModel, Trimmed


class RegisterRequest(CamelModel):
    """Account registration payload."""

    username: Trimmed = Field(..., max_length=50)
    email: Trimmed = Field(..., max_length=255)
    # Length policy is checked by the auth service
    password: str


class LoginRequest(CamelModel):
    """Login payload."""

    email: Trimmed = Field(..., max_length=255)
    password: str


class ProfileUpdateRequest(CamelModel):
    """Partial profile update; omitted fields are left unchanged."""

    username: Trimmed | None = Field(default=None, max_length=50)
    avatar_url: str | None = None
    settings: dict[str, Any] | None = None


class UserInfo(CamelModel):
    """Public user fields."""

    id: int
    username: str
    email: str
    avatar_url: str | None = None


class ProfileInfo(UserInfo):
    """User fields returned by the profile endpoints."""

    settings: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AuthResult(CamelModel):
    """Register/login result."""

    user: UserInfo
    token: str
