"""Auth schema module."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import UserRole
from app.schemas.common import FormModel


class SignUpRequest(FormModel):
    # Email format and password strength are checked by the auth service so
    # the failure carries an auth error code.
    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=256)
    name: str = Field(min_length=1, max_length=255)


class LoginRequest(FormModel):
    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=256)


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    refresh_token: str


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: UserRole
    auth_provider: str
    is_active: bool
    created_at: datetime | None = None
    last_login_at: datetime | None = None


class AuthProviderStatus(BaseModel):
    provider: str
    enabled: bool
