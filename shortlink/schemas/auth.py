"""Request/response schemas for auth and password-reset endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from shortlink.core.security import (
    EMAIL_MAX_LEN,
    EMAIL_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)
from shortlink.schemas.base import CamelModel


class LoginRequest(CamelModel):
    """Credentials for login."""

    email: str = Field(..., min_length=EMAIL_MIN_LEN, max_length=EMAIL_MAX_LEN)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class TokenResponse(CamelModel):
    """JWT access token returned after successful login."""

    token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")


class CurrentUser(CamelModel):
    """Authenticated identity (id, email, role) taken from the token claims."""

    id: int
    email: str
    role: Literal["user", "admin"]


class ForgotPasswordRequest(CamelModel):
    email: str = Field(..., min_length=EMAIL_MIN_LEN, max_length=EMAIL_MAX_LEN)


class ForgotPasswordResponse(CamelModel):
    """Reset token is returned directly; there is no mail delivery."""

    reset_token: str
    expires: datetime


class ResetPasswordRequest(CamelModel):
    token: str = Field(..., min_length=1, max_length=128)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class MessageResponse(CamelModel):
    message: str
