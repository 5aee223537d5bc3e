"""Request/response schemas for admin user management."""

from typing import Literal

from pydantic import Field

from shortlink.core.security import (
    EMAIL_MAX_LEN,
    EMAIL_MIN_LEN,
    NAME_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)
from shortlink.schemas.base import CamelModel

Role = Literal["user", "admin"]


class UserCreate(CamelModel):
    """Body for POST /users. All fields are required."""

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    email: str = Field(..., min_length=EMAIL_MIN_LEN, max_length=EMAIL_MAX_LEN)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    role: Role


class UserUpdate(CamelModel):
    """Body for PUT /users/{id}. Omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LEN)
    email: str | None = Field(default=None, min_length=EMAIL_MIN_LEN, max_length=EMAIL_MAX_LEN)
    password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )
    role: Role | None = None


class UserRead(CamelModel):
    """User as returned to clients (no password hash, no reset token)."""

    id: int
    name: str
    email: str
    role: str
