"""Pydantic request/response schemas."""

from shortlink.schemas.audit import AuditLogItem, AuditLogListResponse
from shortlink.schemas.auth import (
    CurrentUser,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    MessageResponse,
    ResetPasswordRequest,
    TokenResponse,
)
from shortlink.schemas.health import HealthResponse
from shortlink.schemas.urls import UrlCreate, UrlListResponse, UrlRead, UrlUpdate
from shortlink.schemas.users import UserCreate, UserRead, UserUpdate

__all__ = [
    "AuditLogItem",
    "AuditLogListResponse",
    "CurrentUser",
    "ForgotPasswordRequest",
    "ForgotPasswordResponse",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "ResetPasswordRequest",
    "TokenResponse",
    "UrlCreate",
    "UrlListResponse",
    "UrlRead",
    "UrlUpdate",
    "UserCreate",
    "UserRead",
    "UserUpdate",
]
