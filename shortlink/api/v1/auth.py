"""JWT login, password reset, and auth dependencies (get_current_user, require_admin)."""

import logging
from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from shortlink.core.database import get_db
from shortlink.core.errors import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
)
from shortlink.core.security import (
    create_access_token,
    decode_access_token,
    verify_password,
)
from shortlink.models import User
from shortlink.schemas.auth import (
    CurrentUser,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    MessageResponse,
    ResetPasswordRequest,
    TokenResponse,
)
from shortlink.services.audit import AuditAction, client_address, record_action
from shortlink.services.password_reset import (
    consume_password_reset_token,
    issue_password_reset_token,
)
from shortlink.services.rate_limit import RateLimiter, get_rate_limiter

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)


def rate_limit_by_client(scope: str) -> Callable[..., None]:
    """Dependency factory: count the request against the caller's address for scope."""

    def dependency(
        request: Request,
        limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
    ) -> None:
        limiter.hit(f"{scope}:ip:{client_address(request)}")

    return dependency


def _rate_limit_by_email(limiter: RateLimiter, scope: str, email: str) -> None:
    limiter.hit(f"{scope}:email:{email.strip().lower()}")


@router.post(
    "/login",
    response_model=TokenResponse,
    dependencies=[Depends(rate_limit_by_client("login"))],
)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> TokenResponse:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    _rate_limit_by_email(limiter, "login", body.email)

    user = db.query(User).filter(User.email == body.email).first()
    if user is None or not verify_password(body.password, user.password_hash):
        logger.info("Failed login for email=%s", body.email)
        raise AuthenticationError("Invalid credentials")
    token = create_access_token(user_id=user.id, email=user.email, role=user.role)
    return TokenResponse(token=token, token_type="bearer")


@router.post(
    "/forgot-password",
    response_model=ForgotPasswordResponse,
    dependencies=[Depends(rate_limit_by_client("forgot-password"))],
)
def forgot_password(
    body: ForgotPasswordRequest,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> ForgotPasswordResponse:
    """
    Issue a one-hour, single-use reset token for the account.

    There is no mail delivery; the token is returned in the response.
    """
    _rate_limit_by_email(limiter, "forgot-password", body.email)

    user = db.query(User).filter(User.email == body.email).first()
    if user is None:
        raise NotFoundError("User not found")
    token, expires_at = issue_password_reset_token(db, user)
    record_action(db, AuditAction.FORGOT_PASSWORD, {"userId": user.id}, request)
    return ForgotPasswordResponse(reset_token=token, expires=expires_at)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    body: ResetPasswordRequest,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Consume a reset token and set the new password. The token cannot be reused."""
    user_id = consume_password_reset_token(db, body.token, body.password)
    record_action(db, AuditAction.RESET_PASSWORD, {"userId": user_id}, request)
    return MessageResponse(message="Password updated")


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer JWT and return the identity it carries.

    Raises 401 when no token is sent and 403 when it is invalid or expired.
    Identity and role come from the claims; no database lookup is made.
    """
    if credentials is None:
        raise AuthenticationError(
            "Token required",
            status_code=401,
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_access_token(credentials.credentials)
        return CurrentUser(
            id=int(payload["sub"]),
            email=payload["email"],
            role=payload["role"],
        )
    except (jwt.PyJWTError, KeyError, TypeError, ValueError, PydanticValidationError):
        raise AuthenticationError("Invalid token", status_code=403)


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if current_user.role != "admin":
        raise AuthorizationError("Admin privileges required")
    return current_user
