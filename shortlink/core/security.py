"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from shortlink.core.config import settings

# Min/max lengths for login and user input validation.
EMAIL_MIN_LEN = 3
EMAIL_MAX_LEN = 255
NAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 1
PASSWORD_MAX_LEN = 128


def hash_password(plain_password: str) -> str:
    """
    Hash a plain-text password for storage. Do not store plain passwords.

    bcrypt is CPU-bound; callers are sync route handlers, which FastAPI runs on
    its threadpool, so the work never lands on the event loop.
    """
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash; malformed hashes never match."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    user_id: int,
    email: str,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token carrying sub (user id), email, role, iat and exp."""
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "exp": now + expires_delta,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, email, role, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["sub", "exp"]},
    )
