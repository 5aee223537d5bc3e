"""Single-use password reset tokens with expiry."""

import logging
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from shortlink.core.config import settings
from shortlink.core.errors import ValidationError
from shortlink.core.security import hash_password
from shortlink.models import User

logger = logging.getLogger(__name__)

RESET_TOKEN_BYTES = 32
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


def issue_password_reset_token(db: Session, user: User) -> tuple[str, datetime]:
    """
    Generate a random opaque token for user, store it with its expiry and commit.

    Any previously issued token is overwritten and stops working.
    Returns (token, expires_at).
    """
    token = secrets.token_hex(RESET_TOKEN_BYTES)
    expires_at = datetime.now(timezone.utc) + timedelta(
        minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES
    )
    user.reset_token = token
    user.reset_token_expires_at = expires_at
    db.commit()
    return token, expires_at


def consume_password_reset_token(db: Session, token: str, new_password: str) -> int:
    """
    Set a new password for the holder of a valid reset token; return the user id.

    The token is valid only if it matches the stored value and has not expired.
    The new hash and the cleared token are written by one conditional UPDATE,
    so a token can be consumed once even under concurrent requests.
    Raises ValidationError for unknown, already used or expired tokens.
    """
    now = datetime.now(timezone.utc)
    user_id = (
        db.query(User.id)
        .filter(User.reset_token == token, User.reset_token_expires_at > now)
        .scalar()
    )
    if user_id is None:
        raise ValidationError(INVALID_TOKEN_MESSAGE)

    password_hash = hash_password(new_password)
    updated = (
        db.query(User)
        .filter(User.id == user_id, User.reset_token == token)
        .update(
            {
                User.password_hash: password_hash,
                User.reset_token: None,
                User.reset_token_expires_at: None,
            },
            synchronize_session=False,
        )
    )
    if updated != 1:
        db.rollback()
        raise ValidationError(INVALID_TOKEN_MESSAGE)
    db.commit()
    logger.info("Password reset completed for user_id=%s", user_id)
    return user_id
