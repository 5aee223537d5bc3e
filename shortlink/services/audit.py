"""Audit trail writer: records security-relevant actions without ever failing the caller."""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shortlink.models import AuditLog
from shortlink.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)

ANONYMOUS = "anon"


class AuditAction(str, Enum):
    CREATE_USER = "create_user"
    EDIT_USER = "edit_user"
    DELETE_USER = "delete_user"
    CREATE_URL = "create_url"
    EDIT_URL = "edit_url"
    DELETE_URL = "delete_url"
    FORGOT_PASSWORD = "forgot_password"
    RESET_PASSWORD = "reset_password"


@dataclass(frozen=True)
class AuditIdentity:
    """Snapshot of who acted, frozen at the time of the action."""

    email: str
    user_id: int

    @classmethod
    def from_user(cls, user: CurrentUser | None) -> "AuditIdentity | None":
        if user is None:
            return None
        return cls(email=user.email, user_id=user.id)

    def __str__(self) -> str:
        return f"{self.email} (id:{self.user_id})"


def client_address(request: Request | None) -> str:
    """Best-effort source address of the request ('' when unknown)."""
    if request is None or request.client is None:
        return ""
    return request.client.host or ""


def record_action(
    db: Session,
    action: AuditAction,
    details: dict[str, Any],
    request: Request | None,
    actor: CurrentUser | None = None,
) -> AuditLog | None:
    """
    Append an audit entry and commit it.

    Persistence failures are logged and swallowed; the caller's operation has
    already succeeded and must not be reported as failed. Returns the stored
    row, or None when it could not be written.
    """
    identity = AuditIdentity.from_user(actor)
    user = str(identity) if identity is not None else ANONYMOUS
    timestamp = datetime.now(timezone.utc)
    ip = client_address(request)
    serialized = json.dumps(details, default=str, sort_keys=True)

    logger.info(
        "[AUDIT] %s",
        json.dumps(
            {
                "timestamp": timestamp.isoformat(),
                "user": user,
                "action": action.value,
                "details": details,
                "ip": ip,
            },
            default=str,
        ),
    )

    entry = AuditLog(
        timestamp=timestamp,
        user=user,
        action=action.value,
        details=serialized,
        ip=ip,
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to persist audit entry action=%s user=%s", action.value, user)
        return None
    return entry
