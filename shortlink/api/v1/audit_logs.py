"""Admin view of the audit trail: filterable by user, action and date range, paginated."""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from shortlink.api.v1.auth import require_admin
from shortlink.core.database import get_db
from shortlink.models import AuditLog
from shortlink.schemas.audit import AuditLogItem, AuditLogListResponse
from shortlink.schemas.auth import CurrentUser

router = APIRouter()

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# Keeps the row offset inside a 64-bit integer.
MAX_PAGE = 1_000_000


def _as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@router.get("", response_model=AuditLogListResponse)
def list_audit_logs(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query(ge=1, le=MAX_PAGE)] = 1,
    page_size: Annotated[int, Query(alias="pageSize", ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
    search: Annotated[str | None, Query(max_length=255)] = None,
    user: Annotated[str | None, Query(max_length=512)] = None,
    action: Annotated[str | None, Query(max_length=64)] = None,
    date_from: Annotated[datetime | None, Query(alias="dateFrom")] = None,
    date_to: Annotated[datetime | None, Query(alias="dateTo")] = None,
) -> AuditLogListResponse:
    """
    Return audit entries, newest first.

    search matches user, action, details or ip; user and action filter their own
    column. All text matches are case-insensitive substrings. dateFrom/dateTo
    bound the timestamp inclusively.
    """
    query = db.query(AuditLog)
    if search:
        query = query.filter(
            or_(
                AuditLog.user.icontains(search, autoescape=True),
                AuditLog.action.icontains(search, autoescape=True),
                AuditLog.details.icontains(search, autoescape=True),
                AuditLog.ip.icontains(search, autoescape=True),
            )
        )
    if user:
        query = query.filter(AuditLog.user.icontains(user, autoescape=True))
    if action:
        query = query.filter(AuditLog.action.icontains(action, autoescape=True))
    if date_from is not None:
        query = query.filter(AuditLog.timestamp >= _as_utc(date_from))
    if date_to is not None:
        query = query.filter(AuditLog.timestamp <= _as_utc(date_to))

    total = query.count()
    rows = (
        query.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return AuditLogListResponse(
        logs=[AuditLogItem.model_validate(r) for r in rows],
        total=total,
    )
