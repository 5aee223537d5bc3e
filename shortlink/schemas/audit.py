"""Response schemas for the audit trail endpoint."""

from datetime import datetime

from pydantic import Field

from shortlink.schemas.base import CamelModel


class AuditLogItem(CamelModel):
    """Stored audit entry; details is the JSON text as persisted."""

    id: int
    timestamp: datetime
    user: str
    action: str
    details: str
    ip: str


class AuditLogListResponse(CamelModel):
    logs: list[AuditLogItem]
    total: int = Field(..., ge=0)
