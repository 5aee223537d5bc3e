"""SQLAlchemy ORM models."""

from shortlink.models.audit_log import AuditLog
from shortlink.models.base import Base
from shortlink.models.short_url import ShortUrl
from shortlink.models.user import User

__all__ = ["AuditLog", "Base", "ShortUrl", "User"]
