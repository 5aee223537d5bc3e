"""ORM model for the append-only audit trail."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from shortlink.models.base import Base


class AuditLog(Base):
    """
    One security-relevant action. Rows are inserted, never updated or deleted.

    user is a snapshot of the actor's identity at the time of the action
    ("email (id:N)" or "anon"), not a foreign key.
    """

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        index=True,
    )
    user = Column(String(512), nullable=False, index=True)
    action = Column(String(64), nullable=False, index=True)
    details = Column(Text, nullable=False, default="{}")
    ip = Column(String(64), nullable=False, default="")
