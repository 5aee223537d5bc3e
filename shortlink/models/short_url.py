"""ORM model for shortened URLs."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func

from shortlink.models.base import Base


class ShortUrl(Base):
    """
    Destination URL reachable through a globally unique short code.

    Owned by the user that created it; the unique index on short_code is the
    authoritative collision check for generated codes.
    """

    __tablename__ = "short_urls"

    id = Column(Integer, primary_key=True, autoincrement=True)
    original_url = Column(Text, nullable=False)
    short_code = Column(String(32), nullable=False, unique=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )
