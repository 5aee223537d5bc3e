"""Request/response schemas for short URL endpoints."""

import string
from datetime import datetime
from urllib.parse import urlsplit

from pydantic import Field, computed_field, field_validator

from shortlink.core.config import settings
from shortlink.schemas.base import CamelModel

ORIGINAL_URL_MAX_LEN = 2048
ALLOWED_URL_SCHEMES = frozenset({"http", "https"})
# RFC 3986 unreserved, reserved and "%" for existing escapes. Anything else would be
# percent-quoted again in the redirect Location header.
URL_ALLOWED_CHARS = frozenset(string.ascii_letters + string.digits + "-._~:/?#[]@!$&'()*+,;=%")


def validate_original_url(value: str) -> str:
    """Accept only absolute http(s) URLs with a host. The string is returned unchanged."""
    if any(ch.isspace() for ch in value):
        raise ValueError("originalUrl must not contain whitespace")
    if not set(value) <= URL_ALLOWED_CHARS:
        raise ValueError("originalUrl contains characters that must be percent-encoded")
    parts = urlsplit(value)
    if parts.scheme.lower() not in ALLOWED_URL_SCHEMES:
        raise ValueError("originalUrl must use http or https")
    if not parts.netloc or not parts.hostname:
        raise ValueError("originalUrl must be an absolute URL with a host")
    return value


class UrlCreate(CamelModel):
    original_url: str = Field(..., min_length=1, max_length=ORIGINAL_URL_MAX_LEN)

    @field_validator("original_url")
    @classmethod
    def check_original_url(cls, v: str) -> str:
        return validate_original_url(v)


class UrlUpdate(UrlCreate):
    """Only the destination can change; the short code is permanent."""


class UrlRead(CamelModel):
    id: int
    original_url: str
    short_code: str
    user_id: int
    created_at: datetime

    @computed_field(alias="shortUrl")
    @property
    def short_url(self) -> str:
        return f"{settings.BASE_URL}/{self.short_code}"


class UrlListResponse(CamelModel):
    """One page of the caller's URLs plus the total matching count."""

    urls: list[UrlRead]
    total: int = Field(..., ge=0)
