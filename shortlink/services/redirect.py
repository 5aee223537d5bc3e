"""Public short-code resolution used by the redirect route."""

from sqlalchemy.orm import Session

from shortlink.core.errors import NotFoundError
from shortlink.models import ShortUrl


def resolve_short_code(db: Session, short_code: str) -> str:
    """Return the stored destination for short_code exactly as saved; NotFoundError on miss."""
    original_url = (
        db.query(ShortUrl.original_url)
        .filter(ShortUrl.short_code == short_code)
        .scalar()
    )
    if original_url is None:
        raise NotFoundError("Short URL not found")
    return original_url
