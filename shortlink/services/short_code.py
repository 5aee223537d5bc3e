"""Short code generation and collision-safe insertion of short URLs."""

import logging
import secrets
import string

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shortlink.core.config import settings
from shortlink.core.errors import ConflictError
from shortlink.models import ShortUrl

logger = logging.getLogger(__name__)

# URL-safe alphabet (RFC 3986 unreserved, minus '.' and '~'): 64 symbols.
SHORT_CODE_ALPHABET = string.ascii_letters + string.digits + "_-"


def generate_short_code(length: int | None = None) -> str:
    """Return a random code of `length` symbols drawn with the OS CSPRNG."""
    if length is None:
        length = settings.SHORT_CODE_LENGTH
    return "".join(secrets.choice(SHORT_CODE_ALPHABET) for _ in range(length))


def _short_code_exists(db: Session, code: str) -> bool:
    return db.query(ShortUrl.id).filter(ShortUrl.short_code == code).first() is not None


def create_short_url(db: Session, owner_id: int, original_url: str) -> ShortUrl:
    """
    Persist a new short URL owned by owner_id and return it.

    Randomness alone is not trusted: the unique index on short_code decides.
    On a collision the transaction is rolled back and a fresh code is tried,
    up to SHORT_CODE_MAX_ATTEMPTS. Any other integrity failure is reported as
    a conflict without retrying.
    """
    for attempt in range(1, settings.SHORT_CODE_MAX_ATTEMPTS + 1):
        code = generate_short_code()
        url = ShortUrl(original_url=original_url, short_code=code, user_id=owner_id)
        db.add(url)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            if not _short_code_exists(db, code):
                raise ConflictError("Could not create short URL") from e
            logger.warning(
                "Short code collision on attempt %s/%s; regenerating",
                attempt,
                settings.SHORT_CODE_MAX_ATTEMPTS,
            )
            continue
        db.refresh(url)
        return url

    raise ConflictError(
        f"Could not generate a unique short code after {settings.SHORT_CODE_MAX_ATTEMPTS} attempts"
    )
