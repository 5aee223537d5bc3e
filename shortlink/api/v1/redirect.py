"""Public redirect: GET /{short_code} → 302 to the stored destination."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from shortlink.core.database import get_db
from shortlink.services.redirect import resolve_short_code

router = APIRouter(tags=["redirect"])


@router.get("/{short_code}")
def redirect_short_code(
    short_code: str,
    db: Annotated[Session, Depends(get_db)],
) -> RedirectResponse:
    """No authentication. Unknown codes return 404; there is no fallback target."""
    original_url = resolve_short_code(db, short_code)
    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
