"""Short URL management for authenticated users (owner or admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from shortlink.api.v1.auth import get_current_user
from shortlink.core.database import get_db
from shortlink.core.errors import AuthorizationError, NotFoundError
from shortlink.models import ShortUrl
from shortlink.schemas.auth import CurrentUser
from shortlink.schemas.urls import (
    ORIGINAL_URL_MAX_LEN,
    UrlCreate,
    UrlListResponse,
    UrlRead,
    UrlUpdate,
)
from shortlink.services.audit import AuditAction, record_action
from shortlink.services.short_code import create_short_url

router = APIRouter()

DEFAULT_PAGE_SIZE = 5
MAX_PAGE_SIZE = 100
# Keeps the row offset inside a 64-bit integer.
MAX_PAGE = 1_000_000


def get_owned_url(
    url_id: int,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ShortUrl:
    """
    Dependency: load a URL the caller may manage.

    Missing → 404. Existing but owned by someone else → 403, unless the caller is admin.
    """
    url = db.query(ShortUrl).filter(ShortUrl.id == url_id).first()
    if url is None:
        raise NotFoundError("URL not found")
    if url.user_id != current_user.id and current_user.role != "admin":
        raise AuthorizationError("Forbidden")
    return url


@router.post("", response_model=UrlRead, status_code=status.HTTP_201_CREATED)
def create_url(
    body: UrlCreate,
    request: Request,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UrlRead:
    """Shorten a URL for the caller; the short code is generated server-side."""
    url = create_short_url(db, owner_id=current_user.id, original_url=body.original_url)
    created = UrlRead.model_validate(url)
    record_action(
        db,
        AuditAction.CREATE_URL,
        {"url": created.model_dump(by_alias=True, mode="json")},
        request,
        current_user,
    )
    return created


@router.get("", response_model=UrlListResponse)
def list_urls(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query(ge=1, le=MAX_PAGE)] = 1,
    page_size: Annotated[int, Query(alias="pageSize", ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
    search: Annotated[str | None, Query(max_length=ORIGINAL_URL_MAX_LEN)] = None,
) -> UrlListResponse:
    """
    Return one page of the caller's own URLs, newest first.

    search matches originalUrl or shortCode as a case-insensitive substring.
    """
    query = db.query(ShortUrl).filter(ShortUrl.user_id == current_user.id)
    if search:
        query = query.filter(
            or_(
                ShortUrl.original_url.icontains(search, autoescape=True),
                ShortUrl.short_code.icontains(search, autoescape=True),
            )
        )
    total = query.count()
    rows = (
        query.order_by(ShortUrl.created_at.desc(), ShortUrl.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return UrlListResponse(urls=[UrlRead.model_validate(r) for r in rows], total=total)


@router.get("/{url_id}", response_model=UrlRead)
def get_url(url: Annotated[ShortUrl, Depends(get_owned_url)]) -> UrlRead:
    return UrlRead.model_validate(url)


@router.put("/{url_id}", response_model=UrlRead)
def update_url(
    body: UrlUpdate,
    request: Request,
    url: Annotated[ShortUrl, Depends(get_owned_url)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UrlRead:
    """Change the destination of a URL. The short code never changes."""
    previous = url.original_url
    url.original_url = body.original_url
    db.commit()
    db.refresh(url)
    updated = UrlRead.model_validate(url)
    record_action(
        db,
        AuditAction.EDIT_URL,
        {"id": url.id, "from": previous, "to": url.original_url},
        request,
        current_user,
    )
    return updated


@router.delete("/{url_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_url(
    request: Request,
    url: Annotated[ShortUrl, Depends(get_owned_url)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    details = {"id": url.id, "shortCode": url.short_code, "ownerId": url.user_id}
    db.delete(url)
    db.commit()
    record_action(db, AuditAction.DELETE_URL, details, request, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
