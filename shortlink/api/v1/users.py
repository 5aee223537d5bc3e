"""Admin-only user management."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shortlink.api.v1.auth import require_admin
from shortlink.core.database import get_db
from shortlink.core.errors import ConflictError, NotFoundError
from shortlink.core.security import hash_password
from shortlink.models import ShortUrl, User
from shortlink.schemas.auth import CurrentUser
from shortlink.schemas.users import UserCreate, UserRead, UserUpdate
from shortlink.services.audit import AuditAction, record_action

router = APIRouter()

DUPLICATE_EMAIL_MESSAGE = "Email must be unique"


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    request: Request,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """Create a user account. The response never includes the password."""
    user = User(
        name=body.name,
        email=body.email,
        password_hash=hash_password(body.password),
        role=body.role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from e
    db.refresh(user)
    created = UserRead.model_validate(user)
    record_action(db, AuditAction.CREATE_USER, {"user": created.model_dump()}, request, admin)
    return created


@router.get("", response_model=list[UserRead])
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    search: Annotated[str | None, Query(max_length=255)] = None,
) -> list[UserRead]:
    """List users, optionally filtered by a case-insensitive name/email substring."""
    query = db.query(User)
    if search:
        query = query.filter(
            or_(
                User.name.icontains(search, autoescape=True),
                User.email.icontains(search, autoescape=True),
            )
        )
    return [UserRead.model_validate(u) for u in query.order_by(User.id).all()]


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    return UserRead.model_validate(_get_user_or_404(db, user_id))


@router.put("/{user_id}", response_model=UserRead)
def update_user(
    user_id: int,
    body: UserUpdate,
    request: Request,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """Edit name, email, role and optionally password (rehashed)."""
    user = _get_user_or_404(db, user_id)
    if body.name is not None:
        user.name = body.name
    if body.email is not None:
        user.email = body.email
    if body.role is not None:
        user.role = body.role
    if body.password:
        user.password_hash = hash_password(body.password)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from e
    db.refresh(user)
    updated = UserRead.model_validate(user)
    record_action(db, AuditAction.EDIT_USER, {"user": updated.model_dump()}, request, admin)
    return updated


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    request: Request,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Delete a user together with the short URLs they own."""
    user = _get_user_or_404(db, user_id)
    db.query(ShortUrl).filter(ShortUrl.user_id == user.id).delete(synchronize_session=False)
    db.delete(user)
    db.commit()
    record_action(db, AuditAction.DELETE_USER, {"userId": user_id}, request, admin)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
