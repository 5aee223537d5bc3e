"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Column, DateTime, Integer, String

from shortlink.models.base import Base


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: 'admin' or 'user'. reset_token is single-use and cleared together
    with the password update that consumes it.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="user")
    reset_token = Column(String(128), nullable=True, index=True)
    reset_token_expires_at = Column(DateTime(timezone=True), nullable=True)
