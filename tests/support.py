"""Shared test scaffolding: isolated SQLite database and a TestClient wired to it."""

import unittest
from collections.abc import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from shortlink.core.database import get_db
from shortlink.core.security import create_access_token, hash_password
from shortlink.main import app
from shortlink.models import Base, ShortUrl, User
from shortlink.services.rate_limit import RateLimiter, get_rate_limiter


class DatabaseTestCase(unittest.TestCase):
    """Fresh in-memory database per test."""

    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(bind=self.engine)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.db: Session = self.SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(bind=self.engine)
        self.engine.dispose()

    def create_user(
        self,
        email: str,
        password: str = "secret-pass",
        role: str = "user",
        name: str = "Test User",
    ) -> User:
        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=role,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def create_url(self, owner: User, short_code: str, original_url: str) -> ShortUrl:
        url = ShortUrl(original_url=original_url, short_code=short_code, user_id=owner.id)
        self.db.add(url)
        self.db.commit()
        self.db.refresh(url)
        return url


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient with get_db and the rate limiter overridden."""

    def setUp(self) -> None:
        super().setUp()

        def override_get_db() -> Generator[Session, None, None]:
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        self.limiter = RateLimiter(max_requests=5, window_seconds=60)
        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_rate_limiter] = lambda: self.limiter
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.client.close()
        super().tearDown()

    @staticmethod
    def auth_headers(user: User) -> dict[str, str]:
        token = create_access_token(user_id=user.id, email=user.email, role=user.role)
        return {"Authorization": f"Bearer {token}"}
