"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, schema created/dropped per test
- Bearer token principals u1 (owner), u2, u3
- HTTPX AsyncClient wired to the test session
"""
import os
from dataclasses import dataclass
from typing import AsyncGenerator, Generator

# Settings are read at import time; configure before importing the app
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["TESTING"] = "1"
os.environ["ENV"] = "test"

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.orm import Session

from app.main import app
from app.core.deps import get_db
from app.core.security import create_access_token
from app.db.base import Base
from app.db.session import engine, SessionLocal
from app.schemas.auth import CurrentUser


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Fresh schema per test.

    App code commits freely; dropping the tables afterwards resets state.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class Principal:
    """Authenticated test user."""
    user: CurrentUser
    token: str

    @property
    def user_id(self) -> str:
        return self.user.user_id

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


def make_principal(user_id: str) -> Principal:
    email = f"{user_id}@example.com"
    return Principal(
        user=CurrentUser(user_id=user_id, email=email),
        token=create_access_token(user_id=user_id, email=email),
    )


@pytest.fixture
def u1() -> Principal:
    return make_principal("u1")


@pytest.fixture
def u2() -> Principal:
    return make_principal("u2")


@pytest.fixture
def u3() -> Principal:
    return make_principal("u3")


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient sharing the test session; pass `headers=` per request."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
