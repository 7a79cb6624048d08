"""
Pytest configuration and fixtures.
"""

import os
from collections.abc import AsyncGenerator, Callable, Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

# Set test environment before importing app
os.environ["ENVIRONMENT"] = "testing"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-32chars!"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DB_AUTO_CREATE"] = "true"
os.environ["BCRYPT_ROUNDS"] = "4"

from database import Database  # noqa: E402
from database.models import User  # noqa: E402
from database.repositories import UserRepository  # noqa: E402

TEST_PASSWORD = "secret123"


# ============ App Fixtures ============


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """
    Synchronous test client over a fresh app.

    Entering the client runs the lifespan, which builds a new in-memory
    database for every test.
    """
    from api.main import create_app

    with TestClient(create_app()) as client:
        yield client


@pytest.fixture
def register(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Register a user through the API and return the response data."""

    def _register(
        username: str = "alice",
        email: str | None = None,
        password: str = TEST_PASSWORD,
    ) -> dict[str, Any]:
        response = client.post(
            "/api/auth/register",
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _register


@pytest.fixture
def auth_headers(register) -> dict[str, str]:
    """Authorization header for user "alice"."""
    data = register("alice")
    return {"Authorization": f"Bearer {data['token']}"}


@pytest.fixture
def other_headers(register) -> dict[str, str]:
    """Authorization header for a second user, "bob"."""
    data = register("bob")
    return {"Authorization": f"Bearer {data['token']}"}


# ============ Database Fixtures ============


@pytest.fixture
async def db() -> AsyncGenerator[Database, None]:
    """Isolated in-memory database with all tables created."""
    database = Database("sqlite+aiosqlite://")
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture
async def session(db: Database) -> AsyncGenerator[AsyncSession, None]:
    """A session on the isolated database."""
    async with db.session() as session:
        yield session


@pytest.fixture
async def user(session: AsyncSession) -> User:
    """A stored user."""
    return await UserRepository(session).create(
        username="alice",
        email="alice@example.com",
        password_hash="not-a-real-hash",
    )


@pytest.fixture
async def other_user(session: AsyncSession) -> User:
    """A second stored user."""
    return await UserRepository(session).create(
        username="bob",
        email="bob@example.com",
        password_hash="not-a-real-hash",
    )
