"""Pytest fixtures and configuration."""

import os
from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing the app
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-at-least-32-characters-long")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("WEEK_TIMEZONE", "UTC")

from disrespect_tracker import models  # noqa: E402, F401
from disrespect_tracker.database import Base, get_db  # noqa: E402
from disrespect_tracker.main import app  # noqa: E402
from disrespect_tracker.models.user import User  # noqa: E402
from disrespect_tracker.utils.security import create_session  # noqa: E402

# Precomputed bcrypt hash keeps fixtures fast; tests that log in hash for real
FAKE_PASSWORD_HASH = "$2b$12$KIXQ1Yw8bF7cQ0m6vYV7UeL8cQ0yJ8o3Z1h7k2l9m0n1p2q3r4s5t"


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend for tests."""
    return "asyncio"


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession]:
    """Session on a fresh in-memory SQLite database with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable:
    """Factory creating persisted users with unique usernames and emails."""

    async def _make_user(
        username: str,
        name: str | None = None,
        searchable: bool = True,
        is_active: bool = True,
    ) -> User:
        user = User(
            username=username,
            email=f"{username}@example.com",
            name=name or username.title(),
            hashed_password=FAKE_PASSWORD_HASH,
            searchable=searchable,
            is_active=is_active,
            created_at=datetime(2024, 12, 1, tzinfo=UTC),
        )
        db_session.add(user)
        await db_session.flush()
        return user

    return _make_user


@pytest.fixture
def auth_headers(db_session: AsyncSession) -> Callable:
    """Factory returning bearer headers backed by a real session row."""

    async def _auth_headers(user: User) -> dict[str, str]:
        token = await create_session(db_session, user.id)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """HTTP client whose requests share ``db_session`` instead of the app database."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()

