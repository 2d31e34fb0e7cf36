"""Pytest configuration for all tests."""

from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jixify.core.config import Settings
from jixify.infrastructure.auth import JWTService
from jixify.infrastructure.persistence.database import Base
from jixify.infrastructure.persistence import models  # noqa: F401

TEST_SECRET_KEY = "test-secret-key-with-at-least-32-bytes-of-entropy"


@pytest.fixture
def settings() -> Settings:
    """Settings for tests: fast argon2, in-memory database, no .env."""
    return Settings(
        _env_file=None,
        environment="testing",
        secret_key=TEST_SECRET_KEY,
        database_url="sqlite+aiosqlite:///:memory:",
        external_url="http://test",
        argon2_time_cost=1,
        argon2_memory_cost=1024,
        argon2_parallelism=1,
        log_format="console",
    )


@pytest.fixture
def jwt_service(settings: Settings) -> JWTService:
    return JWTService.from_settings(settings)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def mock_notifier() -> AsyncMock:
    """Notifier that records verification emails instead of sending them."""
    notifier = AsyncMock()
    notifier.send_verification_email.return_value = None
    return notifier


@pytest.fixture
def mock_completion_provider() -> AsyncMock:
    provider = AsyncMock()
    provider.complete.return_value = "Hello from the model"
    return provider


@pytest_asyncio.fixture
async def client(
    settings: Settings,
    db_session: AsyncSession,
    mock_notifier: AsyncMock,
    mock_completion_provider: AsyncMock,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with an overridden database and outbound services."""
    from jixify.infrastructure.api.app import create_app
    from jixify.infrastructure.api.dependencies import (
        get_completion_provider,
        get_email_service,
    )
    from jixify.infrastructure.persistence.database import get_db_session

    app = create_app(settings)
    app.dependency_overrides[get_db_session] = lambda: db_session
    app.dependency_overrides[get_email_service] = lambda: mock_notifier
    app.dependency_overrides[get_completion_provider] = lambda: mock_completion_provider

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides = {}
