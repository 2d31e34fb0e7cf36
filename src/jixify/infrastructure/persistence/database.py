"""Database abstraction layer using SQLAlchemy 2.0 async.

This module provides the database session management and engine configuration
for SQLAlchemy with async support. It supports SQLite (aiosqlite), PostgreSQL
(asyncpg) and MySQL (aiomysql) drivers, selected by the database URL.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from jixify.core.config import Settings
from jixify.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class DatabaseManager:
    """Database connection and session manager.

    Manages the async database engine and session factory and provides a
    context manager for database sessions.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize the database manager.

        Args:
            settings: Application settings (reads ``database_url`` and ``db_echo``).
        """
        self.settings = settings
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_sqlite(self) -> bool:
        return self.settings.is_sqlite

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine."""
        if self._engine is None:
            self._engine = create_async_engine(
                self.settings.database_url,
                echo=self.settings.db_echo,
                pool_pre_ping=not self.is_sqlite,
                connect_args={"check_same_thread": False} if self.is_sqlite else {},
            )
            logger.info(
                "Database engine created",
                database_url=self._engine.url.render_as_string(hide_password=True),
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            logger.debug("Database session factory created")
        return self._session_factory

    async def create_tables(self) -> None:
        """Create all database tables.

        Used on startup in development. In production, use migrations instead.
        """
        from jixify.infrastructure.persistence import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created")

    async def disconnect(self) -> None:
        """Close the database engine and all connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a transactional scope for database operations.

        Example:
            async with db.session() as session:
                result = await session.execute(select(AccountModel))
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def check_connection(self) -> bool:
        """Check if database connection is working."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error("Database connection check failed", error=str(e))
            return False

    def ensure_sqlite_directory(self) -> None:
        """Create the parent directory of a file-backed SQLite database."""
        if not self.is_sqlite:
            return
        database = make_url(self.settings.database_url).database
        if not database or database == ":memory:":
            return
        db_dir = Path(database).parent
        db_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("Database directory ready", path=str(db_dir))


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for FastAPI to get a database session.

    Sessions come from the ``DatabaseManager`` the application was built with.

    Example:
        @app.get("/accounts")
        async def list_accounts(session: AsyncSession = Depends(get_db_session)):
            ...
    """
    db: DatabaseManager = request.app.state.db
    async with db.session() as session:
        yield session


async def init_database(db: DatabaseManager) -> None:
    """Initialize the database.

    Called on application startup. Creates tables if they don't exist in
    development; in production, migrations should be used instead.
    """
    settings = db.settings
    db.ensure_sqlite_directory()

    if not await db.check_connection():
        logger.error("Database connection failed")
        raise RuntimeError("Failed to connect to database")

    if settings.is_development or settings.is_testing:
        logger.info("Creating database tables", environment=settings.environment)
        await db.create_tables()
    else:
        logger.info("Production mode: Skipping auto-create, use migrations")
