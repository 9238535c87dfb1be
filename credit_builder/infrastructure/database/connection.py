"""Database connection and session management."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from credit_builder.core.config import settings

logger = structlog.get_logger(__name__)


def _normalize_url(url: str) -> str:
    """Convert postgres:// and postgresql:// to postgresql+asyncpg://."""
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


class DatabaseSessionManager:
    """
    Manages database connections and sessions.

    Uses SQLAlchemy async engine for non-blocking database operations.
    One session spans one request, so a plan and its schedule, or an
    event's transition and ledger row, commit or roll back together.
    """

    def __init__(self):
        self._engine = None
        self._sessionmaker = None

    def init(self, database_url: str | None = None):
        """
        Initialize the database engine and session factory.

        Args:
            database_url: Optional override for the database URL
        """
        url = _normalize_url(database_url or settings.database_url)

        engine_kwargs = {"echo": settings.debug, "pool_pre_ping": True}
        if not url.startswith("sqlite"):
            engine_kwargs["pool_size"] = settings.db_pool_size
            engine_kwargs["max_overflow"] = settings.db_max_overflow

        self._engine = create_async_engine(url, **engine_kwargs)

        self._sessionmaker = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

    async def create_tables(self):
        """Create any missing tables."""
        from .models import Base

        if self._engine is None:
            raise RuntimeError("Database not initialized. Call init() first.")

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Return True when the database answers a trivial query."""
        if self._engine is None:
            return False

        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("database_ping_failed", error=str(exc))
            return False
        return True

    async def close(self):
        """Close the database engine."""
        if self._engine:
            await self._engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a transactional scope around operations.

        Yields:
            An async database session
        """
        if self._sessionmaker is None:
            raise RuntimeError("Database not initialized. Call init() first.")

        session = self._sessionmaker()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


db_manager = DatabaseSessionManager()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for database sessions.

    Yields:
        An async database session
    """
    async with db_manager.session() as session:
        yield session
