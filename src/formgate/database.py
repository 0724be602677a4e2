"""Database engine, sessions and schema bootstrap."""

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from formgate.config import settings

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None

# Process-wide schema state; the DDL itself stays idempotent
_schema_ready = False
_schema_lock = asyncio.Lock()


def get_engine() -> AsyncEngine:
    """Get the process-wide async engine, creating it on first use."""
    global _engine
    if _engine is None:
        kwargs = {}
        if not settings.database_url.startswith("sqlite"):
            kwargs = {
                "pool_size": settings.database_pool_size,
                "max_overflow": settings.database_max_overflow,
                "pool_pre_ping": True,
            }
        _engine = create_async_engine(settings.database_url, echo=False, **kwargs)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the session factory bound to the process-wide engine."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a database session."""
    async with get_session_factory()() as session:
        yield session


@asynccontextmanager
async def get_session_context() -> AsyncGenerator[AsyncSession, None]:
    """Session context manager for code running outside a request (CLI)."""
    async with get_session_factory()() as session:
        yield session


async def ensure_schema(engine: AsyncEngine) -> None:
    """Create the form tables once per process.

    Uses CREATE TABLE IF NOT EXISTS semantics, so running it against an
    already provisioned database is harmless.
    """
    global _schema_ready
    if _schema_ready:
        return

    async with _schema_lock:
        if _schema_ready:
            return

        # Register table metadata
        import formgate.models  # noqa: F401

        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all, checkfirst=True)

        _schema_ready = True
        logger.info("Form tables ready")


def reset_schema_state() -> None:
    """Forget the schema bootstrap so the next request runs it again."""
    global _schema_ready, _schema_lock
    _schema_ready = False
    _schema_lock = asyncio.Lock()


async def close_db() -> None:
    """Dispose of the engine and its connection pool."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
