"""
Async store access for agents, conversations and messages.

The engine and session factory are process singletons created by the app
lifespan (or by test fixtures) through init_db(). Route handlers obtain a
session with Depends(get_db_session).

Handlers that publish live updates call ``await db.commit()`` themselves
before notifying subscribers; the dependency's own commit afterwards is
then a no-op. Anything raised inside the handler rolls the session back.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from typing import Any

import structlog
from sqlalchemy import DateTime, TypeDecorator
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from algorhythm.config import Settings, get_settings

log = structlog.get_logger(__name__)


class Base(DeclarativeBase):
    """Shared metadata for the agents, conversations and messages tables."""


class UTCDateTime(TypeDecorator[datetime]):
    """Timestamp column that always round-trips as an aware UTC datetime.

    SQLite keeps no offset, so values are written in UTC and get
    tzinfo=UTC back on load. A listed row then serializes with the same
    trailing Z as the instance broadcast at insert time.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value

    def process_result_value(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _engine_options(settings: Settings, for_test: bool) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": settings.db_echo_sql}
    if for_test:
        # Every test gets a fresh SQLite file; pooled connections would outlive it
        options["poolclass"] = NullPool
    elif not settings.is_sqlite:
        options.update(pool_size=5, max_overflow=10, pool_pre_ping=True)
    return options


def _redacted(url: str) -> str:
    return url.rsplit("@", 1)[-1]


def init_db(settings: Settings | None = None, *, for_test: bool = False) -> None:
    """Build the engine and session factory for the configured store."""
    global _engine, _session_factory
    cfg = settings or get_settings()
    _engine = create_async_engine(cfg.database_url, **_engine_options(cfg, for_test))
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    log.info("database.initialized", url=_redacted(cfg.database_url), test_mode=for_test)


async def create_tables() -> None:
    """Create the agents, conversations and messages tables if missing."""
    import algorhythm.models  # noqa: F401 - registers the mapped classes on Base

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("database.tables_ready", tables=sorted(Base.metadata.tables))


async def close_db() -> None:
    global _engine, _session_factory
    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _session_factory = None
    log.info("database.closed")


def get_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("Store not initialized; call init_db() first")
    return _engine


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield one session per request; commit on success, roll back on error."""
    if _session_factory is None:
        raise RuntimeError("Store not initialized; call init_db() first")

    async with _session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
