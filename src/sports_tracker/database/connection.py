"""Engine and session lifecycle.

One async engine per process, created by `init_db()` at startup and
disposed by `close_db()` at shutdown. PostgreSQL is reached through
asyncpg; SQLite through aiosqlite (tests and local demos).

## Usage

```python
from sports_tracker.database import get_db, init_db

await init_db()

async with get_db() as session:
    user = await session.get(User, user_id)
```

Route handlers receive a session through the `get_db_session` dependency.
Sessions never commit on their own: services call `commit_or_raise`.

## Tuning

- DATABASE_POOL_SIZE / DATABASE_MAX_OVERFLOW size the PostgreSQL pool
- DATABASE_ECHO logs every SQL statement
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from sports_tracker.config import Settings, get_settings
from sports_tracker.database.models import Base
from sports_tracker.exceptions import PersistenceError

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _build_engine(settings: Settings) -> AsyncEngine:
    if settings.is_sqlite:
        # One shared connection so an in-memory database outlives each session
        engine = create_async_engine(
            settings.database_url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            echo=settings.database_echo,
        )
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
        echo=settings.database_echo,
    )


def _require_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _engine


async def init_db() -> None:
    """Create the engine and session factory from settings."""
    global _engine, _session_factory

    settings = get_settings()
    logger.info(f"Connecting to {'SQLite' if settings.is_sqlite else 'PostgreSQL'} database")

    _engine = _build_engine(settings)
    _session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def close_db() -> None:
    """Dispose of the engine. Safe to call when nothing is open."""
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
        logger.info("Database connection closed")
    _engine = None
    _session_factory = None


async def create_tables() -> None:
    """Create every table that does not exist yet."""
    async with _require_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


async def drop_tables() -> None:
    """Drop every table. Destroys all data; meant for tests."""
    async with _require_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.warning("Database tables dropped")


@asynccontextmanager
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Open a session; rolled back if the block raises, always closed."""
    _require_engine()
    session = _session_factory()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    async with get_db() as session:
        yield session


async def commit_or_raise(session: AsyncSession, action: str) -> None:
    """Commit the session, converting store failures to PersistenceError.

    The transaction is rolled back on failure so a partial write is never
    reported as success. Integrity errors are rolled back and re-raised
    unchanged for callers that rely on a uniqueness constraint.
    """
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Database write failed while trying to {action}: {e}")
        raise PersistenceError(f"Could not {action}.") from e
