"""
Engine, session factory and the FastAPI session dependency.

One engine per process. Sessions never expire attributes on commit: the
ingestion pipeline commits mid-run and keeps using the loaded rows.
"""

from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from knowledge_core.boundary.db.base import Base
from knowledge_core.configs import get_settings


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless enabled per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Build the engine described by ``DatabaseSettings``.

    PostgreSQL gets a sized, pre-pinging pool. SQLite keeps the default
    pool and has foreign keys switched on for every new connection.
    """
    db_config = get_settings().database

    if db_config.is_sqlite:
        engine = create_async_engine(db_config.url, echo=db_config.echo_sql)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(
        db_config.url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; closed (and rolled back if uncommitted) on exit."""
    async with get_async_session_factory()() as session:
        yield session


async def create_tables(engine: AsyncEngine | None = None) -> None:
    """Create every table on ``Base.metadata`` that does not exist yet."""
    import knowledge_core.boundary.db.models  # noqa: F401  registers the mappers

    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
