"""Async database pool and session management.

The pool is an explicit resource rather than a module global. ``create_app``
builds a :class:`Database` when ``DB_ENABLED`` is set (or accepts one that was
built elsewhere, e.g. in tests) and stores it on ``app.state.database``. The
lifespan handler disposes it on shutdown.

Handlers never touch ``app.state`` directly; they declare a dependency::

    @router.get("/api/data")
    async def list_items(db: OptionalSession) -> ItemList:
        if db is None:
            ...  # database disabled
        items = await ItemService.get_recent(db)

A ``None`` session means the database is disabled for this process.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from starlette.requests import Request

from k8s_practice.config.settings import Settings
from k8s_practice.db.base import Base

logger = logging.getLogger(__name__)

PING_QUERY = "SELECT 1"


class Database:
    """Connection pool plus the session factory bound to it."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a bounded PostgreSQL pool from settings.

        No connection is opened until the first query.
        """
        engine = create_async_engine(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=0,
            pool_timeout=settings.db_connect_timeout,
            pool_recycle=settings.db_idle_timeout,
            connect_args={"connect_timeout": settings.db_connect_timeout},
        )
        logger.debug(
            "Database pool configured | host=%s | port=%d | database=%s | size=%d",
            settings.db_host,
            settings.db_port,
            settings.db_name,
            settings.db_pool_size,
        )
        return cls(engine)

    async def ping(self, query: str = PING_QUERY) -> Any:
        """Run a trivial query and return its scalar result."""
        async with self.engine.connect() as conn:
            result = await conn.execute(text(query))
            return result.scalar()

    async def create_schema(self) -> None:
        """Create every table registered on the declarative base."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()


def describe_db_error(exc: BaseException) -> str:
    """Return the driver's own message for a database error."""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc)


def get_database(request: Request) -> Database | None:
    """FastAPI dependency returning the app's pool, or None when disabled."""
    return request.app.state.database


async def get_session(request: Request) -> AsyncGenerator[AsyncSession | None]:
    """FastAPI dependency that provides a database session without auto-commit.

    Yields None when the database is disabled. Writers commit explicitly;
    anything uncommitted is rolled back when the session closes.
    """
    database = get_database(request)
    if database is None:
        yield None
        return

    async with database.session_factory() as session:
        yield session
