"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator
from typing import Any

# Keep the developer's environment from enabling the real database
os.environ["DB_ENABLED"] = "false"

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from k8s_practice.config.settings import Settings
from k8s_practice.db.session import Database
from k8s_practice.main import create_app

# Use SQLite for tests (faster and no external DB needed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
# A path that cannot be opened, so every connection attempt fails
UNREACHABLE_DATABASE_URL = "sqlite+aiosqlite:////nonexistent-dir/k8s-practice.db"


def make_settings(**overrides: Any) -> Settings:
    """Build settings that ignore any local .env file."""
    return Settings(_env_file=None, **overrides)  # type: ignore[call-arg]


def make_client(app: FastAPI) -> AsyncClient:
    """Create an in-process HTTP client for the given app."""
    return AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    )


@pytest.fixture
def settings() -> Settings:
    """Default settings with the database disabled."""
    return make_settings()


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[Database]:
    """In-memory database with the schema created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db = Database(engine)
    await db.create_schema()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def unreachable_database() -> AsyncGenerator[Database]:
    """Database whose connections always fail."""
    db = Database(create_async_engine(UNREACHABLE_DATABASE_URL))
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def client(settings: Settings) -> AsyncGenerator[AsyncClient]:
    """Client for an app running without a database."""
    async with make_client(create_app(settings)) as ac:
        yield ac


@pytest_asyncio.fixture
async def db_client(database: Database) -> AsyncGenerator[AsyncClient]:
    """Client for an app backed by the in-memory database."""
    app = create_app(make_settings(db_enabled=True), database=database)
    async with make_client(app) as ac:
        yield ac


@pytest_asyncio.fixture
async def unreachable_db_client(
    unreachable_database: Database,
) -> AsyncGenerator[AsyncClient]:
    """Client for an app whose database cannot be reached."""
    app = create_app(make_settings(db_enabled=True), database=unreachable_database)
    async with make_client(app) as ac:
        yield ac
