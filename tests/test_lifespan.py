"""Tests for application startup and shutdown."""

from unittest.mock import AsyncMock

import pytest

from k8s_practice.db.session import Database
from k8s_practice.main import create_app
from tests.conftest import make_settings


@pytest.fixture(autouse=True)
def keep_log_handlers(monkeypatch: pytest.MonkeyPatch) -> None:
    """Stop startup from replacing the handlers caplog relies on."""
    monkeypatch.setattr("k8s_practice.main.setup_logging", lambda level: None)


@pytest.mark.asyncio
async def test_shutdown_disposes_pool(
    database: Database, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test the pool is closed when the application stops."""
    dispose = AsyncMock(wraps=database.dispose)
    monkeypatch.setattr(database, "dispose", dispose)
    app = create_app(make_settings(db_enabled=True), database=database)

    async with app.router.lifespan_context(app):
        dispose.assert_not_awaited()

    dispose.assert_awaited_once()


@pytest.mark.asyncio
async def test_startup_logs_database_time(
    database: Database, caplog: pytest.LogCaptureFixture
) -> None:
    """Test a reachable database is checked during startup."""
    app = create_app(make_settings(db_enabled=True), database=database)

    with caplog.at_level("INFO", logger="k8s_practice.main"):
        async with app.router.lifespan_context(app):
            pass

    assert "Database connected successfully at:" in caplog.text


@pytest.mark.asyncio
async def test_startup_survives_unreachable_database(
    unreachable_database: Database, caplog: pytest.LogCaptureFixture
) -> None:
    """Test startup completes and logs the failure when the database is down."""
    app = create_app(make_settings(db_enabled=True), database=unreachable_database)
    started = False

    with caplog.at_level("INFO", logger="k8s_practice.main"):
        async with app.router.lifespan_context(app):
            started = True

    assert started
    assert "Database connection failed: unable to open database file" in caplog.text
    assert "Application shutting down" in caplog.text


@pytest.mark.asyncio
async def test_lifespan_without_database() -> None:
    """Test startup and shutdown work with the database disabled."""
    app = create_app(make_settings())

    async with app.router.lifespan_context(app):
        assert app.state.database is None
