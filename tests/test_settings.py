"""Tests for settings resolution."""

import pytest

from tests.conftest import make_settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test documented defaults apply when nothing is configured."""
    for name in ("HOST", "PORT", "ENVIRONMENT", "DB_NAME", "DB_POOL_SIZE"):
        monkeypatch.delenv(name, raising=False)

    settings = make_settings()

    assert settings.host == "0.0.0.0"
    assert settings.port == 3000
    assert settings.environment == "development"
    assert settings.is_development is True
    assert settings.is_production is False
    assert settings.db_name == "k8s_practice"
    assert settings.db_pool_size == 20


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test settings come from environment variables."""
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("DB_ENABLED", "true")
    monkeypatch.setenv("DB_HOST", "postgres.default.svc")

    settings = make_settings()

    assert settings.port == 8080
    assert settings.is_production is True
    assert settings.is_development is False
    assert settings.db_enabled is True
    assert settings.db_host == "postgres.default.svc"


def test_database_url() -> None:
    """Test the async psycopg URL is assembled from its parts."""
    settings = make_settings(db_user="u", db_password="p", db_host="h", db_port=6543)

    url = settings.database_url

    assert url.drivername == "postgresql+psycopg"
    assert url.username == "u"
    assert url.password == "p"
    assert url.host == "h"
    assert url.port == 6543
    assert "sslmode" not in url.query


def test_database_url_with_ssl() -> None:
    """Test DB_SSL requires an encrypted connection."""
    url = make_settings(db_ssl=True).database_url

    assert url.query["sslmode"] == "require"


def test_password_is_secret() -> None:
    """Test the password does not leak through the settings repr."""
    settings = make_settings(db_password="hunter2")

    assert "hunter2" not in repr(settings)


def test_invalid_log_level_rejected() -> None:
    """Test unknown log levels are refused."""
    with pytest.raises(ValueError, match="Invalid log level"):
        make_settings(log_level="LOUD")
