"""Tests for introspection endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_info(client: AsyncClient) -> None:
    """Test process metadata is reported."""
    response = await client.get("/api/info")

    assert response.status_code == 200
    data = response.json()
    assert data["app"] == "K8s Practice Application"
    assert data["environment"] == "development"
    assert data["database_enabled"] is False
    assert data["memory_usage"]["rss"] > 0
    for field in ("version", "python_version", "platform", "arch", "timestamp"):
        assert data[field]


@pytest.mark.asyncio
async def test_info_reports_database_enabled(db_client: AsyncClient) -> None:
    """Test database_enabled follows the injected pool."""
    response = await db_client.get("/api/info")

    assert response.json()["database_enabled"] is True


@pytest.mark.asyncio
async def test_env_lists_safe_variables(
    client: AsyncClient,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test allow-listed variables are echoed and unset ones are null."""
    monkeypatch.setenv("POD_NAME", "k8s-practice-7d9f")
    monkeypatch.delenv("POD_NAMESPACE", raising=False)

    response = await client.get("/api/env")

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Environment variables (safe ones only)"
    assert data["env"]["POD_NAME"] == "k8s-practice-7d9f"
    assert data["env"]["POD_NAMESPACE"] is None


@pytest.mark.asyncio
async def test_env_never_exposes_password(
    client: AsyncClient,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test the database password is never part of the response."""
    monkeypatch.setenv("DB_PASSWORD", "super-secret")

    response = await client.get("/api/env")

    assert "DB_PASSWORD" not in response.json()["env"]
    assert "super-secret" not in response.text
