"""Introspection response schemas."""

from datetime import datetime

from pydantic import BaseModel


class MemoryUsage(BaseModel):
    rss: int
    vms: int


class InfoResponse(BaseModel):
    """Process and runtime metadata."""

    app: str
    version: str
    python_version: str
    platform: str
    arch: str
    memory_usage: MemoryUsage
    environment: str
    database_enabled: bool
    timestamp: datetime


class EnvResponse(BaseModel):
    message: str
    env: dict[str, str | None]
