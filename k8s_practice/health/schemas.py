"""Health check response schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

DatabaseStatus = Literal["unknown", "connected", "disconnected"]


class DatabaseHealth(BaseModel):
    """Database section of the health report."""

    enabled: bool
    status: DatabaseStatus = Field("unknown", description="Connectivity state")
    error: str | None = Field(None, description="Driver message when disconnected")


class HealthResponse(BaseModel):
    """Response for the health endpoint."""

    status: str = Field("healthy", description="Always 'healthy' while serving")
    timestamp: datetime
    uptime: float = Field(..., description="Process uptime in seconds")
    environment: str
    database: DatabaseHealth


class ReadinessResponse(BaseModel):
    """Response for readiness probe with dependency checks."""

    ready: bool
    checks: dict[str, bool] = Field(
        default_factory=dict,
        description="Individual dependency check results",
    )
    timestamp: datetime


class LivenessResponse(BaseModel):
    """Response for liveness probe."""

    alive: bool = True
    timestamp: datetime
