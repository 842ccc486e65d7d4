"""Health check endpoints."""

import logging
import time
from datetime import UTC, datetime

import psutil
from fastapi import APIRouter, Response, status
from sqlalchemy.exc import SQLAlchemyError

from k8s_practice.core.dependencies import AppSettings, OptionalDatabase
from k8s_practice.db.session import describe_db_error
from k8s_practice.health.schemas import (
    DatabaseHealth,
    HealthResponse,
    LivenessResponse,
    ReadinessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

# Orchestrators and load balancers may check with HEAD
CHECK_METHODS = ["GET", "HEAD"]


def process_uptime() -> float:
    """Seconds since this process was started."""
    return time.time() - psutil.Process().create_time()


@router.api_route(
    "/health",
    methods=CHECK_METHODS,
    response_model=HealthResponse,
    response_model_exclude_none=True,
    summary="Health report",
    description="Report uptime, environment and database connectivity",
)
async def health(settings: AppSettings, database: OptionalDatabase) -> HealthResponse:
    """Health report - always 200, database state is informational."""
    db_health = DatabaseHealth(enabled=database is not None)

    if database is not None:
        try:
            await database.ping()
            db_health.status = "connected"
        except (SQLAlchemyError, OSError) as e:
            reason = describe_db_error(e)
            logger.warning("Database health check failed: %s", reason)
            db_health.status = "disconnected"
            db_health.error = reason

    return HealthResponse(
        timestamp=datetime.now(UTC),
        uptime=process_uptime(),
        environment=settings.environment,
        database=db_health,
    )


@router.api_route(
    "/ready",
    methods=CHECK_METHODS,
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Check if the application is ready to serve traffic",
    responses={
        status.HTTP_200_OK: {"description": "Service is ready"},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"description": "Service is not ready"},
    },
)
async def readiness(response: Response, database: OptionalDatabase) -> ReadinessResponse:
    """Readiness probe - is the application ready to serve traffic?

    Returns 503 if the database is enabled and cannot answer a trivial query.
    """
    checks = {"app": True, "database": True}

    if database is not None:
        try:
            await database.ping()
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Database readiness check failed: %s", describe_db_error(e))
            checks["database"] = False

    ready = all(checks.values())

    # Return 503 if not ready (Kubernetes expects this)
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(ready=ready, checks=checks, timestamp=datetime.now(UTC))


@router.api_route(
    "/live",
    methods=CHECK_METHODS,
    response_model=LivenessResponse,
    summary="Liveness probe",
    description="Check if the application is running",
)
async def liveness() -> LivenessResponse:
    """Liveness probe - is the application running?"""
    return LivenessResponse(timestamp=datetime.now(UTC))
