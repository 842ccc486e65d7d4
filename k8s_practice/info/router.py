"""Process and environment introspection endpoints."""

import os
import platform
import sys
from datetime import UTC, datetime

import psutil
from fastapi import APIRouter

from k8s_practice import get_app_version
from k8s_practice.core.dependencies import AppSettings, OptionalDatabase
from k8s_practice.info.schemas import EnvResponse, InfoResponse, MemoryUsage

# Variables safe to echo back; credentials such as DB_PASSWORD must never be listed
SAFE_ENV_VARS = (
    "ENVIRONMENT",
    "PORT",
    "HOST",
    "DB_ENABLED",
    "DB_HOST",
    "DB_PORT",
    "DB_NAME",
    "DB_USER",
    "KUBERNETES_SERVICE_HOST",
    "HOSTNAME",
    "POD_NAME",
    "POD_NAMESPACE",
)

router = APIRouter(prefix="/api", tags=["info"])


@router.get("/info", response_model=InfoResponse, summary="Process metadata")
async def info(settings: AppSettings, database: OptionalDatabase) -> InfoResponse:
    """Describe the running process and its runtime."""
    memory = psutil.Process().memory_info()
    return InfoResponse(
        app=settings.app_name,
        version=get_app_version(),
        python_version=sys.version.split()[0],
        platform=sys.platform,
        arch=platform.machine(),
        memory_usage=MemoryUsage(rss=memory.rss, vms=memory.vms),
        environment=settings.environment,
        database_enabled=database is not None,
        timestamp=datetime.now(UTC),
    )


@router.get("/env", response_model=EnvResponse, summary="Allow-listed environment")
async def env() -> EnvResponse:
    """Echo the allow-listed environment variables; unset ones are null."""
    return EnvResponse(
        message="Environment variables (safe ones only)",
        env={name: os.environ.get(name) for name in SAFE_ENV_VARS},
    )
