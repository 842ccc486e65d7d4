"""Shared FastAPI dependencies and their annotated aliases."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from k8s_practice.config.settings import Settings
from k8s_practice.db.session import Database, get_database, get_session


def get_app_settings(request: Request) -> Settings:
    """Return the settings the running app was created with."""
    return request.app.state.settings


# Type aliases for dependency injection - use these in route functions
AppSettings = Annotated[Settings, Depends(get_app_settings)]
OptionalDatabase = Annotated[Database | None, Depends(get_database)]
OptionalSession = Annotated[AsyncSession | None, Depends(get_session)]
