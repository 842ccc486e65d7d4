"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from k8s_practice import get_app_version
from k8s_practice.config.settings import Settings, get_settings
from k8s_practice.core.exceptions import APIError
from k8s_practice.core.logging import setup_logging
from k8s_practice.core.middleware import (
    CorrelationIdMiddleware,
    RequestLoggingMiddleware,
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
    UnhandledErrorMiddleware,
    correlation_headers,
    correlation_id_var,
)
from k8s_practice.db.session import Database, describe_db_error
from k8s_practice.health.router import router as health_router
from k8s_practice.info.router import router as info_router
from k8s_practice.items.router import router as items_router

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

# OpenAPI tags for documentation
OPENAPI_TAGS = [
    {
        "name": "health",
        "description": "Health check endpoints for liveness and readiness probes",
    },
    {
        "name": "items",
        "description": "Toy data endpoint, backed by the database when enabled",
    },
    {
        "name": "info",
        "description": "Process and environment introspection",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown.

    uvicorn turns SIGTERM and SIGINT into a lifespan shutdown, so the pool is
    closed on termination. In-flight requests are not drained first.
    """
    settings: Settings = app.state.settings
    database: Database | None = app.state.database

    # Startup
    setup_logging(settings.log_level)
    logger.info(
        "%s starting | environment=%s | database_enabled=%s",
        settings.app_name,
        settings.environment,
        database is not None,
    )

    # Startup continues even when the database is down; /ready reports it
    if database is not None:
        try:
            now = await database.ping("SELECT CURRENT_TIMESTAMP")
            logger.info("Database connected successfully at: %s", now)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Database connection failed: %s", describe_db_error(e))

    yield

    # Shutdown
    logger.info("Application shutting down")
    if database is not None:
        try:
            await database.dispose()
            logger.info("Database pool closed")
        except Exception as e:
            logger.error("Error closing database pool: %s", e)


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use; defaults to the environment.
        database: A prebuilt pool. When omitted, one is built from settings
            if the database is enabled.
    """
    settings = settings or get_settings()
    if database is None and settings.db_enabled:
        database = Database.from_settings(settings)

    # Only expose OpenAPI docs outside production
    docs_enabled = not settings.is_production

    app = FastAPI(
        title=settings.app_name,
        version=get_app_version(),
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        openapi_tags=OPENAPI_TAGS,
    )
    app.state.settings = settings
    app.state.database = database

    # Add middleware (order matters - last added = outermost)
    app.add_middleware(UnhandledErrorMiddleware, expose_errors=settings.is_development)
    app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.max_request_size)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-ID", "X-Process-Time"],
    )
    app.add_middleware(SecurityHeadersMiddleware, production=settings.is_production)
    app.add_middleware(
        RequestLoggingMiddleware, expose_timing=settings.expose_timing_header
    )
    app.add_middleware(CorrelationIdMiddleware)

    # Register exception handlers
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        """Handle custom API errors with correlation ID for debugging."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.message,
                "correlation_id": correlation_id_var.get(),
                **exc.details,
            },
            headers=correlation_headers(),
        )

    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report unparseable request bodies as client errors."""
        # Convert errors to JSON-serializable format (ctx may contain non-serializable objects)
        errors = [
            {
                "type": error.get("type"),
                "loc": error.get("loc"),
                "msg": error.get("msg"),
            }
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Invalid request body",
                "detail": errors,
                "correlation_id": correlation_id_var.get(),
            },
            headers=correlation_headers(),
        )

    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Turn unmatched routes into a structured not-found response."""
        if exc.status_code in (
            status.HTTP_404_NOT_FOUND,
            status.HTTP_405_METHOD_NOT_ALLOWED,
        ):
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={
                    "error": "Not found",
                    "message": f"Route {request.method} {request.url.path} not found",
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=exc.headers,
        )

    app.add_exception_handler(APIError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError,
        validation_error_handler,  # pyright: ignore[reportArgumentType]
    )
    app.add_exception_handler(
        StarletteHTTPException,
        http_error_handler,  # pyright: ignore[reportArgumentType]
    )

    # Include routers
    app.include_router(health_router)
    app.include_router(info_router)
    app.include_router(items_router)

    @app.api_route("/", methods=["GET", "HEAD"], include_in_schema=False)
    async def root() -> FileResponse:
        """Serve the landing page."""
        return FileResponse(STATIC_DIR / "index.html")

    # Static assets last so API routes always win
    app.mount("/", StaticFiles(directory=STATIC_DIR), name="static")

    return app


# Create the application instance
app = create_app()


def main() -> None:
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "k8s_practice.main:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
