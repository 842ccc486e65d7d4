"""Request middleware for logging, correlation IDs and response hardening."""

import logging
import re
import time
from contextvars import ContextVar
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

# Set per request; read by the log filter and the error responses
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

# Client ids are echoed into logs, so only short slug-like values are reused
_CORRELATION_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")

logger = logging.getLogger(__name__)

CONTENT_SECURITY_POLICY = "; ".join(
    [
        "default-src 'self'",
        "script-src 'self' 'unsafe-inline'",
        "style-src 'self' 'unsafe-inline'",
        "img-src 'self' data: https:",
        "connect-src 'self'",
        "font-src 'self'",
        "object-src 'none'",
        "media-src 'self'",
        "frame-src 'none'",
    ]
)
STRICT_TRANSPORT_SECURITY = "max-age=15552000; includeSubDomains"


def resolve_correlation_id(header_value: str | None) -> str:
    """Reuse the caller's correlation ID when it is well formed, else mint one."""
    if header_value and _CORRELATION_ID_PATTERN.match(header_value):
        return header_value
    return str(uuid4())


def correlation_headers() -> dict[str, str] | None:
    """Headers echoing the current correlation ID, if one is set."""
    correlation_id = correlation_id_var.get()
    return {"X-Correlation-ID": correlation_id} if correlation_id else None


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with a correlation ID and return it to the caller."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        correlation_id = resolve_correlation_id(request.headers.get("X-Correlation-ID"))
        correlation_id_var.set(correlation_id)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Innermost middleware turning uncaught exceptions into JSON 500s.

    It sits inside the other layers, so 500 responses still carry security
    headers, CORS headers and an access log line. Raw exception text is only
    returned when ``expose_errors`` is set.
    """

    def __init__(self, app: ASGIApp, expose_errors: bool = False) -> None:
        super().__init__(app)
        self.expose_errors = expose_errors

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            correlation_id = correlation_id_var.get()
            logger.exception("Unhandled error | path=%s", request.url.path)
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal server error",
                    "message": str(exc) if self.expose_errors else "Something went wrong",
                    "correlation_id": correlation_id,
                },
                headers=correlation_headers(),
            )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that writes one access log line per request."""

    def __init__(
        self,
        app: ASGIApp,
        logger: logging.Logger | None = None,
        expose_timing: bool = True,
    ) -> None:
        super().__init__(app)
        self.logger = logger or logging.getLogger("k8s_practice.requests")
        self.expose_timing = expose_timing

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Log request details and processing time."""
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time_ms = (time.perf_counter() - start_time) * 1000
        client = request.client.host if request.client else "-"

        self.logger.info(
            "Request completed | method=%s | path=%s | status=%d | client=%s"
            " | user_agent=%s | time=%.2fms",
            request.method,
            request.url.path,
            response.status_code,
            client,
            request.headers.get("user-agent", "-"),
            process_time_ms,
        )

        if self.expose_timing:
            response.headers["X-Process-Time"] = f"{process_time_ms:.2f}ms"
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses.

    Content-Security-Policy and HSTS are only sent in production so the
    landing page keeps working over plain HTTP during local development.
    """

    def __init__(self, app: ASGIApp, production: bool = False) -> None:
        super().__init__(app)
        self.production = production

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Add security headers to the response."""
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["X-XSS-Protection"] = "0"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["Cross-Origin-Opener-Policy"] = "same-origin"
        if self.production:
            response.headers["Content-Security-Policy"] = CONTENT_SECURITY_POLICY
            response.headers["Strict-Transport-Security"] = STRICT_TRANSPORT_SECURITY
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Middleware to limit request body size."""

    def __init__(self, app: ASGIApp, max_size: int) -> None:
        """Initialize with max request size in bytes."""
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Check request size before processing."""
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                if int(content_length) > self.max_size:
                    return JSONResponse(
                        status_code=413,
                        content={"error": "Request body too large"},
                    )
            except ValueError:
                return JSONResponse(
                    status_code=400,
                    content={"error": "Invalid Content-Length header"},
                )
        return await call_next(request)
