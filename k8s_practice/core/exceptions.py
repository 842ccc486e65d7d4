"""Custom exception classes for the API."""

from typing import Any


class APIError(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class BadRequestError(APIError):
    """Raised when the client sends unusable input."""

    def __init__(
        self,
        message: str = "Bad request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, status_code=400, details=details)


class DatabaseError(APIError):
    """Raised when a database operation fails.

    The underlying driver message is exposed to the caller under ``message``.
    """

    def __init__(self, message: str, reason: str) -> None:
        super().__init__(message=message, status_code=500, details={"message": reason})
