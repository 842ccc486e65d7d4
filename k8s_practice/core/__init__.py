"""Core utilities and middleware."""

from k8s_practice.core.exceptions import APIError, BadRequestError, DatabaseError
from k8s_practice.core.middleware import correlation_id_var

__all__ = [
    "APIError",
    "BadRequestError",
    "DatabaseError",
    "correlation_id_var",
]
