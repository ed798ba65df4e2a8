"""Structured exceptions for the turf API client."""

from __future__ import annotations

from typing import Any, Optional


class ApiError(Exception):
    """Base exception for all turf API errors."""

    def __init__(
        self,
        status_code: int,
        message: str,
        detail: Any = None,
        endpoint: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.detail = detail
        self.endpoint = endpoint
        super().__init__(f"[{status_code}] {message}")


class ValidationError(ApiError):
    """400 Bad Request: counters or import payload rejected."""
    pass


class ForbiddenError(ApiError):
    """403 Forbidden: identity lacks the role to edit."""
    pass


class NotFoundError(ApiError):
    """404 Not Found: unknown slug, or a login the identity cannot see."""
    pass


class ServerError(ApiError):
    """500+ or transport failure (status_code 0)."""
    pass
