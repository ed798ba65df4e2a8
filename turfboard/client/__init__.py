"""Asynchronous client and debounced edit coordination for the turf API."""

from turfboard.client.api_client import TurfApiClient
from turfboard.client.coordinator import EditCoordinator
from turfboard.client.errors import ApiError, ForbiddenError, NotFoundError, ServerError, ValidationError

__all__ = [
    "TurfApiClient",
    "EditCoordinator",
    "ApiError",
    "ValidationError",
    "ForbiddenError",
    "NotFoundError",
    "ServerError",
]
