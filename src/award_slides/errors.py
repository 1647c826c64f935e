"""
Exception types shared by the API service and the editor client.

Backend handlers let ``AwardsError`` subclasses propagate; the application
turns them into ``500 {"error": ...}`` responses. ``ApiError`` is raised on
the client side when a call to the service fails.
"""

from __future__ import annotations

from typing import Optional


class AwardsError(Exception):
    """Base class for all award slides errors."""


class StoreError(AwardsError):
    """Key-value store read or write failed."""


class StorageError(AwardsError):
    """File storage (bucket) operation failed."""


class ApiError(AwardsError):
    """A request to the awards API failed or returned a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidTransition(AwardsError):
    """An editor operation is not allowed in the current interaction state."""
