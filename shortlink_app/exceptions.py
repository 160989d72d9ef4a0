"""
Exception hierarchy for the shortlink service.

Each error carries the HTTP status it maps to at the API boundary,
so services raise domain errors and never build HTTP responses themselves.
"""

from typing import Optional


class ShortlinkError(Exception):
    """Base exception for all application-specific errors."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InvalidInputError(ShortlinkError):
    """Raised when request data is malformed or empty."""

    status_code = 400
    default_message = "Invalid input"


class NotFoundError(ShortlinkError):
    """Raised when a redirect code is unknown."""

    status_code = 404
    default_message = "Redirect code not found"


class PersistenceError(ShortlinkError):
    """Raised when a write to the link store fails."""

    default_message = "Failed to create short URL"


class DuplicateKeyError(PersistenceError):
    """Raised when a redirect code is already taken."""

    default_message = "Redirect code already exists"


class InternalError(ShortlinkError):
    """Raised on transport failures to the store or the cache."""


class CacheError(InternalError):
    """Raised when the cache backend cannot be reached."""

    default_message = "Cache unavailable"
