"""
Application error taxonomy.

Every error carries the HTTP status it maps to and a public message that is
safe to return to clients. Translation to the JSON envelope happens in the
exception handlers registered by ``health_api.main``.
"""

from typing import Dict, Optional

from fastapi import status


class HealthAPIError(Exception):
    """Base class for errors recovered at the request boundary."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"
    headers: Optional[Dict[str, str]] = None

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(HealthAPIError):
    """Malformed or out-of-range input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request data"


class Unauthorized(HealthAPIError):
    """Missing credentials, or credentials that do not match a user."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Access token not provided"
    headers = {"WWW-Authenticate": "Bearer"}


class Forbidden(HealthAPIError):
    """Credentials were presented but cannot be accepted."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid or expired token"


class InvalidToken(Forbidden):
    """
    Token failed verification.

    Malformed, badly signed, expired and incomplete tokens all raise this
    same error with the same message.
    """


class NotFound(HealthAPIError):
    """Resource does not exist or is not owned by the caller."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class Conflict(HealthAPIError):
    """Write would violate a uniqueness rule."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class InternalError(HealthAPIError):
    """Storage or unexpected failure."""
