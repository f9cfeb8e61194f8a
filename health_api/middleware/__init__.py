"""FastAPI middleware components.

This package contains the authentication gateway and the middleware for
request logging, metrics and security headers.
"""

from health_api.middleware.auth import (
    AuthGateway,
    get_current_user_from_request,
)
from health_api.middleware.request_logging import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)

__all__ = [
    "AuthGateway",
    "get_current_user_from_request",
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
]
