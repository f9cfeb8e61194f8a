"""
Request logging, metrics and security headers middleware.

Every request gets a correlation ID (taken from ``X-Correlation-ID`` or
generated), which is bound to the structlog context for the duration of the
request and echoed on the response.
"""

import time
import uuid

import structlog
from fastapi import Request
from prometheus_client import Counter, Gauge, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

from health_api.logging import bind_context, clear_context
from health_api.middleware.auth import get_current_user_from_request

logger = structlog.get_logger(__name__)

# ============================================================================
# Prometheus Metrics
# ============================================================================

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"]
)

http_requests_in_progress = Gauge(
    "http_requests_in_progress",
    "HTTP requests currently in progress",
    ["method"]
)

database_connections_active = Gauge(
    "database_connections_active",
    "Connections currently held by the pool"
)

database_connections_idle = Gauge(
    "database_connections_idle",
    "Idle database connections in pool"
)


def _endpoint_label(request: Request) -> str:
    """Route template (``/api/symptoms/{record_id}``) to keep label cardinality low."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging and metrics."""

    async def dispatch(self, request: Request, call_next):
        """Process request and log details."""
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())

        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"

        clear_context()
        bind_context(correlation_id=correlation_id)

        http_requests_in_progress.labels(method=method).inc()
        start_time = time.perf_counter()

        logger.info(
            "request_started",
            method=method,
            path=path,
            client_ip=client_ip
        )

        try:
            response = await call_next(request)

            duration = time.perf_counter() - start_time
            endpoint = _endpoint_label(request)

            http_requests_total.labels(
                method=method,
                endpoint=endpoint,
                status=response.status_code
            ).inc()

            http_request_duration_seconds.labels(
                method=method,
                endpoint=endpoint
            ).observe(duration)

            user = get_current_user_from_request(request)
            logger.info(
                "request_completed",
                method=method,
                path=path,
                status_code=response.status_code,
                duration=f"{duration:.3f}s",
                user_id=user.id if user else None
            )

            response.headers["X-Correlation-ID"] = correlation_id
            return response

        except Exception as e:
            duration = time.perf_counter() - start_time
            endpoint = _endpoint_label(request)

            # The 500 response is rendered outside this middleware
            http_requests_total.labels(
                method=method,
                endpoint=endpoint,
                status=500
            ).inc()

            http_request_duration_seconds.labels(
                method=method,
                endpoint=endpoint
            ).observe(duration)

            logger.error(
                "request_failed",
                method=method,
                path=path,
                error=str(e),
                duration=f"{duration:.3f}s",
                exc_info=True
            )
            raise

        finally:
            http_requests_in_progress.labels(method=method).dec()
            clear_context()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response
