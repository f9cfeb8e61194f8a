"""
FastAPI application entry point for the Health Diary API.

This module provides the main FastAPI application with:
- Service index, health and metrics endpoints
- Authentication, symptom, medication and statistics routers
- Request logging with correlation IDs
- Prometheus metrics
- CORS and security headers
- Database connection pool management
- A single JSON error envelope for every failure
"""

import structlog
import uvicorn
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException

from health_api.config import Settings, get_settings
from health_api.dependencies import close_db_pool, get_pool_if_ready, init_db_pool
from health_api.errors import HealthAPIError, NotFound, ValidationError
from health_api.logging import configure_logging
from health_api.middleware.request_logging import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    database_connections_active,
    database_connections_idle,
)
from health_api.repositories.schema import create_schema
from health_api.routers import (
    auth_router,
    health_router,
    medications_router,
    stats_router,
    symptoms_router,
)

logger = structlog.get_logger(__name__)


def _error_body(error: str, message: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": error}
    if message:
        body["message"] = message
    return body


def format_validation_error(exc: RequestValidationError) -> str:
    """
    Condense FastAPI validation errors into one readable message.

    Only the first error is reported, e.g. ``intensity: Input should be less
    than or equal to 10``.
    """
    errors = exc.errors()
    if not errors:
        return ValidationError.default_message

    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Request body is not valid JSON"

    location = [
        str(part) for part in first.get("loc", ())
        if part not in ("body", "path", "query", "header")
    ]
    msg = str(first.get("msg", ValidationError.default_message))
    msg = msg.removeprefix("Value error, ")

    if location:
        return f"{'.'.join(location)}: {msg}"
    return msg


def _update_pool_metrics() -> None:
    pool = get_pool_if_ready()
    if pool is not None:
        database_connections_active.set(pool.get_size() - pool.get_idle_size())
        database_connections_idle.set(pool.get_idle_size())


# ============================================================================
# Lifespan Management
# ============================================================================


def build_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Application lifespan manager for startup and shutdown events.

        Handles:
        - Database connection pool initialization
        - Optional schema creation
        - Graceful shutdown and resource cleanup
        """
        logger.info(
            "application_starting",
            app_name=settings.app_name,
            version=settings.app_version,
            environment=settings.environment
        )

        try:
            pool = await init_db_pool(settings)

            if settings.database_create_schema:
                await create_schema(pool)

            _update_pool_metrics()

            logger.info(
                "application_started",
                app_name=settings.app_name,
                version=settings.app_version,
                environment=settings.environment
            )

            yield

        except Exception as e:
            logger.error("application_startup_failed", error=str(e), exc_info=True)
            raise

        finally:
            logger.info("application_shutting_down")
            await close_db_pool()
            logger.info("application_shutdown_complete")

    return lifespan


# ============================================================================
# Exception Handlers
# ============================================================================


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Translate every failure into the ``{success: false, error}`` envelope."""

    @app.exception_handler(HealthAPIError)
    async def api_error_handler(request: Request, exc: HealthAPIError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "api_error",
            path=request.url.path,
            status_code=exc.status_code,
            error=exc.message
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message),
            headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        message = format_validation_error(exc)
        logger.warning(
            "validation_error",
            path=request.url.path,
            error=message
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(message)
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions raised by routing (unknown path, wrong method)."""
        logger.warning(
            "http_exception",
            path=request.url.path,
            status_code=exc.status_code,
            detail=exc.detail
        )
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            error = NotFound.default_message
        else:
            error = str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(error),
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(
            "unexpected_exception",
            path=request.url.path,
            error=str(exc),
            exc_info=True
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(
                "Internal server error",
                None if settings.is_production else str(exc)
            )
        )


# ============================================================================
# FastAPI Application
# ============================================================================


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Application settings (defaults to cached settings)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.log_format == "json",
        service_name=settings.service_name,
        environment=settings.environment
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Personal health diary: register, log symptoms and medication "
            "intake, and view summary statistics."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=build_lifespan(settings),
        debug=settings.debug,
    )

    # ========================================================================
    # Middleware Configuration
    # ========================================================================

    if settings.cors_enabled:
        logger.info("configuring_cors", origins=settings.cors_origins)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=settings.cors_allow_credentials,
            allow_methods=settings.cors_allow_methods,
            allow_headers=settings.cors_allow_headers,
        )

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    if settings.security_headers_enabled:
        app.add_middleware(SecurityHeadersMiddleware)

    register_exception_handlers(app, settings)

    # ========================================================================
    # Service Index and Metrics
    # ========================================================================

    @app.get("/", tags=["Health"], response_class=JSONResponse)
    async def index() -> Dict[str, Any]:
        """Service name, status and the endpoint map."""
        prefix = settings.api_prefix
        return {
            "success": True,
            "data": {
                "message": settings.app_name,
                "version": settings.app_version,
                "status": "running",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "database": "PostgreSQL",
                "endpoints": {
                    "health": f"GET {prefix}/health",
                    "auth": {
                        "register": f"POST {prefix}/auth/register",
                        "login": f"POST {prefix}/auth/login",
                        "me": f"GET {prefix}/auth/me"
                    },
                    "symptoms": {
                        "getAll": f"GET {prefix}/symptoms",
                        "create": f"POST {prefix}/symptoms",
                        "delete": f"DELETE {prefix}/symptoms/{{id}}"
                    },
                    "medications": {
                        "getAll": f"GET {prefix}/medications",
                        "create": f"POST {prefix}/medications",
                        "delete": f"DELETE {prefix}/medications/{{id}}"
                    },
                    "stats": f"GET {prefix}/stats"
                }
            }
        }

    if settings.metrics_enabled:
        @app.get(settings.metrics_endpoint, tags=["Monitoring"], response_class=PlainTextResponse)
        async def metrics() -> Response:
            """
            Prometheus metrics endpoint.

            Exposes application metrics in Prometheus format for scraping.
            """
            _update_pool_metrics()
            return Response(
                content=generate_latest(),
                media_type=CONTENT_TYPE_LATEST
            )

    # ========================================================================
    # API Router Registration
    # ========================================================================

    app.include_router(health_router, prefix=settings.api_prefix)
    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(symptoms_router, prefix=settings.api_prefix)
    app.include_router(medications_router, prefix=settings.api_prefix)
    app.include_router(stats_router, prefix=settings.api_prefix)

    return app


app = create_app()


# ============================================================================
# Application Entry Point
# ============================================================================

if __name__ == "__main__":
    settings = get_settings()

    logger.info(
        "starting_uvicorn_server",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

    uvicorn.run(
        "health_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
