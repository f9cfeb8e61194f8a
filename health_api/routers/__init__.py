"""API routers mounted under the configured prefix."""

from health_api.routers.auth import auth_router
from health_api.routers.health import health_router
from health_api.routers.records import medications_router, symptoms_router
from health_api.routers.stats import stats_router

__all__ = [
    "auth_router",
    "health_router",
    "medications_router",
    "symptoms_router",
    "stats_router",
]
