"""
FastAPI dependency injection for database, authentication and services.

Provides injectable dependencies for:
- Database connections (asyncpg pool)
- Repository instances
- Service instances
- The authenticated identity of a request

Every provider takes its settings through ``Depends(get_settings)`` so tests
can swap configuration, repositories or services with
``app.dependency_overrides``.
"""

import asyncpg
import structlog
from typing import Optional
from fastapi import Depends, Request

from health_api.config import get_settings, Settings
from health_api.middleware.auth import AuthGateway
from health_api.models.auth import CurrentUser
from health_api.repositories.health_repo import HealthRepository
from health_api.repositories.record_repo import MedicationRepository, SymptomRepository
from health_api.repositories.user_repo import UserRepository
from health_api.services.auth_service import AuthService
from health_api.services.credential_store import CredentialStore
from health_api.services.health_service import HealthService
from health_api.services.record_service import MedicationService, SymptomService
from health_api.services.stats_service import StatsService
from health_api.services.token_service import TokenService

logger = structlog.get_logger(__name__)


# ============================================================================
# DATABASE CONNECTION POOL
# ============================================================================

_pool: Optional[asyncpg.Pool] = None


async def init_db_pool(settings: Optional[Settings] = None) -> asyncpg.Pool:
    """
    Initialize database connection pool.

    Should be called during application startup. The pool opens
    ``database_pool_min_size`` connections up front.

    Args:
        settings: Application settings (defaults to cached settings)

    Returns:
        asyncpg connection pool
    """
    global _pool

    if _pool is not None:
        return _pool

    settings = settings or get_settings()

    try:
        _pool = await asyncpg.create_pool(
            settings.database_dsn,
            min_size=settings.database_pool_min_size,
            max_size=settings.database_pool_max_size,
            max_inactive_connection_lifetime=settings.database_idle_lifetime,
            command_timeout=settings.database_command_timeout,
            timeout=settings.database_pool_timeout
        )

        logger.info(
            "database_pool_initialized",
            min_size=settings.database_pool_min_size,
            max_size=settings.database_pool_max_size,
            database=settings.database_host
        )

        return _pool

    except Exception as e:
        logger.error("database_pool_init_failed", error=str(e), database=settings.database_host)
        raise


async def close_db_pool():
    """
    Close database connection pool.

    Should be called during application shutdown.
    """
    global _pool

    if _pool is not None:
        await _pool.close()
        logger.info("database_pool_closed")
        _pool = None


def get_db_pool() -> asyncpg.Pool:
    """
    Get database connection pool.

    Returns:
        asyncpg connection pool

    Raises:
        RuntimeError: If pool is not initialized
    """
    if _pool is None:
        logger.error("database_pool_not_initialized")
        raise RuntimeError(
            "Database pool not initialized. Call init_db_pool() during startup."
        )
    return _pool


def get_pool_if_ready() -> Optional[asyncpg.Pool]:
    """Pool or None; used by the metrics endpoint, which must not fail."""
    return _pool


# ============================================================================
# REPOSITORY DEPENDENCIES
# ============================================================================


def get_user_repository(
    pool: asyncpg.Pool = Depends(get_db_pool),
    settings: Settings = Depends(get_settings)
) -> UserRepository:
    return UserRepository(pool, settings)


def get_symptom_repository(
    pool: asyncpg.Pool = Depends(get_db_pool),
    settings: Settings = Depends(get_settings)
) -> SymptomRepository:
    return SymptomRepository(pool, settings)


def get_medication_repository(
    pool: asyncpg.Pool = Depends(get_db_pool),
    settings: Settings = Depends(get_settings)
) -> MedicationRepository:
    return MedicationRepository(pool, settings)


def get_health_repository(
    pool: asyncpg.Pool = Depends(get_db_pool),
    settings: Settings = Depends(get_settings)
) -> HealthRepository:
    return HealthRepository(pool, settings)


# ============================================================================
# SERVICE DEPENDENCIES
# ============================================================================


def get_token_service(settings: Settings = Depends(get_settings)) -> TokenService:
    """
    Get token service instance.

    Returns:
        Token service bound to the configured signing key
    """
    return TokenService(settings)


def get_credential_store(
    user_repo: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_settings)
) -> CredentialStore:
    return CredentialStore(user_repo, settings)


def get_auth_service(
    credential_store: CredentialStore = Depends(get_credential_store),
    token_service: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_settings)
) -> AuthService:
    """
    Get authentication service instance.

    Returns:
        Authentication service
    """
    return AuthService(credential_store, token_service, settings)


def get_symptom_service(
    repo: SymptomRepository = Depends(get_symptom_repository),
    settings: Settings = Depends(get_settings)
) -> SymptomService:
    return SymptomService(repo, settings)


def get_medication_service(
    repo: MedicationRepository = Depends(get_medication_repository),
    settings: Settings = Depends(get_settings)
) -> MedicationService:
    return MedicationService(repo, settings)


def get_stats_service(
    symptom_repo: SymptomRepository = Depends(get_symptom_repository),
    medication_repo: MedicationRepository = Depends(get_medication_repository),
    settings: Settings = Depends(get_settings)
) -> StatsService:
    return StatsService(symptom_repo, medication_repo, settings)


def get_health_service(
    health_repo: HealthRepository = Depends(get_health_repository),
    settings: Settings = Depends(get_settings)
) -> HealthService:
    return HealthService(health_repo, settings)


# ============================================================================
# AUTHENTICATION DEPENDENCIES
# ============================================================================


def get_auth_gateway(
    token_service: TokenService = Depends(get_token_service)
) -> AuthGateway:
    return AuthGateway(token_service)


async def get_current_user(
    request: Request,
    gateway: AuthGateway = Depends(get_auth_gateway)
) -> CurrentUser:
    """
    Get current authenticated user from the bearer token.

    The identity is taken from the token alone; the database is not
    consulted.

    Args:
        request: HTTP request
        gateway: Auth gateway

    Returns:
        Current authenticated user

    Raises:
        Unauthorized: If the bearer token is missing
        Forbidden: If the token is invalid or expired

    Example:
        @router.get("/symptoms")
        async def list_symptoms(user: CurrentUser = Depends(get_current_user)):
            ...
    """
    return await gateway(request)
