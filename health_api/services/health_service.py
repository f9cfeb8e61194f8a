"""Service health reporting."""

import time
import structlog
from datetime import datetime, timezone
from typing import Optional

from health_api.config import Settings, get_settings
from health_api.models.health import (
    DatabaseHealth, DatabaseStatus, HealthReport, HealthStatus
)
from health_api.repositories.health_repo import HealthRepository

logger = structlog.get_logger(__name__)

PROCESS_STARTED_AT = time.monotonic()


class HealthService:
    """Builds the report served by GET /api/health."""

    def __init__(self, health_repo: HealthRepository, settings: Optional[Settings] = None):
        self.health_repo = health_repo
        self.settings = settings or get_settings()

    def _report(
        self,
        status: HealthStatus,
        database: DatabaseHealth,
        error: Optional[str] = None
    ) -> HealthReport:
        return HealthReport(
            status=status,
            timestamp=datetime.now(timezone.utc),
            service=self.settings.service_name,
            version=self.settings.app_version,
            environment=self.settings.environment,
            database=database,
            uptime_seconds=round(time.monotonic() - PROCESS_STARTED_AT, 3),
            error=error
        )

    async def check(self) -> HealthReport:
        """
        Probe the database and report overall health.

        A failing probe produces an ``unhealthy`` report rather than an
        exception; the error is logged.
        """
        try:
            probe = await self.health_repo.check()
        except Exception as e:
            logger.error("database_health_check_failed", error=str(e))
            return self._report(
                HealthStatus.UNHEALTHY,
                DatabaseHealth(status=DatabaseStatus.DISCONNECTED),
                None if self.settings.is_production else str(e)
            )

        return self._report(
            HealthStatus.HEALTHY,
            DatabaseHealth(
                status=DatabaseStatus.CONNECTED,
                time=probe["time"],
                version=probe["version"]
            )
        )
