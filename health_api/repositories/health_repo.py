"""Database connectivity probe."""

import structlog
from typing import Any, Dict

from health_api.repositories.base import BaseRepository

logger = structlog.get_logger(__name__)


class HealthRepository(BaseRepository):
    """Runs the probe query used by the health endpoint."""

    async def check(self) -> Dict[str, Any]:
        """
        Query the database clock and version.

        Returns:
            Dict with ``time`` and a shortened ``version`` string

        Raises:
            Exception: Any driver or pool error, left to the caller
        """
        async with self.connection() as conn:
            row = await conn.fetchrow("SELECT NOW() AS time, version() AS version")

        version = " ".join(str(row["version"]).split(" ")[:4])
        logger.debug("database_probe_ok", version=version)
        return {"time": row["time"], "version": version}
