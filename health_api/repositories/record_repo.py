"""
Owner-scoped repositories for symptoms and medications.

Every statement carries the ``user_id`` predicate; rows belonging to other
users are never fetched, so nothing is filtered after the query.
"""

import asyncpg
import structlog
from datetime import datetime
from typing import Generic, List, Tuple, Type, TypeVar

from pydantic import BaseModel

from health_api.models.records import MedicationRecord, SymptomRecord
from health_api.repositories.base import BaseRepository

logger = structlog.get_logger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class OwnedRecordRepository(BaseRepository, Generic[RecordT]):
    """
    Common list/count/delete queries for a table with a ``user_id`` owner.

    Subclasses set the table, selected columns, ordering expression and
    the record model rows are converted to.
    """

    table: str
    columns: str
    order_by: str
    record_model: Type[RecordT]

    def _to_record(self, row: asyncpg.Record) -> RecordT:
        return self.record_model(**dict(row))

    async def list_for_user(self, user_id: int, limit: int) -> List[RecordT]:
        """
        List the newest records owned by a user.

        Args:
            user_id: Owner ID
            limit: Maximum number of rows

        Returns:
            Records ordered newest first
        """
        try:
            async with self.connection() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT {self.columns}
                    FROM {self.table}
                    WHERE user_id = $1
                    ORDER BY {self.order_by} DESC
                    LIMIT $2
                    """,
                    user_id,
                    limit
                )
        except Exception as e:
            logger.error(f"{self.table}_list_failed", error=str(e), user_id=user_id)
            raise

        return [self._to_record(row) for row in rows]

    async def delete_for_user(self, user_id: int, record_id: int) -> bool:
        """
        Delete a record if it is owned by the user.

        Args:
            user_id: Owner ID
            record_id: Record ID

        Returns:
            True if a row was deleted, False if none matched
        """
        try:
            async with self.connection() as conn:
                deleted_id = await conn.fetchval(
                    f"""
                    DELETE FROM {self.table}
                    WHERE id = $1 AND user_id = $2
                    RETURNING id
                    """,
                    record_id,
                    user_id
                )
        except Exception as e:
            logger.error(
                f"{self.table}_delete_failed",
                error=str(e),
                user_id=user_id,
                record_id=record_id
            )
            raise

        return deleted_id is not None

    async def count_for_user(self, user_id: int) -> int:
        """
        Count records owned by a user.

        Args:
            user_id: Owner ID

        Returns:
            Row count
        """
        try:
            async with self.connection() as conn:
                count = await conn.fetchval(
                    f"""
                    SELECT COUNT(*)
                    FROM {self.table}
                    WHERE user_id = $1
                    """,
                    user_id
                )
        except Exception as e:
            logger.error(f"{self.table}_count_failed", error=str(e), user_id=user_id)
            raise

        return int(count or 0)


class SymptomRepository(OwnedRecordRepository[SymptomRecord]):
    """Repository for the ``symptoms`` table."""

    table = "symptoms"
    columns = "id, user_id, description, intensity, location, notes, created_at"
    order_by = "created_at"
    record_model = SymptomRecord

    async def create(
        self,
        user_id: int,
        description: str,
        intensity: int,
        location: str,
        notes: str
    ) -> SymptomRecord:
        """
        Insert a symptom for a user.

        Args:
            user_id: Owner ID, taken from the authenticated identity
            description: Trimmed description
            intensity: Severity 1-10
            location: Body location
            notes: Free-form notes

        Returns:
            Created symptom
        """
        try:
            async with self.connection() as conn:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO symptoms (user_id, description, intensity, location, notes)
                    VALUES ($1, $2, $3, $4, $5)
                    RETURNING {self.columns}
                    """,
                    user_id,
                    description,
                    intensity,
                    location,
                    notes
                )
        except Exception as e:
            logger.error("symptoms_create_failed", error=str(e), user_id=user_id)
            raise

        logger.info("symptom_created", user_id=user_id, symptom_id=row["id"])
        return self._to_record(row)

    async def intensity_counts(self, user_id: int) -> List[Tuple[int, int]]:
        """
        Count a user's symptoms per intensity value.

        Rows without an intensity are skipped.

        Args:
            user_id: Owner ID

        Returns:
            (intensity, count) pairs ordered by intensity
        """
        try:
            async with self.connection() as conn:
                rows = await conn.fetch(
                    """
                    SELECT intensity, COUNT(*) AS count
                    FROM symptoms
                    WHERE user_id = $1 AND intensity IS NOT NULL
                    GROUP BY intensity
                    ORDER BY intensity
                    """,
                    user_id
                )
        except Exception as e:
            logger.error("symptoms_intensity_counts_failed", error=str(e), user_id=user_id)
            raise

        return [(row["intensity"], int(row["count"])) for row in rows]


class MedicationRepository(OwnedRecordRepository[MedicationRecord]):
    """
    Repository for the ``medications`` table.

    Intakes may be logged for a past time, so listing orders by
    ``taken_at`` and falls back to ``created_at``.
    """

    table = "medications"
    columns = "id, user_id, name, dosage, frequency, taken_at, notes, created_at"
    order_by = "COALESCE(taken_at, created_at)"
    record_model = MedicationRecord

    async def create(
        self,
        user_id: int,
        name: str,
        dosage: str,
        frequency: str,
        taken_at: datetime,
        notes: str
    ) -> MedicationRecord:
        """
        Insert a medication intake for a user.

        Args:
            user_id: Owner ID, taken from the authenticated identity
            name: Trimmed medication name
            dosage: Dose
            frequency: Frequency
            taken_at: Intake time
            notes: Free-form notes

        Returns:
            Created medication
        """
        try:
            async with self.connection() as conn:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO medications (user_id, name, dosage, frequency, taken_at, notes)
                    VALUES ($1, $2, $3, $4, $5, $6)
                    RETURNING {self.columns}
                    """,
                    user_id,
                    name,
                    dosage,
                    frequency,
                    taken_at,
                    notes
                )
        except Exception as e:
            logger.error("medications_create_failed", error=str(e), user_id=user_id)
            raise

        logger.info("medication_created", user_id=user_id, medication_id=row["id"])
        return self._to_record(row)
