"""
Resource services for symptoms and medications.

Each operation is scoped to the authenticated identity: the owner ID always
comes from ``CurrentUser`` and never from the request body.
"""

import structlog
from datetime import datetime, timezone
from typing import List, Optional

from health_api.config import Settings, get_settings
from health_api.errors import NotFound
from health_api.models.auth import CurrentUser
from health_api.models.records import (
    DEFAULT_INTENSITY, MedicationCreate, MedicationRecord, SymptomCreate, SymptomRecord
)
from health_api.repositories.record_repo import (
    MedicationRepository, OwnedRecordRepository, SymptomRepository
)

logger = structlog.get_logger(__name__)


class OwnedRecordService:
    """List and delete operations shared by both record types."""

    resource_name = "Record"

    def __init__(self, repo: OwnedRecordRepository, settings: Optional[Settings] = None):
        self.repo = repo
        self.settings = settings or get_settings()

    async def list(self, user: CurrentUser) -> list:
        """Newest records of the user, capped at ``records_list_limit``."""
        return await self.repo.list_for_user(user.id, self.settings.records_list_limit)

    async def delete(self, user: CurrentUser, record_id: int) -> None:
        """
        Delete a record owned by the user.

        Raises:
            NotFound: If no record with this ID belongs to the user. A
                record owned by someone else is reported the same way.
        """
        deleted = await self.repo.delete_for_user(user.id, record_id)

        if not deleted:
            logger.warning(
                "record_delete_not_found",
                resource=self.resource_name.lower(),
                user_id=user.id,
                record_id=record_id
            )
            raise NotFound(
                f"{self.resource_name} not found or you do not have permission to delete it"
            )

        logger.info(
            "record_deleted",
            resource=self.resource_name.lower(),
            user_id=user.id,
            record_id=record_id
        )


class SymptomService(OwnedRecordService):
    resource_name = "Symptom"

    def __init__(self, repo: SymptomRepository, settings: Optional[Settings] = None):
        super().__init__(repo, settings)

    async def list(self, user: CurrentUser) -> List[SymptomRecord]:
        return await super().list(user)

    async def create(self, user: CurrentUser, payload: SymptomCreate) -> SymptomRecord:
        """
        Record a symptom for the user.

        The payload is already validated; unset intensity becomes 5 and
        unset text fields become empty strings.
        """
        intensity = payload.intensity if payload.intensity is not None else DEFAULT_INTENSITY

        return await self.repo.create(
            user_id=user.id,
            description=payload.description,
            intensity=intensity,
            location=payload.location or "",
            notes=payload.notes or ""
        )


class MedicationService(OwnedRecordService):
    resource_name = "Medication"

    def __init__(self, repo: MedicationRepository, settings: Optional[Settings] = None):
        super().__init__(repo, settings)

    async def list(self, user: CurrentUser) -> List[MedicationRecord]:
        return await super().list(user)

    async def create(self, user: CurrentUser, payload: MedicationCreate) -> MedicationRecord:
        """
        Record a medication intake for the user.

        ``taken_at`` defaults to the current time; unset text fields become
        empty strings.
        """
        taken_at = payload.taken_at or datetime.now(timezone.utc)

        return await self.repo.create(
            user_id=user.id,
            name=payload.name,
            dosage=payload.dosage or "",
            frequency=payload.frequency or "",
            taken_at=taken_at,
            notes=payload.notes or ""
        )
