"""asyncpg repositories for the Health Diary tables."""

from health_api.repositories.user_repo import UserRepository
from health_api.repositories.record_repo import (
    MedicationRepository,
    OwnedRecordRepository,
    SymptomRepository,
)
from health_api.repositories.health_repo import HealthRepository

__all__ = [
    "UserRepository",
    "OwnedRecordRepository",
    "SymptomRepository",
    "MedicationRepository",
    "HealthRepository",
]
