"""
Per-user statistics.

Counts, the intensity histogram and the recent-symptom list are read with
owner-scoped queries; percentages are derived here from the grouped counts.
"""

import structlog
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Sequence, Tuple

from health_api.config import Settings, get_settings
from health_api.models.stats import IntensityBucket, RecentSymptom, StatsCounts, UserStats
from health_api.repositories.record_repo import MedicationRepository, SymptomRepository

logger = structlog.get_logger(__name__)


def build_histogram(counts: Sequence[Tuple[int, int]]) -> List[IntensityBucket]:
    """
    Turn (intensity, count) pairs into buckets with percentages.

    Percentages are rounded to 2 decimals, halves away from zero. An empty
    input yields an empty histogram.
    """
    total = sum(count for _, count in counts)
    if total == 0:
        return []

    return [
        IntensityBucket(
            intensity=intensity,
            count=count,
            percentage=float(
                (Decimal(count * 100) / total).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
            )
        )
        for intensity, count in counts
    ]


class StatsService:
    """Computes the summary shown on the statistics page."""

    def __init__(
        self,
        symptom_repo: SymptomRepository,
        medication_repo: MedicationRepository,
        settings: Optional[Settings] = None
    ):
        self.symptom_repo = symptom_repo
        self.medication_repo = medication_repo
        self.settings = settings or get_settings()

    async def compute_stats(self, user_id: int) -> UserStats:
        """
        Compute the user's counts, intensity histogram and latest symptoms.

        Args:
            user_id: Owner ID

        Returns:
            Aggregated statistics (all zero/empty for a user with no records)
        """
        symptoms = await self.symptom_repo.count_for_user(user_id)
        medications = await self.medication_repo.count_for_user(user_id)
        histogram = build_histogram(await self.symptom_repo.intensity_counts(user_id))
        recent = await self.symptom_repo.list_for_user(user_id, self.settings.stats_recent_limit)

        logger.debug(
            "stats_computed",
            user_id=user_id,
            symptoms=symptoms,
            medications=medications
        )

        return UserStats(
            counts=StatsCounts(symptoms=symptoms, medications=medications),
            intensity_stats=histogram,
            recent_symptoms=[
                RecentSymptom(
                    id=s.id,
                    description=s.description,
                    intensity=s.intensity,
                    created_at=s.created_at
                )
                for s in recent
            ],
            timestamp=datetime.now(timezone.utc)
        )
