"""
Unit tests for per-user statistics.
"""

import pytest

from health_api.models.auth import CurrentUser
from health_api.models.records import MedicationCreate, SymptomCreate
from health_api.services.record_service import MedicationService, SymptomService
from health_api.services.stats_service import StatsService, build_histogram

ALICE = CurrentUser(id=1, email="alice@example.com")
BOB = CurrentUser(id=2, email="bob@example.com")


@pytest.fixture
def stats(symptom_repo, medication_repo, settings) -> StatsService:
    return StatsService(symptom_repo, medication_repo, settings)


class TestBuildHistogram:
    """Tests for percentage calculation."""

    def test_empty_counts(self):
        assert build_histogram([]) == []

    def test_percentages_rounded(self):
        buckets = build_histogram([(2, 1), (5, 2)])

        assert [(b.intensity, b.count, b.percentage) for b in buckets] == [
            (2, 1, 33.33),
            (5, 2, 66.67),
        ]

    def test_exact_half_rounds_up(self):
        buckets = build_histogram([(1, 1), (2, 31)])

        assert buckets[0].percentage == 3.13
        assert buckets[1].percentage == 96.88

    def test_percentages_sum_to_hundred(self):
        buckets = build_histogram([(1, 3), (4, 3), (7, 1), (10, 5)])

        assert abs(sum(b.percentage for b in buckets) - 100) < 0.05


class TestStatsService:
    """Tests for the aggregated summary."""

    @pytest.mark.asyncio
    async def test_empty_user(self, stats):
        result = await stats.compute_stats(ALICE.id)

        assert result.counts.symptoms == 0
        assert result.counts.medications == 0
        assert result.intensity_stats == []
        assert result.recent_symptoms == []

    @pytest.mark.asyncio
    async def test_counts_histogram_and_recent(self, stats, symptom_repo, medication_repo, settings):
        symptoms = SymptomService(symptom_repo, settings)
        medications = MedicationService(medication_repo, settings)

        for intensity in (3, 3, 8):
            await symptoms.create(ALICE, SymptomCreate(description="Pain", intensity=intensity))
        await medications.create(ALICE, MedicationCreate(name="Ibuprofen"))

        result = await stats.compute_stats(ALICE.id)

        assert result.counts.symptoms == 3
        assert result.counts.medications == 1
        assert [(b.intensity, b.count, b.percentage) for b in result.intensity_stats] == [
            (3, 2, 66.67),
            (8, 1, 33.33),
        ]
        assert len(result.recent_symptoms) == 3

    @pytest.mark.asyncio
    async def test_recent_symptoms_limited_to_five(self, stats, symptom_repo, settings):
        symptoms = SymptomService(symptom_repo, settings)
        for i in range(7):
            await symptoms.create(ALICE, SymptomCreate(description=f"S{i}"))

        result = await stats.compute_stats(ALICE.id)

        assert [s.description for s in result.recent_symptoms] == ["S6", "S5", "S4", "S3", "S2"]

    @pytest.mark.asyncio
    async def test_other_users_are_excluded(self, stats, symptom_repo, settings):
        symptoms = SymptomService(symptom_repo, settings)
        await symptoms.create(BOB, SymptomCreate(description="Bob's", intensity=2))

        result = await stats.compute_stats(ALICE.id)

        assert result.counts.symptoms == 0
        assert result.intensity_stats == []
