"""
Integration tests for the asyncpg repositories with PostgreSQL.

Tests cover:
- Schema creation from the table declarations
- User creation and the unique email constraint
- Owner scoping of list, count and delete
- Medication ordering by intake time
- Intensity histogram grouping
- Health probe

These tests use testcontainers to spin up a real PostgreSQL instance and are
skipped when Docker is not available.
"""

import asyncpg
import pytest
import pytest_asyncio
from datetime import datetime, timedelta, timezone

from health_api.errors import Conflict
from health_api.repositories.health_repo import HealthRepository
from health_api.repositories.record_repo import MedicationRepository, SymptomRepository
from health_api.repositories.schema import create_schema
from health_api.repositories.user_repo import UserRepository

pytestmark = [pytest.mark.integration, pytest.mark.slow]


# ============================================================================
# PYTEST FIXTURES
# ============================================================================


@pytest.fixture(scope="module")
def postgres_url():
    """Start a PostgreSQL testcontainer, or skip without Docker."""
    postgres_module = pytest.importorskip("testcontainers.postgres")

    container = postgres_module.PostgresContainer("postgres:15-alpine", driver=None)
    try:
        container.start()
    except Exception as e:
        pytest.skip(f"Docker not available: {e}")

    try:
        yield container.get_connection_url()
    finally:
        container.stop()


@pytest_asyncio.fixture
async def pool(postgres_url):
    """Pool on a freshly created schema; tables are emptied afterwards."""
    db_pool = await asyncpg.create_pool(postgres_url, min_size=1, max_size=4)
    await create_schema(db_pool)

    yield db_pool

    async with db_pool.acquire() as conn:
        await conn.execute("TRUNCATE users, symptoms, medications RESTART IDENTITY CASCADE")
    await db_pool.close()


@pytest_asyncio.fixture
async def users(pool, settings):
    repo = UserRepository(pool, settings)
    alice = await repo.create_user("alice@example.com", "hash-a", "Alice")
    bob = await repo.create_user("bob@example.com", "hash-b")
    return alice, bob


# ============================================================================
# INTEGRATION TESTS
# ============================================================================


class TestSchema:
    @pytest.mark.asyncio
    async def test_create_schema_is_idempotent(self, pool):
        await create_schema(pool)

        async with pool.acquire() as conn:
            tables = await conn.fetch(
                "SELECT table_name FROM information_schema.tables WHERE table_schema = 'public'"
            )

        assert {"users", "symptoms", "medications"} <= {t["table_name"] for t in tables}

    @pytest.mark.asyncio
    async def test_intensity_check_constraint(self, pool, settings, users):
        alice, _ = users

        with pytest.raises(asyncpg.CheckViolationError):
            await SymptomRepository(pool, settings).create(alice.id, "Headache", 11, "", "")


class TestUserRepository:
    """Integration tests for users."""

    @pytest.mark.asyncio
    async def test_create_and_fetch(self, pool, settings, users):
        alice, _ = users
        repo = UserRepository(pool, settings)

        by_email = await repo.get_user_by_email("alice@example.com")
        by_id = await repo.get_user_by_id(alice.id)

        assert by_email == by_id
        assert by_email.full_name == "Alice"
        assert by_email.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_duplicate_email(self, pool, settings, users):
        with pytest.raises(Conflict):
            await UserRepository(pool, settings).create_user("alice@example.com", "hash")

    @pytest.mark.asyncio
    async def test_email_lookup_is_case_sensitive(self, pool, settings, users):
        assert await UserRepository(pool, settings).get_user_by_email("ALICE@example.com") is None


class TestSymptomRepository:
    """Integration tests for symptoms."""

    @pytest.mark.asyncio
    async def test_owner_scoping(self, pool, settings, users):
        alice, bob = users
        repo = SymptomRepository(pool, settings)
        first = await repo.create(alice.id, "Headache", 4, "Head", "")
        second = await repo.create(alice.id, "Nausea", 6, "", "")
        await repo.create(bob.id, "Cough", 2, "", "")

        listed = await repo.list_for_user(alice.id, 100)

        assert [s.id for s in listed] == [second.id, first.id]
        assert await repo.count_for_user(alice.id) == 2
        assert await repo.delete_for_user(bob.id, first.id) is False
        assert await repo.delete_for_user(alice.id, first.id) is True
        assert await repo.count_for_user(alice.id) == 1

    @pytest.mark.asyncio
    async def test_intensity_counts(self, pool, settings, users):
        alice, bob = users
        repo = SymptomRepository(pool, settings)
        for intensity in (7, 3, 7):
            await repo.create(alice.id, "Pain", intensity, "", "")
        await repo.create(bob.id, "Pain", 3, "", "")

        assert await repo.intensity_counts(alice.id) == [(3, 1), (7, 2)]

    @pytest.mark.asyncio
    async def test_rows_removed_with_user(self, pool, settings, users):
        alice, _ = users
        repo = SymptomRepository(pool, settings)
        await repo.create(alice.id, "Headache", 5, "", "")

        async with pool.acquire() as conn:
            await conn.execute("DELETE FROM users WHERE id = $1", alice.id)

        assert await repo.count_for_user(alice.id) == 0


class TestMedicationRepository:
    """Integration tests for medications."""

    @pytest.mark.asyncio
    async def test_ordered_by_taken_at(self, pool, settings, users):
        alice, _ = users
        repo = MedicationRepository(pool, settings)
        now = datetime.now(timezone.utc)
        today = await repo.create(alice.id, "Today", "", "", now, "")
        last_week = await repo.create(alice.id, "Last week", "", "", now - timedelta(days=7), "")
        tomorrow = await repo.create(alice.id, "Planned", "", "", now + timedelta(days=1), "")

        listed = await repo.list_for_user(alice.id, 100)

        assert [m.id for m in listed] == [tomorrow.id, today.id, last_week.id]

    @pytest.mark.asyncio
    async def test_list_limit(self, pool, settings, users):
        alice, _ = users
        repo = MedicationRepository(pool, settings)
        now = datetime.now(timezone.utc)
        for i in range(5):
            await repo.create(alice.id, f"M{i}", "", "", now - timedelta(hours=i), "")

        listed = await repo.list_for_user(alice.id, 3)

        assert [m.name for m in listed] == ["M0", "M1", "M2"]


class TestHealthRepository:
    @pytest.mark.asyncio
    async def test_probe(self, pool, settings):
        probe = await HealthRepository(pool, settings).check()

        assert probe["version"].startswith("PostgreSQL 15")
        assert isinstance(probe["time"], datetime)
