"""
Unit tests for the connection pool lifecycle.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from health_api import dependencies


@pytest.fixture(autouse=True)
def reset_pool():
    dependencies._pool = None
    yield
    dependencies._pool = None


class TestPoolLifecycle:
    """Tests for init_db_pool / get_db_pool / close_db_pool."""

    def test_get_pool_before_init(self):
        with pytest.raises(RuntimeError):
            dependencies.get_db_pool()

        assert dependencies.get_pool_if_ready() is None

    @pytest.mark.asyncio
    async def test_init_uses_settings(self, settings):
        fake_pool = MagicMock()
        fake_pool.close = AsyncMock()

        with patch.object(dependencies.asyncpg, "create_pool", AsyncMock(return_value=fake_pool)) as create_pool:
            pool = await dependencies.init_db_pool(settings)
            again = await dependencies.init_db_pool(settings)

        assert pool is fake_pool
        assert again is fake_pool
        create_pool.assert_awaited_once()
        kwargs = create_pool.call_args.kwargs
        assert kwargs["min_size"] == settings.database_pool_min_size
        assert kwargs["max_size"] == settings.database_pool_max_size
        assert kwargs["timeout"] == settings.database_pool_timeout
        assert dependencies.get_db_pool() is fake_pool

        await dependencies.close_db_pool()

        fake_pool.close.assert_awaited_once()
        assert dependencies.get_pool_if_ready() is None

    @pytest.mark.asyncio
    async def test_init_failure_propagates(self, settings):
        failing = AsyncMock(side_effect=OSError("connection refused"))

        with patch.object(dependencies.asyncpg, "create_pool", failing):
            with pytest.raises(OSError):
                await dependencies.init_db_pool(settings)

        assert dependencies.get_pool_if_ready() is None
