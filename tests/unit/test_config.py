"""
Unit tests for settings loading and validation.
"""

import pytest
from pydantic import ValidationError

from health_api.config import Settings, clear_settings_cache, get_settings


class TestSettingsDefaults:
    """Tests for default values."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("HEALTH_API_PORT", raising=False)
        settings = Settings(_env_file=None)

        assert settings.api_prefix == "/api"
        assert settings.port == 3000
        assert settings.jwt_algorithm == "HS256"
        assert settings.jwt_expire_days == 7
        assert settings.password_min_length == 6
        assert settings.records_list_limit == 100
        assert settings.stats_recent_limit == 5
        assert settings.database_pool_max_size == 20
        assert settings.database_pool_timeout == 2.0
        assert settings.database_create_schema is False


class TestSettingsEnvironment:
    """Tests for environment variable overrides."""

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("HEALTH_API_PORT", "8081")
        monkeypatch.setenv("HEALTH_API_ENVIRONMENT", "Development")

        settings = Settings(_env_file=None)

        assert settings.port == 8081
        assert settings.environment == "development"
        assert settings.is_development is True
        assert settings.is_production is False

    def test_get_settings_is_cached(self, monkeypatch):
        clear_settings_cache()
        try:
            assert get_settings() is get_settings()
        finally:
            clear_settings_cache()


class TestSettingsValidation:
    """Tests for rejected values."""

    def test_short_secret_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, jwt_secret_key="too-short")

    def test_unsupported_algorithm_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, jwt_algorithm="RS256")

    def test_unknown_environment_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, environment="qa")

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_database_dsn_strips_driver(self):
        settings = Settings(
            _env_file=None,
            database_url="postgresql+asyncpg://user:pass@db:5432/healthdb"
        )

        assert settings.database_dsn == "postgresql://user:pass@db:5432/healthdb"
        assert settings.database_host == "db:5432/healthdb"
