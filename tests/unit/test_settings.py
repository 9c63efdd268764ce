"""
Unit tests for backend/settings.py
"""

import pytest
from pydantic import ValidationError

from backend.settings import Settings, get_settings


# Environment variables that CI might set which we need to clear for default tests
CI_ENV_VARS = [
    "ENVIRONMENT",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "SUPABASE_ANON_KEY",
    "API_KEYS",
    "SENTRY_DSN",
    "WORKOUT_RECONCILIATION_RPC",
    "MAX_EXERCISES_PER_WORKOUT",
    "MAX_ENTRIES_PER_EXERCISE",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Clear CI environment variables to test true defaults."""
    for var in CI_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.mark.unit
class TestSettingsDefaults:
    """Test that Settings applies correct defaults."""

    def test_environment_default(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.environment == "development"

    def test_supabase_fields_default_to_none(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.supabase_url is None
        assert settings.supabase_service_role_key is None
        assert settings.supabase_anon_key is None

    def test_session_secret_has_default(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.session_secret

    def test_reconciliation_defaults(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.workout_reconciliation_rpc == "apply_workout_reconciliation"
        assert settings.max_exercises_per_workout is None
        assert settings.max_entries_per_exercise is None

    def test_sentry_dsn_default_to_none(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.sentry_dsn is None


@pytest.mark.unit
class TestSettingsValidation:
    """Test Settings validation rules."""

    def test_valid_environments_accepted(self):
        for env in ["development", "staging", "production", "test"]:
            assert Settings(environment=env, _env_file=None).environment == env

    def test_environment_case_insensitive(self):
        assert Settings(environment="PRODUCTION", _env_file=None).environment == "production"

    def test_invalid_environment_raises_error(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(environment="invalid", _env_file=None)
        assert "Invalid environment" in str(exc_info.value)

    def test_limits_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(max_exercises_per_workout=0, _env_file=None)


@pytest.mark.unit
class TestSettingsProperties:
    """Test Settings helper properties."""

    def test_supabase_key_prefers_service_role(self, clean_env):
        settings = Settings(
            supabase_service_role_key="service-key",
            supabase_anon_key="anon-key",
            _env_file=None,
        )
        assert settings.supabase_key == "service-key"

    def test_supabase_key_falls_back_to_anon(self, clean_env):
        settings = Settings(supabase_anon_key="anon-key", _env_file=None)
        assert settings.supabase_key == "anon-key"

    def test_supabase_key_returns_none_if_neither(self, clean_env):
        assert Settings(_env_file=None).supabase_key is None

    def test_api_keys_list_parses_comma_separated(self):
        settings = Settings(api_keys="key1, key2 ,,key3", _env_file=None)
        assert settings.api_keys_list == ["key1", "key2", "key3"]

    def test_api_keys_list_handles_empty(self):
        assert Settings(api_keys="", _env_file=None).api_keys_list == []

    def test_environment_properties(self):
        assert Settings(environment="production", _env_file=None).is_production
        assert Settings(environment="development", _env_file=None).is_development
        assert Settings(environment="test", _env_file=None).is_test


@pytest.mark.unit
class TestGetSettings:
    """Test get_settings() caching."""

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()

    def test_get_settings_cache_can_be_cleared(self):
        first = get_settings()
        get_settings.cache_clear()
        assert get_settings() is not first


@pytest.mark.unit
class TestSettingsFromEnv:
    """Test loading settings from environment variables."""

    def test_settings_loads_from_env(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "staging")
        monkeypatch.setenv("SUPABASE_URL", "https://test.supabase.co")
        monkeypatch.setenv("MAX_ENTRIES_PER_EXERCISE", "25")
        monkeypatch.setenv("WORKOUT_RECONCILIATION_RPC", "custom_rpc")

        settings = Settings(_env_file=None)

        assert settings.environment == "staging"
        assert settings.supabase_url == "https://test.supabase.co"
        assert settings.max_entries_per_exercise == 25
        assert settings.workout_reconciliation_rpc == "custom_rpc"
