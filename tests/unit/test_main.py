"""
Unit tests for backend/main.py
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from unittest.mock import patch

from backend.main import create_app, _init_sentry, _configure_cors, _log_configuration
from backend.settings import Settings


@pytest.mark.unit
class TestCreateApp:
    """Test the create_app() factory function."""

    def test_create_app_returns_fastapi_instance(self):
        app = create_app(settings=Settings(environment="test", _env_file=None))
        assert isinstance(app, FastAPI)

    def test_create_app_uses_default_settings_when_none_provided(self):
        with patch("backend.main.get_settings") as mock_get_settings:
            mock_get_settings.return_value = Settings(environment="test", _env_file=None)

            app = create_app(settings=None)

            mock_get_settings.assert_called_once()
            assert isinstance(app, FastAPI)

    def test_create_app_configures_app_metadata(self):
        app = create_app(settings=Settings(environment="test", _env_file=None))
        assert app.title == "Vitality Workout API"
        assert app.version == "1.0.0"

    def test_routes_are_registered(self):
        app = create_app(settings=Settings(environment="test", _env_file=None))
        paths = app.openapi()["paths"]
        assert "/health" in paths
        assert "/workouts/{workout_id}" in paths
        assert "/workouts/{workout_id}/preview" in paths
        assert "/workouts/{workout_id}/exercises/order" in paths


@pytest.mark.unit
class TestInitSentry:
    """Test Sentry initialization."""

    def test_init_sentry_skipped_when_no_dsn(self):
        settings = Settings(sentry_dsn=None, _env_file=None)

        with patch("backend.main.sentry_sdk.init") as mock_init:
            _init_sentry(settings)
            mock_init.assert_not_called()

    def test_init_sentry_called_when_dsn_provided(self):
        settings = Settings(
            sentry_dsn="https://test@sentry.io/123",
            environment="test",
            _env_file=None
        )

        with patch("backend.main.sentry_sdk.init") as mock_init:
            _init_sentry(settings)
            mock_init.assert_called_once_with(
                dsn="https://test@sentry.io/123",
                environment="test",
                traces_sample_rate=0.1,
                profiles_sample_rate=0.1,
            )


@pytest.mark.unit
class TestConfigureCors:
    """Test CORS configuration."""

    def test_configure_cors_adds_middleware(self):
        app = FastAPI()
        initial_middleware_count = len(app.user_middleware)

        _configure_cors(app, Settings(_env_file=None))

        assert len(app.user_middleware) == initial_middleware_count + 1

    def test_cors_allows_configured_origin(self):
        settings = Settings(
            environment="test",
            cors_allowed_origins="https://app.vitality.example",
            _env_file=None,
        )
        client = TestClient(create_app(settings=settings))

        response = client.get("/health", headers={"Origin": "https://app.vitality.example"})

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "https://app.vitality.example"


@pytest.mark.unit
class TestLogConfiguration:

    def test_warns_without_database(self, caplog):
        with caplog.at_level("WARNING"):
            _log_configuration(Settings(supabase_url=None, _env_file=None))
        assert "SUPABASE_URL is not configured" in caplog.text

    def test_logs_limits(self, caplog):
        settings = Settings(
            supabase_url="https://x.supabase.co",
            max_exercises_per_workout=20,
            _env_file=None,
        )
        with caplog.at_level("INFO"):
            _log_configuration(settings)
        assert "Workout limits: 20 exercises" in caplog.text


@pytest.mark.unit
class TestHealth:

    def test_health(self):
        client = TestClient(create_app(settings=Settings(environment="test", _env_file=None)))
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
