"""Unit tests for server configuration settings model.

Tests verify that the Settings model binds environment variables and that the
grouped configuration models are built from them.
"""

import pytest

from projects_service.server.core.config import (
    AuthConfig,
    BusApiConfig,
    CORSConfig,
    LogfireConfig,
    Settings,
)


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    def test_defaults(self, monkeypatch):
        for name in ("DATABASE_URL", "MAX_REVISION_NUMBER", "APP_ENV", "DB_CREATE_TABLES"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.database_url.startswith("postgresql+asyncpg://")
        assert settings.max_revision_number == 100
        assert settings.db_create_tables is False
        assert settings.default_page_size == 20

    def test_binds_from_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./local.db")
        monkeypatch.setenv("MAX_REVISION_NUMBER", "5")
        monkeypatch.setenv("PROJECTS_SERVICE_SERVER_PORT", "9000")
        monkeypatch.setenv("DB_CREATE_TABLES", "true")

        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite+aiosqlite:///./local.db"
        assert settings.max_revision_number == 5
        assert settings.server_port == 9000
        assert settings.db_create_tables is True

    def test_max_revision_number_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("MAX_REVISION_NUMBER", "0")

        with pytest.raises(ValueError):
            Settings(_env_file=None)

    @pytest.mark.parametrize(
        "env,expected",
        [("development", "projects-service-dev"), ("QA", "projects-service-qa"), ("production", "projects-service-prod")],
    )
    def test_app_name(self, monkeypatch, env, expected):
        monkeypatch.setenv("APP_ENV", env)

        assert Settings(_env_file=None).app_name == expected


class TestGroupedConfigs:
    def test_auth(self, monkeypatch):
        monkeypatch.setenv("AUTH_SECRET", "s3cret")
        monkeypatch.setenv("DEFAULT_M2M_USER_ID", "-5")

        auth = Settings(_env_file=None).auth

        assert isinstance(auth, AuthConfig)
        assert auth.secret == "s3cret"
        assert auth.default_m2m_user_id == -5

    def test_bus_api(self, monkeypatch):
        monkeypatch.setenv("BUS_API_URL", "http://bus:3000/v5")
        monkeypatch.setenv("BUS_API_ENABLED", "true")

        bus = Settings(_env_file=None).bus_api

        assert isinstance(bus, BusApiConfig)
        assert bus.url == "http://bus:3000/v5"
        assert bus.enabled is True
        assert bus.originator == "project-api"

    def test_logfire(self, monkeypatch):
        monkeypatch.setenv("LOGFIRE_ENABLED", "true")
        monkeypatch.setenv("LOGFIRE_TOKEN", "tok")

        logfire = Settings(_env_file=None).logfire

        assert isinstance(logfire, LogfireConfig)
        assert (logfire.enabled, logfire.token) == (True, "tok")

    def test_cors(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", '["https://connect.topcoder.com"]')

        cors = Settings(_env_file=None).cors

        assert isinstance(cors, CORSConfig)
        assert cors.origins == ["https://connect.topcoder.com"]
