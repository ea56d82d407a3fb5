"""
Unit tests for the Logfire monitoring module.

This test suite covers:
- Logfire initialization with various configurations
- Instrumentation feature flags
- Custom logging functions (API requests, bus events, errors)
- Graceful degradation when Logfire calls fail
"""

from unittest.mock import MagicMock, patch

import pytest

from projects_service.core import monitoring
from projects_service.server.core.config import LogfireConfig


def _config(**overrides) -> LogfireConfig:
    values = {"enabled": True, "token": "test-token", "sample_rate": 1.0}
    values.update(overrides)
    return LogfireConfig(**values)


@pytest.fixture
def mock_settings():
    with patch("projects_service.core.monitoring.settings") as settings:
        settings.app_name = "projects-service-dev"
        settings.app_env = "development"
        yield settings


class TestInitializeLogfire:
    """Test initialize_logfire."""

    def test_disabled_returns_false(self, mock_settings):
        """Test Logfire stays off when LOGFIRE_ENABLED is false."""
        mock_settings.logfire = _config(enabled=False)

        with patch("projects_service.core.monitoring.logfire") as mock_logfire:
            assert monitoring.initialize_logfire() is False
            mock_logfire.configure.assert_not_called()

    def test_enabled_without_token_returns_false(self, mock_settings):
        """Test Logfire is not configured without a token."""
        mock_settings.logfire = _config(token=None)

        with patch("projects_service.core.monitoring.logfire") as mock_logfire, patch.object(
            monitoring, "logger"
        ) as mock_logger:
            assert monitoring.initialize_logfire() is False
            mock_logfire.configure.assert_not_called()
            mock_logger.warning.assert_called_once()

    def test_configures_and_instruments(self, mock_settings):
        """Test full initialization with every instrumentation enabled."""
        mock_settings.logfire = _config(sample_rate=0.5)
        app = MagicMock()

        with patch("projects_service.core.monitoring.logfire") as mock_logfire:
            assert monitoring.initialize_logfire(app) is True

            mock_logfire.configure.assert_called_once()
            kwargs = mock_logfire.configure.call_args.kwargs
            assert kwargs["token"] == "test-token"
            assert kwargs["service_name"] == "projects-service-dev"
            assert kwargs["environment"] == "development"
            mock_logfire.SamplingOptions.assert_called_once_with(head=0.5)
            mock_logfire.instrument_sqlalchemy.assert_called_once()
            mock_logfire.instrument_httpx.assert_called_once()
            mock_logfire.instrument_fastapi.assert_called_once_with(app=app)

    def test_fastapi_not_instrumented_without_app(self, mock_settings):
        mock_settings.logfire = _config()

        with patch("projects_service.core.monitoring.logfire") as mock_logfire:
            monitoring.initialize_logfire()

            mock_logfire.instrument_fastapi.assert_not_called()

    def test_instrumentation_flags_respected(self, mock_settings):
        mock_settings.logfire = _config(trace_sqlalchemy=False, trace_httpx=False)

        with patch("projects_service.core.monitoring.logfire") as mock_logfire:
            monitoring.initialize_logfire()

            mock_logfire.instrument_sqlalchemy.assert_not_called()
            mock_logfire.instrument_httpx.assert_not_called()

    def test_instrumentation_failure_is_logged(self, mock_settings):
        """Test a failing instrumentation does not abort initialization."""
        mock_settings.logfire = _config()

        with patch("projects_service.core.monitoring.logfire") as mock_logfire, patch.object(
            monitoring, "logger"
        ) as mock_logger:
            mock_logfire.instrument_sqlalchemy.side_effect = RuntimeError("no engine")

            assert monitoring.initialize_logfire() is True
            mock_logger.warning.assert_called_once()
            mock_logfire.instrument_httpx.assert_called_once()


class TestLoggingHelpers:
    """Test the custom logging helpers."""

    def test_log_api_request(self):
        with patch("projects_service.core.monitoring.logfire") as mock_logfire:
            monitoring.log_api_request("GET", "/v4/projects", 200, 12.5)

            mock_logfire.info.assert_called_once_with(
                "API request completed",
                method="GET",
                path="/v4/projects",
                status_code=200,
                duration_ms=12.5,
            )

    def test_log_bus_event(self):
        with patch("projects_service.core.monitoring.logfire") as mock_logfire:
            monitoring.log_bus_event("project.updated", delivered=False)

            mock_logfire.info.assert_called_once_with("Bus event published", topic="project.updated", delivered=False)

    def test_log_error_with_context(self):
        with patch("projects_service.core.monitoring.logfire") as mock_logfire:
            monitoring.log_error("ValueError", "boom", {"path": "/v4/projects"})

            mock_logfire.error.assert_called_once_with("ValueError: boom", path="/v4/projects")

    @pytest.mark.parametrize(
        "call",
        [
            lambda: monitoring.log_api_request("GET", "/", 200, 1.0),
            lambda: monitoring.log_bus_event("project.deleted", delivered=True),
            lambda: monitoring.log_error("KeyError", "missing"),
        ],
    )
    def test_helpers_swallow_logfire_failures(self, call):
        """Test monitoring failures never propagate to the caller."""
        with patch("projects_service.core.monitoring.logfire") as mock_logfire:
            mock_logfire.info.side_effect = RuntimeError("logfire down")
            mock_logfire.error.side_effect = RuntimeError("logfire down")

            call()
