"""Unit tests for logging configuration module.

Tests verify that the logging configuration functions work correctly with different
scenarios including various log levels, formats, and file logging options.
"""

import logging
from unittest.mock import patch

import pytest

from projects_service.core.logging_config import (
    DETAILED_FORMAT,
    JSON_FORMAT,
    MODULE_LOG_LEVELS,
    SIMPLE_FORMAT,
    get_logger,
    setup_logging,
)


def _console_handler():
    return next(
        (h for h in logging.getLogger().handlers if isinstance(h, logging.StreamHandler)),
        None,
    )


class TestSetupLoggingLogLevels:
    """Test setup_logging with different log levels."""

    @pytest.mark.parametrize(
        "log_level,expected_level",
        [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("critical", logging.CRITICAL),
            ("debug", logging.DEBUG),
        ],
    )
    def test_setup_logging_with_different_levels(self, log_level, expected_level):
        """Test setup_logging configures correct log level."""
        setup_logging(log_level=log_level, enable_file=False)

        console_handler = _console_handler()
        assert console_handler is not None
        assert console_handler.level == expected_level

    def test_root_logger_captures_everything(self):
        """The root logger passes every record to its handlers; handlers filter."""
        setup_logging(log_level="ERROR", enable_file=False)

        assert logging.getLogger().level == logging.DEBUG


class TestSetupLoggingFormats:
    """Test setup_logging with the supported formats."""

    @pytest.mark.parametrize(
        "log_format,expected",
        [("simple", SIMPLE_FORMAT), ("detailed", DETAILED_FORMAT), ("json", JSON_FORMAT), ("unknown", DETAILED_FORMAT)],
    )
    def test_formatter_matches_format(self, log_format, expected):
        setup_logging(log_format=log_format, enable_file=False)

        assert _console_handler().formatter._fmt == expected

    def test_repeated_setup_does_not_duplicate_handlers(self):
        """Test calling setup_logging twice keeps a single console handler."""
        setup_logging(enable_file=False)
        setup_logging(enable_file=False)

        stream_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.StreamHandler)]
        assert len(stream_handlers) == 1


class TestSetupLoggingFile:
    """Test file logging."""

    def test_file_handler_added_when_enabled(self, tmp_path):
        log_dir = tmp_path / "logs"
        with patch("projects_service.core.logging_config.ENABLE_FILE_LOGGING", True), patch(
            "projects_service.core.logging_config.LOG_FILE_DIR", str(log_dir)
        ):
            setup_logging(enable_file=True)

        file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
        try:
            assert len(file_handlers) == 1
            assert (log_dir / "projects_service.log").exists()
        finally:
            for handler in file_handlers:
                handler.close()
            setup_logging(enable_file=False)

    def test_file_handler_skipped_when_disabled_by_caller(self, tmp_path):
        with patch("projects_service.core.logging_config.ENABLE_FILE_LOGGING", True), patch(
            "projects_service.core.logging_config.LOG_FILE_DIR", str(tmp_path)
        ):
            setup_logging(enable_file=False)

        assert not [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]


class TestModuleLogLevels:
    """Test per-module log levels."""

    def test_module_levels_applied(self):
        setup_logging(enable_file=False)

        for module_name, level in MODULE_LOG_LEVELS.items():
            assert logging.getLogger(module_name).level == logging.getLevelName(level)

    def test_noisy_libraries_are_quieted(self):
        assert MODULE_LOG_LEVELS["sqlalchemy.engine"] == "WARNING"
        assert MODULE_LOG_LEVELS["httpx"] == "WARNING"


class TestGetLogger:
    def test_get_logger_returns_named_logger(self):
        logger = get_logger("projects_service.test")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "projects_service.test"

    def test_get_logger_same_instance(self):
        assert get_logger("projects_service.same") is get_logger("projects_service.same")
