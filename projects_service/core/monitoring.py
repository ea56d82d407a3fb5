"""
Monitoring and Tracing Configuration Module.

This module provides integration with Pydantic Logfire for monitoring and
tracing of the projects service, including:
- API endpoint tracing
- Database operation monitoring
- Outbound bus API calls
- Error tracking

Tracing is only switched on when ``LOGFIRE_ENABLED`` is set and a token is
configured; otherwise the helpers below are cheap no-ops for the tracer and
only the standard logger is used.
"""

import logging
from typing import Any, Optional

import logfire
from fastapi import FastAPI

from projects_service.server.core.config import settings

logger = logging.getLogger(__name__)


def initialize_logfire(app: FastAPI | None = None) -> bool:
    """
    Initialize Pydantic Logfire for monitoring and tracing.

    Args:
        app: FastAPI application instance for FastAPI instrumentation (optional).

    Returns:
        True when Logfire was configured, False when monitoring stays disabled.
    """
    cfg = settings.logfire
    if not cfg.enabled:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False

    if not cfg.token:
        logger.warning(
            "Logfire is enabled but LOGFIRE_TOKEN is not set. "
            "Monitoring will not work. Set LOGFIRE_TOKEN to enable Logfire."
        )
        return False

    logfire.configure(
        token=cfg.token,
        service_name=settings.app_name,
        environment=settings.app_env,
        sampling=logfire.SamplingOptions(head=cfg.sample_rate),
    )

    if cfg.trace_sqlalchemy:
        try:
            logfire.instrument_sqlalchemy()
            logger.info("Logfire: SQLAlchemy instrumentation enabled")
        except Exception as e:
            logger.warning(f"Failed to instrument SQLAlchemy: {e}")

    if cfg.trace_httpx:
        try:
            logfire.instrument_httpx()
            logger.info("Logfire: HTTPX instrumentation enabled")
        except Exception as e:
            logger.warning(f"Failed to instrument HTTPX: {e}")

    if cfg.trace_fastapi and app is not None:
        try:
            logfire.instrument_fastapi(app=app)
            logger.info("Logfire: FastAPI instrumentation enabled")
        except Exception as e:
            logger.warning(f"Failed to instrument FastAPI: {e}")

    logger.info(f"Logfire monitoring initialized: service={settings.app_name}, environment={settings.app_env}")
    return True


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """
    Log an API request with performance metrics.

    Args:
        method: HTTP method
        path: Request path
        status_code: HTTP status code
        duration_ms: Request duration in milliseconds
    """
    try:
        logfire.info(
            "API request completed",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=duration_ms,
        )
    except Exception:
        logger.debug(f"Could not log API request to Logfire: {method} {path}")


def log_bus_event(topic: str, delivered: bool) -> None:
    """
    Log the outcome of an event publication.

    Args:
        topic: Bus topic the event was published on
        delivered: Whether the bus API accepted the event
    """
    try:
        logfire.info("Bus event published", topic=topic, delivered=delivered)
    except Exception:
        logger.debug(f"Could not log bus event to Logfire: topic={topic}")


def log_error(error_type: str, error_message: str, context: Optional[dict[str, Any]] = None) -> None:
    """
    Log an error with context for debugging.

    Args:
        error_type: Type of error
        error_message: Error message
        context: Additional context dictionary
    """
    try:
        logfire.error(f"{error_type}: {error_message}", **(context or {}))
    except Exception:
        logger.debug(f"Could not log error to Logfire: {error_type}")
