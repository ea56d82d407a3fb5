"""Bus API client

Overview
--------
Thin async HTTP client that posts events to the bus API. Every event is
wrapped as::

    {"topic": ..., "originator": ..., "timestamp": ..., "mime-type": ..., "payload": ...}

and sent with ``POST <BUS_API_URL>/bus/events``.

Delivery
--------
Events are published after the database change they describe is committed.
A failed delivery is logged and reported through ``log_bus_event``; it never
undoes the change and never fails the API request. When the bus is disabled
(``BUS_API_ENABLED=false``) events are only logged.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

import httpx

from projects_service.core.logging_config import get_logger
from projects_service.core.monitoring import log_bus_event
from projects_service.server.core.config import BusApiConfig, settings

from .constants import BUS_MIME_TYPE, BusTopic

logger = get_logger(__name__)


class BusApiError(Exception):
    """Bus API delivery failure.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code returned by the bus API.
        details: Optional response body.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class BusApiClient:
    """Async client for the bus API ``/bus/events`` endpoint."""

    def __init__(self, config: Optional[BusApiConfig] = None, *, client: Optional[httpx.AsyncClient] = None) -> None:
        """Create a bus API client.

        Args:
            config: Bus API settings; read from the application settings when omitted.
            client: Optional preconfigured ``httpx.AsyncClient`` to use.
        """
        self.config = config or settings.bus_api
        self.base_url = self.config.url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=self.config.timeout)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        return headers

    def build_message(self, topic: Union[BusTopic, str], payload: Dict[str, Any]) -> Dict[str, Any]:
        """Wrap ``payload`` in the bus event envelope."""
        return {
            "topic": topic.value if isinstance(topic, BusTopic) else topic,
            "originator": self.config.originator,
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "mime-type": BUS_MIME_TYPE,
            "payload": payload,
        }

    async def send(self, topic: Union[BusTopic, str], payload: Dict[str, Any]) -> None:
        """Post one event.

        Raises:
            BusApiError: When the bus API is unreachable or answers non-2xx.
        """
        message = self.build_message(topic, payload)
        try:
            r = await self._client.post(f"{self.base_url}/bus/events", json=message, headers=self._headers())
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise BusApiError(
                f"Bus API rejected event {message['topic']}: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise BusApiError(f"Bus API unreachable for event {message['topic']}: {e}") from e

    async def publish(self, topic: Union[BusTopic, str], payload: Dict[str, Any]) -> bool:
        """Publish an event, logging instead of raising on failure.

        Returns:
            True when the bus API accepted the event
        """
        topic_name = topic.value if isinstance(topic, BusTopic) else topic
        if not self.config.enabled:
            logger.debug(f"Bus API disabled, dropping event {topic_name}")
            return False

        try:
            await self.send(topic, payload)
        except BusApiError as e:
            logger.error(f"Failed to publish event {topic_name}: {e}", extra={"status_code": e.status_code})
            log_bus_event(topic_name, delivered=False)
            return False

        logger.info(f"Published event {topic_name}")
        log_bus_event(topic_name, delivered=True)
        return True

    async def aclose(self) -> None:
        await self._client.aclose()


_bus_client: Optional[BusApiClient] = None


def get_event_bus() -> BusApiClient:
    """Return the process-wide bus client, creating it on first use."""
    global _bus_client
    if _bus_client is None:
        _bus_client = BusApiClient()
    return _bus_client


async def close_event_bus() -> None:
    """Close the process-wide bus client, if one was created."""
    global _bus_client
    if _bus_client is not None:
        await _bus_client.aclose()
        _bus_client = None
