"""Unit tests for the bus API client."""

import json
from unittest.mock import patch

import httpx
import pytest

from projects_service.events import bus as bus_module
from projects_service.events.bus import BusApiClient, BusApiError, close_event_bus, get_event_bus
from projects_service.events.constants import BusTopic
from projects_service.server.core.config import BusApiConfig


def _client(handler, **config) -> BusApiClient:
    values = {"url": "http://mock-bus/v5/", "enabled": True, "token": "bus-token", "originator": "project-api"}
    values.update(config)
    transport = httpx.MockTransport(handler)
    return BusApiClient(BusApiConfig(**values), client=httpx.AsyncClient(transport=transport))


class TestBuildMessage:
    def test_envelope(self):
        client = _client(lambda request: httpx.Response(204))

        message = client.build_message(BusTopic.PROJECT_UPDATED, {"id": 1})

        assert message["topic"] == "project.updated"
        assert message["originator"] == "project-api"
        assert message["mime-type"] == "application/json"
        assert message["payload"] == {"id": 1}
        assert message["timestamp"].endswith("Z")


class TestSend:
    async def test_posts_to_bus_events(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(204)

        client = _client(handler)
        await client.send(BusTopic.PROJECT_DELETED, {"id": 3})

        assert seen["url"] == "http://mock-bus/v5/bus/events"
        assert seen["auth"] == "Bearer bus-token"
        assert seen["body"]["topic"] == "project.deleted"
        assert seen["body"]["payload"] == {"id": 3}

    async def test_no_token_no_authorization_header(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200)

        await _client(handler, token=None).send("custom.topic", {})

        assert seen["auth"] is None

    async def test_non_2xx_raises(self):
        client = _client(lambda request: httpx.Response(503, text="unavailable"))

        with pytest.raises(BusApiError) as exc_info:
            await client.send(BusTopic.PROJECT_UPDATED, {})

        assert exc_info.value.status_code == 503
        assert exc_info.value.details == "unavailable"

    async def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("refused")

        with pytest.raises(BusApiError, match="unreachable"):
            await _client(handler).send(BusTopic.PROJECT_UPDATED, {})


class TestPublish:
    async def test_publish_success(self):
        client = _client(lambda request: httpx.Response(204))

        with patch.object(bus_module, "log_bus_event") as mock_log:
            assert await client.publish(BusTopic.PROJECT_MEMBER_ADDED, {"id": 1}) is True
            mock_log.assert_called_once_with("project.member.added", delivered=True)

    async def test_publish_failure_is_swallowed(self):
        client = _client(lambda request: httpx.Response(500))

        with patch.object(bus_module, "log_bus_event") as mock_log, patch.object(bus_module, "logger") as mock_logger:
            assert await client.publish(BusTopic.PROJECT_MEMBER_ADDED, {"id": 1}) is False
            mock_log.assert_called_once_with("project.member.added", delivered=False)
            mock_logger.error.assert_called_once()

    async def test_disabled_bus_sends_nothing(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(204)

        client = _client(handler, enabled=False)

        assert await client.publish(BusTopic.PROJECT_UPDATED, {}) is False
        assert calls == []


class TestProcessClient:
    async def test_get_event_bus_is_cached_and_closed(self):
        await close_event_bus()

        first = get_event_bus()
        assert get_event_bus() is first

        await close_event_bus()
        assert bus_module._bus_client is None
