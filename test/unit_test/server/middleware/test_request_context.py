"""Unit tests for the request context middleware."""

from unittest.mock import patch

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from projects_service.server.exception_handlers import setup_exception_handlers
from projects_service.server.middleware import MethodOverrideMiddleware, RequestContextMiddleware

MIDDLEWARE_MODULE = "projects_service.server.middleware.request_context"


@pytest.fixture
def app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestContextMiddleware)

    @app.get("/echo")
    async def echo(request: Request):
        return {"requestId": request.state.request_id}

    @app.get("/boom")
    async def boom():
        raise RuntimeError("boom")

    return app


async def _get(app: FastAPI, path: str, **kwargs):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://localhost") as client:
        return await client.get(path, **kwargs)


class TestRequestContextMiddleware:
    async def test_generates_request_id(self, app):
        response = await _get(app, "/echo")

        request_id = response.headers["X-Request-Id"]
        assert request_id
        assert response.json() == {"requestId": request_id}
        assert float(response.headers["X-Process-Time"]) >= 0

    async def test_echoes_incoming_request_id(self, app):
        response = await _get(app, "/echo", headers={"X-Request-Id": "abc-123"})

        assert response.headers["X-Request-Id"] == "abc-123"
        assert response.json()["requestId"] == "abc-123"

    async def test_reports_request_to_logfire(self, app):
        with patch(f"{MIDDLEWARE_MODULE}.log_api_request") as mock_log:
            await _get(app, "/echo")

            mock_log.assert_called_once()
            kwargs = mock_log.call_args.kwargs
            assert (kwargs["method"], kwargs["path"], kwargs["status_code"]) == ("GET", "/echo", 200)

    async def test_failed_request_logged_as_500(self, app):
        with patch(f"{MIDDLEWARE_MODULE}.log_api_request") as mock_log, patch(
            f"{MIDDLEWARE_MODULE}.logger"
        ) as mock_logger:
            response = await _get(app, "/boom")

            assert response.status_code == 500
            mock_logger.error.assert_called_once()
            assert mock_log.call_args.kwargs["status_code"] == 500

    async def test_slow_request_warning(self, app):
        with patch(f"{MIDDLEWARE_MODULE}.SLOW_REQUEST_MS", -1), patch(f"{MIDDLEWARE_MODULE}.logger") as mock_logger:
            await _get(app, "/echo")

            mock_logger.warning.assert_called_once()
            assert "Slow API request" in mock_logger.warning.call_args[0][0]


class TestUnhandledErrors:
    @pytest.fixture
    def full_app(self) -> FastAPI:
        app = FastAPI()
        setup_exception_handlers(app)
        app.add_middleware(RequestContextMiddleware)
        app.add_middleware(MethodOverrideMiddleware)

        @app.get("/boom")
        async def boom():
            raise RuntimeError("boom")

        @app.patch("/boom")
        async def boom_patch():
            raise RuntimeError("boom")

        return app

    async def test_500_carries_request_headers(self, full_app):
        response = await _get(full_app, "/boom", headers={"X-Request-Id": "req-500"})

        assert response.status_code == 500
        assert response.headers["X-Request-Id"] == "req-500"
        assert float(response.headers["X-Process-Time"]) >= 0
        body = response.json()
        assert body["id"] == "req-500"
        assert body["result"]["status"] == 500
        assert body["result"]["content"]["message"] == "Internal server error"
        assert body["result"]["content"]["details"]["errorType"] == "RuntimeError"

    async def test_500_after_method_override_keeps_request_id(self, full_app):
        transport = ASGITransport(app=full_app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://localhost") as client:
            response = await client.post(
                "/boom", headers={"X-Request-Id": "req-override", "X-HTTP-Method-Override": "PATCH"}
            )

        assert response.status_code == 500
        assert response.headers["X-Request-Id"] == "req-override"
        assert response.json()["id"] == "req-override"
