"""
Request Context Middleware for FastAPI.

This middleware gives every request an id and traces it:
- ``X-Request-Id`` is taken from the request or generated, stored on
  ``request.state.request_id`` (echoed in response envelopes) and returned
- request duration is returned in ``X-Process-Time``
- slow and failed requests are logged, and a failure answers the 500 envelope
- each request is reported to Logfire through ``log_api_request``
"""

import time
import uuid
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from projects_service.core.logging_config import get_logger
from projects_service.core.monitoring import log_api_request
from projects_service.server.exception_handlers.global_handler import global_exception_handler

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-Id"
SLOW_REQUEST_MS = 1000


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign a request id and log request metrics."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process the request and log metrics.

        Args:
            request: The incoming HTTP request
            call_next: The next middleware/handler

        Returns:
            The HTTP response
        """
        start_time = time.time()

        method = request.method
        path = request.url.path
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        request.state.request_id = request_id
        request.state.start_time = start_time

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"API request failed: {method} {path}",
                exc_info=True,
                extra={
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "duration_ms": (time.time() - start_time) * 1000,
                    "error": str(e),
                },
            )
            # Unhandled errors never escape this middleware.
            response = await global_exception_handler(request, e)

        duration_ms = (time.time() - start_time) * 1000
        log_api_request(
            method=method,
            path=path,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = str(duration_ms)

        if duration_ms > SLOW_REQUEST_MS:
            logger.warning(
                f"Slow API request: {method} {path} took {duration_ms:.2f}ms",
                extra={
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "duration_ms": duration_ms,
                    "status_code": response.status_code,
                },
            )

        return response
