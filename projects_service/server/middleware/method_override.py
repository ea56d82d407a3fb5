"""
HTTP method override.

Clients that can only send ``GET`` and ``POST`` may send a ``POST`` with an
``X-HTTP-Method-Override`` header naming the real method (``PATCH``,
``PUT`` or ``DELETE``); the request is routed as that method.
"""

from starlette.types import ASGIApp, Receive, Scope, Send

from projects_service.core.logging_config import get_logger

logger = get_logger(__name__)

OVERRIDE_HEADER = b"x-http-method-override"
OVERRIDABLE_METHODS = frozenset({"PATCH", "PUT", "DELETE"})


class MethodOverrideMiddleware:
    """Pure ASGI middleware rewriting the method of overridden POST requests."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] == "POST":
            for name, value in scope.get("headers", []):
                if name.lower() == OVERRIDE_HEADER:
                    method = value.decode("latin-1").strip().upper()
                    if method in OVERRIDABLE_METHODS:
                        logger.debug(f"Method override POST -> {method} for {scope.get('path')}")
                        scope = dict(scope, method=method)
                    break
        await self.app(scope, receive, send)
