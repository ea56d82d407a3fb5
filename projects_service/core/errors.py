"""
Domain errors raised by services and permission checks.

Route handlers never build error responses themselves; they raise ``ApiError``
and the exception handlers in ``projects_service.server.exception_handlers``
turn it into a v4 error envelope.
"""

from __future__ import annotations

from typing import Any, Optional


class ApiError(Exception):
    """An error that maps to an HTTP status code and a client-facing message."""

    def __init__(self, status_code: int, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details

    def __repr__(self) -> str:
        return f"ApiError(status_code={self.status_code}, message={self.message!r})"


class NotFoundError(ApiError):
    def __init__(self, message: str) -> None:
        super().__init__(404, message)


class ForbiddenError(ApiError):
    def __init__(self, message: str = "You do not have permissions to perform this action") -> None:
        super().__init__(403, message)


class BadRequestError(ApiError):
    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(400, message, details)


class ConflictError(ApiError):
    def __init__(self, message: str) -> None:
        super().__init__(409, message)


class UnauthorizedError(ApiError):
    def __init__(self, message: str = "No token provided.") -> None:
        super().__init__(401, message)
