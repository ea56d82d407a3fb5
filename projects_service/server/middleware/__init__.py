"""
Middleware modules for the projects service.

This package contains custom middleware for request identification,
request/response logging and HTTP method overriding.
"""

from .method_override import MethodOverrideMiddleware
from .request_context import RequestContextMiddleware

__all__ = ["MethodOverrideMiddleware", "RequestContextMiddleware"]
