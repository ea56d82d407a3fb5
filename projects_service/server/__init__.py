"""
Projects Service Server Package.

This package contains the web server implementation of the projects service.

Subpackages:
    api: FastAPI route definitions (v4).
    core: Configuration, constants and authentication.
    exception_handlers: Error envelope handlers.
    middleware: Request context and method override middleware.
    services: Business logic and service layer.
"""
