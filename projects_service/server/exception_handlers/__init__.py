"""
Exception handlers for the projects service.

This package contains the exception handlers turning domain errors, HTTP
errors, validation errors and unexpected failures into v4 error envelopes,
and a setup function to register them with the FastAPI application.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
