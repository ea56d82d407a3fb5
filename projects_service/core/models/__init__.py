"""Core models: domain enums (``domain``) and API request/response schemas (``io``)."""
