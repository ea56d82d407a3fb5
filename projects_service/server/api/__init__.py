"""HTTP API routers of the projects service."""
