"""Application-wide constants for the HTTP server."""

PROJECT_NAME = "Projects Service"
API_V4_STR = "/v4"
API_VERSION = "v4"
SERVICE_VERSION = "1.0.0"
