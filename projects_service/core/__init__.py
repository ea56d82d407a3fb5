"""Core utilities shared by the projects service: logging, monitoring, errors and persistence."""
