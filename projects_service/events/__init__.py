"""
Event publishing to the bus API.

Modules:
- constants: Bus topic names
- bus: Async bus API client and the process-wide instance
"""

from .bus import BusApiClient, BusApiError, close_event_bus, get_event_bus
from .constants import BusTopic

__all__ = [
    "BusApiClient",
    "BusApiError",
    "BusTopic",
    "close_event_bus",
    "get_event_bus",
]
