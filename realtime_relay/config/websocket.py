"""WebSocket protocol configuration and constants."""

from __future__ import annotations

ENV_RELAY_WS_PATH = "RELAY_WS_PATH"

# Serves both the relay websocket and the status query.
DEFAULT_RELAY_WS_PATH = "/api/ws"

# Event keys
WS_KEY_TYPE = "type"

# Close codes
WS_CLOSE_NORMAL_CODE = 1000
WS_CLOSE_INTERNAL_ERROR_CODE = 1011
WS_CLOSE_BUSY_CODE = 4002

WS_CLOSE_UPSTREAM_UNAVAILABLE_REASON = "upstream unavailable"
WS_CLOSE_UPSTREAM_FAILED_REASON = "upstream connect failed"
WS_CLOSE_UPSTREAM_CLOSED_REASON = "upstream closed"
WS_CLOSE_BUSY_REASON = "server at capacity"

# Status query
STATUS_AVAILABLE = "available"

__all__ = [
    "DEFAULT_RELAY_WS_PATH",
    "ENV_RELAY_WS_PATH",
    "STATUS_AVAILABLE",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_BUSY_REASON",
    "WS_CLOSE_INTERNAL_ERROR_CODE",
    "WS_CLOSE_NORMAL_CODE",
    "WS_CLOSE_UPSTREAM_CLOSED_REASON",
    "WS_CLOSE_UPSTREAM_FAILED_REASON",
    "WS_CLOSE_UPSTREAM_UNAVAILABLE_REASON",
    "WS_KEY_TYPE",
]
