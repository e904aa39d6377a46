"""Logging configuration."""

from __future__ import annotations

import os

ENV_LOG_LEVEL = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# The websockets library logs every frame at DEBUG and handshake failures at INFO.
ENV_SHOW_WEBSOCKETS_LOGS = "SHOW_WEBSOCKETS_LOGS"


def get_log_level() -> str:
    return (os.getenv(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL).strip().upper()


def show_websockets_logs() -> bool:
    return (os.getenv(ENV_SHOW_WEBSOCKETS_LOGS) or "").strip().lower() in {"1", "true", "yes"}


__all__ = [
    "DEFAULT_LOG_LEVEL",
    "ENV_LOG_LEVEL",
    "ENV_SHOW_WEBSOCKETS_LOGS",
    "LOG_FORMAT",
    "get_log_level",
    "show_websockets_logs",
]
