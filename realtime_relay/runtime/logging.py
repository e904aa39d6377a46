"""Logging initialization."""

from __future__ import annotations

import logging

from realtime_relay.config.logging import LOG_FORMAT, get_log_level, show_websockets_logs


def configure_logging() -> None:
    # Resolved at call time so values from `.env` apply.
    level = get_log_level()
    # websockets is noisy at DEBUG and on failed handshakes. Keep it tame unless explicitly enabled.
    websockets_level = logging.NOTSET if show_websockets_logs() else logging.WARNING
    logging.getLogger("websockets").setLevel(websockets_level)
    logging.getLogger("websockets.client").setLevel(websockets_level)
    logging.basicConfig(level=level, format=LOG_FORMAT)


__all__ = ["configure_logging"]
