"""Status query answered on the relay path."""

from __future__ import annotations

from typing import Any

from realtime_relay.config.websocket import STATUS_AVAILABLE

from .connections import ConnectionManager


class StatusReporter:
    def __init__(self, connections: ConnectionManager, *, port: int) -> None:
        self._connections = connections
        self._port = port

    def report(self) -> dict[str, Any]:
        return {
            "status": STATUS_AVAILABLE,
            "count": self._connections.get_connection_count(),
            "port": self._port,
        }


__all__ = ["StatusReporter"]
