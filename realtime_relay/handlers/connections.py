"""Live connection registry and admission control."""

from __future__ import annotations

from typing import Any


class ConnectionManager:
    """Track the client websockets that currently own a relay session.

    The live count is the size of the registry, so it can neither drift nor go
    negative. Mutations never await, which keeps them atomic on the event loop.
    """

    def __init__(self, *, max_connections: int = 0) -> None:
        self._max = max(0, int(max_connections))
        self._active: set[int] = set()

    @property
    def max_connections(self) -> int:
        return self._max

    def connect(self, ws: Any) -> bool:
        """Attempt to admit a websocket connection (without accepting it)."""
        if self._max and len(self._active) >= self._max:
            return False
        self._active.add(id(ws))
        return True

    def disconnect(self, ws: Any) -> bool:
        """Release a connection; returns False if it was already released."""
        key = id(ws)
        if key not in self._active:
            return False
        self._active.discard(key)
        return True

    def get_connection_count(self) -> int:
        return len(self._active)


__all__ = ["ConnectionManager"]
