"""Upstream session capability seen by a relay session."""

from __future__ import annotations

import enum
from typing import Any, Protocol
from collections.abc import Callable

EventCallback = Callable[[dict[str, Any]], None]
ClosedCallback = Callable[[], None]


class UpstreamState(str, enum.Enum):
    UNCONNECTED = "unconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"


class UpstreamSessionHandle(Protocol):
    """One outbound realtime session opened on behalf of a single client.

    ``connect`` is called at most once. Events reach the single subscriber in
    transport order and ``on_closed`` fires exactly once when the session ends.
    """

    def subscribe(self, on_event: EventCallback, on_closed: ClosedCallback) -> None: ...

    async def connect(self) -> None: ...

    async def send(self, event_type: str, payload: dict[str, Any]) -> None: ...

    def is_ready(self) -> bool: ...

    async def disconnect(self) -> None: ...


__all__ = ["ClosedCallback", "EventCallback", "UpstreamSessionHandle", "UpstreamState"]
