"""Relay session states and the inputs that drive them."""

from __future__ import annotations

import enum
from typing import Any
from dataclasses import dataclass


class RelayState(str, enum.Enum):
    INITIALIZING = "initializing"
    CONNECTING_UPSTREAM = "connecting_upstream"
    RELAYING = "relaying"
    CLOSED = "closed"


class RelayInputKind(str, enum.Enum):
    CLIENT_MESSAGE = "client_message"
    CLIENT_CLOSED = "client_closed"
    UPSTREAM_CONNECTED = "upstream_connected"
    UPSTREAM_CONNECT_FAILED = "upstream_connect_failed"
    UPSTREAM_EVENT = "upstream_event"
    UPSTREAM_CLOSED = "upstream_closed"


@dataclass(frozen=True, slots=True)
class RelayInput:
    kind: RelayInputKind
    data: Any = None


__all__ = ["RelayInput", "RelayInputKind", "RelayState"]
