"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from dataclasses import field, dataclass

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from realtime_relay.state.settings import AppSettings
    from realtime_relay.realtime.bridge import UpstreamBridge
    from realtime_relay.handlers.connections import ConnectionManager
    from realtime_relay.handlers.websocket.relay import RelaySession


@dataclass(slots=True)
class RuntimeDeps:
    connections: ConnectionManager
    upstream_bridge: UpstreamBridge
    settings: AppSettings
    sessions: set[RelaySession] = field(default_factory=set)

    async def shutdown(self) -> None:
        sessions = list(self.sessions)
        if sessions:
            logger.info("runtime: closing %s relay session(s)", len(sessions))
        for session in sessions:
            try:
                await session.close()
            except Exception:
                logger.exception("runtime: relay session shutdown failed")
        self.sessions.clear()


__all__ = ["RuntimeDeps"]
