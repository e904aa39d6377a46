"""Primary WebSocket connection handler orchestration."""

from __future__ import annotations

import logging

from fastapi import WebSocket

from realtime_relay.state import RuntimeDeps
from realtime_relay.config.websocket import WS_CLOSE_BUSY_CODE, WS_CLOSE_BUSY_REASON

from .relay import RelaySession
from .transport import reject_connection

logger = logging.getLogger(__name__)


def _release_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    if runtime_deps.connections.disconnect(ws):
        logger.info(
            "WebSocket connection closed. Total clients: %s",
            runtime_deps.connections.get_connection_count(),
        )


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    connections = runtime_deps.connections
    if not connections.connect(ws):
        logger.warning("WebSocket connection rejected; server at capacity (%s)", connections.max_connections)
        await reject_connection(ws, close_code=WS_CLOSE_BUSY_CODE, reason=WS_CLOSE_BUSY_REASON)
        return

    session: RelaySession | None = None
    try:
        logger.info(
            "New WebSocket connection established. Total clients: %s",
            connections.get_connection_count(),
        )
        await ws.accept()

        session = RelaySession(
            ws,
            runtime_deps.upstream_bridge.new_session,
            connect_timeout_s=runtime_deps.settings.upstream.connect_timeout_s,
            on_teardown=lambda: _release_connection(ws, runtime_deps),
        )
        runtime_deps.sessions.add(session)
        await session.run()
    finally:
        if session is not None:
            runtime_deps.sessions.discard(session)
        _release_connection(ws, runtime_deps)


__all__ = ["handle_websocket_connection"]
