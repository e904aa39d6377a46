"""Send/receive/close helpers for the client websocket."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

from realtime_relay.config.websocket import WS_CLOSE_NORMAL_CODE

logger = logging.getLogger(__name__)


async def receive_client_frame(ws: WebSocket) -> str | bytes | None:
    """Return the next text or binary frame, or None once the client disconnects."""
    while True:
        message: dict[str, Any] = await ws.receive()
        if message["type"] == "websocket.disconnect":
            return None
        text = message.get("text")
        if text is not None:
            return text
        data = message.get("bytes")
        if data is not None:
            return data


async def safe_send_text(ws: WebSocket, text: str) -> bool:
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def safe_close(ws: WebSocket, *, code: int = WS_CLOSE_NORMAL_CODE, reason: str = "") -> None:
    try:
        await ws.close(code=code, reason=reason)
    except Exception:
        # Already closed by the peer or by the server.
        return


async def reject_connection(ws: WebSocket, *, close_code: int, reason: str) -> None:
    # Accept so the close code reaches the client, then close.
    try:
        await ws.accept()
    except Exception:
        return
    await safe_close(ws, code=close_code, reason=reason)


__all__ = ["receive_client_frame", "reject_connection", "safe_close", "safe_send_text"]
