"""Realtime API session over a websockets client connection."""

from __future__ import annotations

import string
import asyncio
import logging
import secrets
import contextlib
from typing import Any
from urllib.parse import urlparse, parse_qsl, urlencode, urlunparse

import orjson
import websockets
from websockets.exceptions import InvalidURI, ConnectionClosed, InvalidHandshake, ConnectionClosedError

from realtime_relay.errors import SendError, ConnectError
from realtime_relay.config.upstream import (
    OPENAI_BETA_HEADER,
    OPENAI_BETA_REALTIME,
    UPSTREAM_EVENT_ID_LENGTH,
    UPSTREAM_EVENT_ID_PREFIX,
)

from .handle import EventCallback, UpstreamState, ClosedCallback

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_letters + string.digits


def new_event_id(prefix: str = UPSTREAM_EVENT_ID_PREFIX, length: int = UPSTREAM_EVENT_ID_LENGTH) -> str:
    size = max(1, length - len(prefix))
    return prefix + "".join(secrets.choice(_ID_ALPHABET) for _ in range(size))


def build_session_url(url: str, model: str) -> str:
    """Append the ``model`` query parameter unless the URL already names one."""
    parsed = urlparse(url)
    query_params = dict(parse_qsl(parsed.query, keep_blank_values=True))
    if model and "model" not in query_params:
        query_params["model"] = model
    new_query = urlencode(query_params)
    return urlunparse((parsed.scheme, parsed.netloc, parsed.path, parsed.params, new_query, parsed.fragment))


class RealtimeUpstreamSession:
    def __init__(self, *, api_key: str, url: str, model: str) -> None:
        self._api_key = api_key
        self._url = build_session_url(url, model)
        self._state = UpstreamState.UNCONNECTED
        self._ws: Any = None
        self._receive_task: asyncio.Task | None = None
        self._on_event: EventCallback | None = None
        self._on_closed: ClosedCallback | None = None
        self._opened = False
        self._closed_notified = False

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def state(self) -> UpstreamState:
        return self._state

    def subscribe(self, on_event: EventCallback, on_closed: ClosedCallback) -> None:
        self._on_event = on_event
        self._on_closed = on_closed

    def is_ready(self) -> bool:
        return self._state is UpstreamState.CONNECTED

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            OPENAI_BETA_HEADER: OPENAI_BETA_REALTIME,
        }

    async def connect(self) -> None:
        if self._state is not UpstreamState.UNCONNECTED:
            raise ConnectError(f"upstream session cannot connect from state {self._state.value}")
        if not self._api_key:
            self._state = UpstreamState.CLOSED
            raise ConnectError("no API key configured for the upstream session")

        self._state = UpstreamState.CONNECTING
        logger.info('upstream: connecting with key "%s..."', self._api_key[:3])
        try:
            ws = await websockets.connect(self._url, additional_headers=self._headers(), max_size=None)
        except (InvalidURI, InvalidHandshake, OSError, TimeoutError) as exc:
            self._state = UpstreamState.CLOSED
            raise ConnectError(f"upstream connect failed: {exc}") from exc
        except BaseException:
            self._state = UpstreamState.CLOSED
            raise

        if self._state is not UpstreamState.CONNECTING:
            # Disconnected while the handshake was in flight.
            with contextlib.suppress(Exception):
                await ws.close()
            raise ConnectError("upstream session closed during connect")

        self._ws = ws
        self._opened = True
        self._state = UpstreamState.CONNECTED
        self._receive_task = asyncio.create_task(self._receive_loop(ws))
        logger.info("upstream: connected")

    async def send(self, event_type: str, payload: dict[str, Any]) -> None:
        ws = self._ws
        if self._state is not UpstreamState.CONNECTED or ws is None:
            raise SendError("upstream session is not connected")

        event: dict[str, Any] = {"event_id": new_event_id(), "type": event_type}
        event.update(payload)
        try:
            data = orjson.dumps(event).decode("utf-8")
        except orjson.JSONEncodeError as exc:
            raise SendError(f"payload rejected: {exc}") from exc

        try:
            await ws.send(data)
        except ConnectionClosed as exc:
            raise SendError(f"upstream connection lost: {exc}", connection_lost=True) from exc

    async def disconnect(self) -> None:
        self._state = UpstreamState.CLOSED
        ws, self._ws = self._ws, None
        task, self._receive_task = self._receive_task, None

        if ws is not None:
            with contextlib.suppress(Exception):
                await ws.close()
        if task is not None and task is not asyncio.current_task():
            task.cancel()
            with contextlib.suppress(Exception):
                await task
        self._notify_closed()

    def _dispatch_event(self, event: dict[str, Any]) -> None:
        if self._on_event is None:
            return
        try:
            self._on_event(event)
        except Exception:
            logger.exception("upstream: event observer failed for %r", event.get("type"))

    def _notify_closed(self) -> None:
        # Only a session that reached the transport reports closure.
        if self._closed_notified or not self._opened:
            return
        self._closed_notified = True
        if self._on_closed is not None:
            with contextlib.suppress(Exception):
                self._on_closed()

    async def _receive_loop(self, ws: Any) -> None:
        try:
            async for message in ws:
                try:
                    event = orjson.loads(message)
                except orjson.JSONDecodeError:
                    logger.warning("upstream: dropping non-JSON frame (%s bytes)", len(message))
                    continue
                if not isinstance(event, dict):
                    logger.warning("upstream: dropping non-object event")
                    continue
                self._dispatch_event(event)
        except asyncio.CancelledError:
            pass
        except ConnectionClosedError as exc:
            logger.info("upstream: connection closed with error: %s", exc)
        except Exception:
            logger.exception("upstream: receive loop failed")
        finally:
            self._state = UpstreamState.CLOSED
            self._notify_closed()


__all__ = ["RealtimeUpstreamSession", "build_session_url", "new_event_id"]
