"""Per-connection relay between one client websocket and one upstream session."""

from __future__ import annotations

import uuid
import asyncio
import logging
from typing import Any
from collections import deque
from collections.abc import Callable, Awaitable

import orjson
from fastapi import WebSocket

from realtime_relay.realtime import UpstreamSessionHandle
from realtime_relay.state import RelayInput, RelayState, RelayInputKind
from realtime_relay.errors import SendError, DecodeError, ConnectError, UpstreamUnavailable
from realtime_relay.config.websocket import (
    WS_KEY_TYPE,
    WS_CLOSE_NORMAL_CODE,
    WS_CLOSE_INTERNAL_ERROR_CODE,
    WS_CLOSE_UPSTREAM_CLOSED_REASON,
    WS_CLOSE_UPSTREAM_FAILED_REASON,
    WS_CLOSE_UPSTREAM_UNAVAILABLE_REASON,
)

from .parser import parse_client_event
from .transport import safe_close, safe_send_text, receive_client_frame

logger = logging.getLogger(__name__)

UpstreamFactory = Callable[[], UpstreamSessionHandle]
InputHandler = Callable[[Any], Awaitable[None]]


class RelaySession:
    """Relay events between a client websocket and its upstream session.

    The client reader, the upstream connect attempt and the upstream
    subscription only post inputs to an inbox, and ``run`` consumes it one
    input at a time. Handlers never await a send: each direction has its own
    forwarder task fed by a FIFO queue, so a stalled send in one direction
    neither delays the other nor holds up teardown.

    Client messages received before the upstream session is ready are queued
    and drained by the upstream forwarder before anything newer is sent.
    """

    def __init__(
        self,
        client: WebSocket,
        upstream_factory: UpstreamFactory,
        *,
        connect_timeout_s: float = 0.0,
        on_teardown: Callable[[], None] | None = None,
        session_id: str | None = None,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex[:8]
        self._client = client
        self._upstream_factory = upstream_factory
        self._upstream: UpstreamSessionHandle | None = None
        self._connect_timeout_s = max(0.0, float(connect_timeout_s))
        self._on_teardown = on_teardown

        self._pending: deque[str | bytes] = deque()
        self._to_upstream: asyncio.Queue[str | bytes] = asyncio.Queue()
        self._to_client: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self._inbox: asyncio.Queue[RelayInput | None] = asyncio.Queue()
        self._tasks: list[asyncio.Task] = []

        self._state = RelayState.INITIALIZING
        self._upstream_ready = False
        self._closed = False

        self._handlers: dict[RelayInputKind, InputHandler] = {
            RelayInputKind.CLIENT_MESSAGE: self._handle_client_message,
            RelayInputKind.CLIENT_CLOSED: self._handle_client_closed,
            RelayInputKind.UPSTREAM_CONNECTED: self._handle_upstream_connected,
            RelayInputKind.UPSTREAM_CONNECT_FAILED: self._handle_upstream_connect_failed,
            RelayInputKind.UPSTREAM_EVENT: self._handle_upstream_event,
            RelayInputKind.UPSTREAM_CLOSED: self._handle_upstream_closed,
        }

    @property
    def state(self) -> RelayState:
        return self._state

    @property
    def upstream(self) -> UpstreamSessionHandle | None:
        return self._upstream

    @property
    def upstream_ready(self) -> bool:
        return self._upstream_ready

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def _log_prefix(self) -> str:
        return f"relay[{self.session_id}]"

    def _transition(self, new_state: RelayState) -> None:
        old_state, self._state = self._state, new_state
        logger.info("%s %s -> %s", self._log_prefix(), old_state.value, new_state.value)

    def _post(self, kind: RelayInputKind, data: Any = None) -> None:
        if self._closed:
            return
        self._inbox.put_nowait(RelayInput(kind, data))

    def _start(self, coro: Any) -> None:
        self._tasks.append(asyncio.create_task(coro))

    # Input sources

    def _on_upstream_event(self, event: dict[str, Any]) -> None:
        self._post(RelayInputKind.UPSTREAM_EVENT, event)

    def _on_upstream_closed(self) -> None:
        self._post(RelayInputKind.UPSTREAM_CLOSED)

    async def _read_client(self) -> None:
        try:
            while True:
                frame = await receive_client_frame(self._client)
                if frame is None:
                    break
                self._post(RelayInputKind.CLIENT_MESSAGE, frame)
        except Exception:
            logger.debug("%s client receive failed", self._log_prefix(), exc_info=True)
        self._post(RelayInputKind.CLIENT_CLOSED)

    async def _connect_upstream(self, upstream: UpstreamSessionHandle) -> None:
        logger.info("%s connecting upstream", self._log_prefix())
        try:
            if self._connect_timeout_s > 0:
                await asyncio.wait_for(upstream.connect(), timeout=self._connect_timeout_s)
            else:
                await upstream.connect()
        except ConnectError as exc:
            self._post(RelayInputKind.UPSTREAM_CONNECT_FAILED, exc)
            return
        except TimeoutError:
            self._post(
                RelayInputKind.UPSTREAM_CONNECT_FAILED,
                ConnectError(f"upstream connect timed out after {self._connect_timeout_s:g}s"),
            )
            return
        except Exception as exc:
            logger.exception("%s unexpected upstream connect failure", self._log_prefix())
            self._post(RelayInputKind.UPSTREAM_CONNECT_FAILED, ConnectError(str(exc) or type(exc).__name__))
            return
        self._post(RelayInputKind.UPSTREAM_CONNECTED)

    # Forwarders

    async def _pump_to_upstream(self) -> None:
        """Drain queued client messages, mark the upstream ready, then relay live ones."""
        while self._pending:
            if not await self._forward_to_upstream(self._pending.popleft()):
                return
        # No await between the last pending check and the transition, so a
        # message handled after this point lands on the live queue.
        self._upstream_ready = True
        self._transition(RelayState.RELAYING)
        while True:
            raw = await self._to_upstream.get()
            if not await self._forward_to_upstream(raw):
                return

    async def _pump_to_client(self) -> None:
        while True:
            event = await self._to_client.get()
            last_key = next(reversed(event), None)
            logger.info('%s relaying "%s" to client: %s', self._log_prefix(), event.get(WS_KEY_TYPE), last_key)
            if not await safe_send_text(self._client, orjson.dumps(event).decode("utf-8")):
                self._post(RelayInputKind.CLIENT_CLOSED)
                return

    async def _forward_to_upstream(self, raw: str | bytes) -> bool:
        """Send one client message upstream; False once the upstream transport is gone."""
        try:
            event = parse_client_event(raw)
        except DecodeError as exc:
            logger.warning("%s error parsing event from client: %s", self._log_prefix(), exc)
            return True

        event_type = event[WS_KEY_TYPE]
        upstream = self._upstream
        if upstream is None:
            return False
        logger.info('%s relaying "%s" to upstream', self._log_prefix(), event_type)
        try:
            await upstream.send(event_type, event)
        except SendError as exc:
            logger.warning('%s failed relaying "%s" to upstream: %s', self._log_prefix(), event_type, exc)
            if exc.connection_lost:
                self._post(RelayInputKind.UPSTREAM_CLOSED)
                return False
        except Exception:
            logger.exception('%s unexpected error relaying "%s" to upstream', self._log_prefix(), event_type)
        return True

    # Input handlers

    async def _handle_client_message(self, raw: str | bytes) -> None:
        if self._state is RelayState.RELAYING:
            self._to_upstream.put_nowait(raw)
            return
        if self._state is RelayState.CONNECTING_UPSTREAM:
            self._pending.append(raw)
            logger.debug("%s queued client message (%s pending)", self._log_prefix(), len(self._pending))

    async def _handle_client_closed(self, _data: Any) -> None:
        logger.info("%s client connection closed", self._log_prefix())
        await self.close()

    async def _handle_upstream_connected(self, _data: Any) -> None:
        if self._state is not RelayState.CONNECTING_UPSTREAM:
            return
        logger.info("%s connected upstream; draining %s queued message(s)", self._log_prefix(), len(self._pending))
        self._start(self._pump_to_upstream())

    async def _handle_upstream_connect_failed(self, exc: ConnectError) -> None:
        logger.warning("%s error connecting upstream: %s", self._log_prefix(), exc)
        await self.close(code=WS_CLOSE_INTERNAL_ERROR_CODE, reason=WS_CLOSE_UPSTREAM_FAILED_REASON)

    async def _handle_upstream_event(self, event: dict[str, Any]) -> None:
        self._to_client.put_nowait(event)

    async def _handle_upstream_closed(self, _data: Any) -> None:
        logger.info("%s upstream session closed", self._log_prefix())
        await self.close(code=WS_CLOSE_NORMAL_CODE, reason=WS_CLOSE_UPSTREAM_CLOSED_REASON)

    # Lifecycle

    async def run(self) -> None:
        try:
            upstream = self._upstream_factory()
        except UpstreamUnavailable as exc:
            logger.warning("%s upstream unavailable: %s", self._log_prefix(), exc)
            await self.close(code=WS_CLOSE_INTERNAL_ERROR_CODE, reason=WS_CLOSE_UPSTREAM_UNAVAILABLE_REASON)
            return

        self._upstream = upstream
        upstream.subscribe(self._on_upstream_event, self._on_upstream_closed)
        self._transition(RelayState.CONNECTING_UPSTREAM)
        self._start(self._read_client())
        self._start(self._pump_to_client())
        self._start(self._connect_upstream(upstream))

        try:
            while not self._closed:
                item = await self._inbox.get()
                if item is None:
                    break
                await self._handlers[item.kind](item.data)
        finally:
            await self.close()

    async def close(self, *, code: int = WS_CLOSE_NORMAL_CODE, reason: str = "") -> None:
        """Tear down both sides once; later calls are no-ops.

        In-flight sends in either direction are cancelled rather than awaited.
        """
        if self._closed:
            return
        self._closed = True
        try:
            self._transition(RelayState.CLOSED)
            if self._pending:
                logger.info("%s discarding %s queued message(s)", self._log_prefix(), len(self._pending))
                self._pending.clear()
            self._inbox.put_nowait(None)

            current = asyncio.current_task()
            tasks = [task for task in self._tasks if task is not current]
            for task in tasks:
                task.cancel()
            if tasks:
                await asyncio.gather(*tasks, return_exceptions=True)

            if self._upstream is not None:
                try:
                    await self._upstream.disconnect()
                except Exception:
                    logger.warning("%s upstream disconnect failed", self._log_prefix(), exc_info=True)
            await safe_close(self._client, code=code, reason=reason)
        finally:
            hook, self._on_teardown = self._on_teardown, None
            if hook is not None:
                hook()


__all__ = ["RelaySession", "UpstreamFactory"]
