from __future__ import annotations

import json
import asyncio
from http import HTTPStatus
from typing import Any
from collections.abc import AsyncIterator
from urllib.parse import parse_qs, urlparse

import pytest
import pytest_asyncio
from websockets.asyncio.server import ServerConnection, serve

from utils import wait_until

from realtime_relay.realtime import UpstreamState
from realtime_relay.errors import SendError, ConnectError
from realtime_relay.realtime.session import RealtimeUpstreamSession, new_event_id, build_session_url


class _RealtimeServer:
    """Loopback realtime endpoint that records what it receives."""

    def __init__(self) -> None:
        self.connections: list[ServerConnection] = []
        self.received: list[dict[str, Any]] = []
        self.paths: list[str] = []
        self.headers: list[dict[str, str]] = []
        self.reject_status: HTTPStatus | None = None

    def process_request(self, connection: ServerConnection, request: Any) -> Any:
        if self.reject_status is not None:
            return connection.respond(self.reject_status, "invalid api key\n")
        return None

    async def handler(self, ws: ServerConnection) -> None:
        self.connections.append(ws)
        self.paths.append(ws.request.path)
        self.headers.append({k: v for k, v in ws.request.headers.raw_items()})
        async for message in ws:
            self.received.append(json.loads(message))

    async def push(self, event: Any) -> None:
        await self.connections[-1].send(event if isinstance(event, str) else json.dumps(event))


@pytest_asyncio.fixture
async def realtime_server() -> AsyncIterator[tuple[_RealtimeServer, str]]:
    fake = _RealtimeServer()
    async with serve(fake.handler, "127.0.0.1", 0, process_request=fake.process_request) as server:
        port = server.sockets[0].getsockname()[1]
        yield fake, f"ws://127.0.0.1:{port}/v1/realtime"


def _session(url: str, *, api_key: str = "sk-test-key") -> RealtimeUpstreamSession:
    return RealtimeUpstreamSession(api_key=api_key, url=url, model="test-model")


def test_new_event_id_shape() -> None:
    ids = {new_event_id() for _ in range(100)}
    assert len(ids) == 100
    for event_id in ids:
        assert event_id.startswith("evt_")
        assert len(event_id) == 21


def test_build_session_url_appends_model() -> None:
    url = build_session_url("wss://api.openai.com/v1/realtime", "gpt-4o-realtime-preview-2024-10-01")
    assert url == "wss://api.openai.com/v1/realtime?model=gpt-4o-realtime-preview-2024-10-01"


def test_build_session_url_keeps_explicit_model() -> None:
    url = build_session_url("wss://example.test/realtime?model=custom&x=1", "other")
    assert parse_qs(urlparse(url).query) == {"model": ["custom"], "x": ["1"]}


@pytest.mark.asyncio
async def test_connect_sends_credentials_and_model(realtime_server: tuple[_RealtimeServer, str]) -> None:
    fake, url = realtime_server
    session = _session(url)

    await session.connect()
    assert session.is_ready()
    assert session.state is UpstreamState.CONNECTED

    await wait_until(lambda: fake.headers)
    headers = {k.lower(): v for k, v in fake.headers[0].items()}
    assert headers["authorization"] == "Bearer sk-test-key"
    assert headers["openai-beta"] == "realtime=v1"
    assert fake.paths[0] == "/v1/realtime?model=test-model"

    await session.disconnect()


@pytest.mark.asyncio
async def test_send_attaches_event_id(realtime_server: tuple[_RealtimeServer, str]) -> None:
    fake, url = realtime_server
    session = _session(url)
    await session.connect()

    await session.send("conversation.item.create", {"type": "conversation.item.create", "item": {"id": "msg_1"}})
    await session.send("response.create", {"type": "response.create"})
    await wait_until(lambda: len(fake.received) == 2)

    first, second = fake.received
    assert first["type"] == "conversation.item.create"
    assert first["item"] == {"id": "msg_1"}
    assert first["event_id"].startswith("evt_") and len(first["event_id"]) == 21
    assert second["type"] == "response.create"
    assert first["event_id"] != second["event_id"]

    await session.disconnect()


@pytest.mark.asyncio
async def test_client_event_id_is_kept(realtime_server: tuple[_RealtimeServer, str]) -> None:
    fake, url = realtime_server
    session = _session(url)
    await session.connect()

    await session.send("response.cancel", {"type": "response.cancel", "event_id": "evt_from_client"})
    await wait_until(lambda: fake.received)
    assert fake.received[0]["event_id"] == "evt_from_client"

    await session.disconnect()


@pytest.mark.asyncio
async def test_events_are_delivered_in_order(realtime_server: tuple[_RealtimeServer, str]) -> None:
    fake, url = realtime_server
    session = _session(url)
    events: list[dict[str, Any]] = []
    session.subscribe(events.append, lambda: None)
    await session.connect()
    await wait_until(lambda: fake.connections)

    await fake.push({"type": "session.created", "session": {"id": "sess_1"}})
    await fake.push("not json")
    await fake.push([1, 2])
    await fake.push({"type": "response.done"})
    await wait_until(lambda: len(events) == 2)

    assert [e["type"] for e in events] == ["session.created", "response.done"]
    assert events[0]["session"] == {"id": "sess_1"}

    await session.disconnect()


@pytest.mark.asyncio
async def test_remote_close_notifies_once(realtime_server: tuple[_RealtimeServer, str]) -> None:
    fake, url = realtime_server
    session = _session(url)
    closed: list[bool] = []
    session.subscribe(lambda _event: None, lambda: closed.append(True))
    await session.connect()
    await wait_until(lambda: fake.connections)

    await fake.connections[0].close()
    await wait_until(lambda: closed)
    assert session.state is UpstreamState.CLOSED

    with pytest.raises(SendError):
        await session.send("response.create", {"type": "response.create"})

    await session.disconnect()
    await asyncio.sleep(0.01)
    assert closed == [True]


@pytest.mark.asyncio
async def test_disconnect_is_idempotent(realtime_server: tuple[_RealtimeServer, str]) -> None:
    _fake, url = realtime_server
    session = _session(url)
    closed: list[bool] = []
    session.subscribe(lambda _event: None, lambda: closed.append(True))
    await session.connect()

    await session.disconnect()
    await session.disconnect()

    assert session.state is UpstreamState.CLOSED
    assert closed == [True]


@pytest.mark.asyncio
async def test_send_before_connect_fails() -> None:
    session = _session("ws://127.0.0.1:1/v1/realtime")
    with pytest.raises(SendError) as exc:
        await session.send("response.create", {"type": "response.create"})
    assert exc.value.connection_lost is False


@pytest.mark.asyncio
async def test_missing_api_key_fails_without_network() -> None:
    session = _session("ws://127.0.0.1:1/v1/realtime", api_key="")
    closed: list[bool] = []
    session.subscribe(lambda _event: None, lambda: closed.append(True))

    with pytest.raises(ConnectError):
        await session.connect()
    assert session.state is UpstreamState.CLOSED

    await session.disconnect()
    assert closed == []


@pytest.mark.asyncio
async def test_refused_connection_raises_connect_error() -> None:
    session = _session("ws://127.0.0.1:1/v1/realtime")
    with pytest.raises(ConnectError):
        await session.connect()
    assert session.state is UpstreamState.CLOSED


@pytest.mark.asyncio
async def test_rejected_handshake_raises_connect_error(realtime_server: tuple[_RealtimeServer, str]) -> None:
    fake, url = realtime_server
    fake.reject_status = HTTPStatus.UNAUTHORIZED
    session = _session(url)

    with pytest.raises(ConnectError):
        await session.connect()
    assert session.state is UpstreamState.CLOSED


@pytest.mark.asyncio
async def test_connect_twice_fails(realtime_server: tuple[_RealtimeServer, str]) -> None:
    _fake, url = realtime_server
    session = _session(url)
    await session.connect()

    with pytest.raises(ConnectError):
        await session.connect()

    await session.disconnect()
