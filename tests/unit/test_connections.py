from __future__ import annotations

from realtime_relay.handlers.status import StatusReporter
from realtime_relay.handlers.connections import ConnectionManager


def test_count_tracks_live_connections() -> None:
    manager = ConnectionManager()
    sockets = [object(), object(), object()]
    for ws in sockets:
        assert manager.connect(ws)
    assert manager.get_connection_count() == 3

    assert manager.disconnect(sockets[1])
    assert manager.get_connection_count() == 2


def test_disconnect_is_idempotent() -> None:
    manager = ConnectionManager()
    ws = object()
    manager.connect(ws)

    assert manager.disconnect(ws) is True
    assert manager.disconnect(ws) is False
    assert manager.get_connection_count() == 0


def test_disconnect_unknown_never_goes_negative() -> None:
    manager = ConnectionManager()
    assert manager.disconnect(object()) is False
    assert manager.get_connection_count() == 0


def test_capacity_limit() -> None:
    manager = ConnectionManager(max_connections=2)
    a, b, c = object(), object(), object()
    assert manager.connect(a)
    assert manager.connect(b)
    assert not manager.connect(c)
    assert manager.get_connection_count() == 2

    manager.disconnect(a)
    assert manager.connect(c)


def test_zero_limit_admits_everything() -> None:
    manager = ConnectionManager(max_connections=0)
    sockets = [object() for _ in range(50)]
    assert all(manager.connect(ws) for ws in sockets)
    assert manager.get_connection_count() == 50
    assert manager.max_connections == 0


def test_status_report() -> None:
    manager = ConnectionManager()
    reporter = StatusReporter(manager, port=3000)
    assert reporter.report() == {"status": "available", "count": 0, "port": 3000}

    ws = object()
    manager.connect(ws)
    assert reporter.report() == {"status": "available", "count": 1, "port": 3000}

    manager.disconnect(ws)
    assert reporter.report()["count"] == 0
