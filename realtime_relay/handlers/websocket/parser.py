"""Client event parsing/validation."""

from __future__ import annotations

from typing import Any

import orjson

from realtime_relay.errors import DecodeError
from realtime_relay.config.websocket import WS_KEY_TYPE


def parse_client_event(raw: str | bytes) -> dict[str, Any]:
    try:
        event = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise DecodeError(f"invalid JSON: {exc}") from exc

    if not isinstance(event, dict):
        raise DecodeError("message must be a JSON object")

    event_type = event.get(WS_KEY_TYPE)
    if not isinstance(event_type, str) or not event_type.strip():
        raise DecodeError("message missing non-empty 'type'")

    # Forwarded verbatim; no normalization.
    return event


__all__ = ["parse_client_event"]
