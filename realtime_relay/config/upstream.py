"""Upstream realtime service configuration (env names and defaults only)."""

from __future__ import annotations

ENV_OPENAI_REALTIME_URL = "OPENAI_REALTIME_URL"
ENV_OPENAI_REALTIME_MODEL = "OPENAI_REALTIME_MODEL"
ENV_UPSTREAM_CONNECT_TIMEOUT_S = "UPSTREAM_CONNECT_TIMEOUT_S"

DEFAULT_OPENAI_REALTIME_URL = "wss://api.openai.com/v1/realtime"
DEFAULT_OPENAI_REALTIME_MODEL = "gpt-4o-realtime-preview-2024-10-01"

# 0 waits on the upstream handshake indefinitely.
DEFAULT_UPSTREAM_CONNECT_TIMEOUT_S = 0.0

# Beta header required by the realtime endpoint.
OPENAI_BETA_HEADER = "OpenAI-Beta"
OPENAI_BETA_REALTIME = "realtime=v1"

# Prefix for client-side event ids attached to every upstream send.
UPSTREAM_EVENT_ID_PREFIX = "evt_"
UPSTREAM_EVENT_ID_LENGTH = 21

__all__ = [
    "DEFAULT_OPENAI_REALTIME_MODEL",
    "DEFAULT_OPENAI_REALTIME_URL",
    "DEFAULT_UPSTREAM_CONNECT_TIMEOUT_S",
    "ENV_OPENAI_REALTIME_MODEL",
    "ENV_OPENAI_REALTIME_URL",
    "ENV_UPSTREAM_CONNECT_TIMEOUT_S",
    "OPENAI_BETA_HEADER",
    "OPENAI_BETA_REALTIME",
    "UPSTREAM_EVENT_ID_LENGTH",
    "UPSTREAM_EVENT_ID_PREFIX",
]
