"""Environment parsing for runtime settings."""

from __future__ import annotations

import os

from realtime_relay.config.secrets import get_openai_api_key
from realtime_relay.state.settings import (
    AppSettings,
    AuthSettings,
    LimitsSettings,
    ServerSettings,
    UpstreamSettings,
)
from realtime_relay.config.websocket import ENV_RELAY_WS_PATH, DEFAULT_RELAY_WS_PATH
from realtime_relay.config.limits import (
    ENV_MAX_CONCURRENT_CONNECTIONS,
    DEFAULT_MAX_CONCURRENT_CONNECTIONS,
)
from realtime_relay.config.server import (
    ENV_HOST,
    ENV_PORT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    ENV_SSL_KEYFILE,
    ENV_SSL_CERTFILE,
)
from realtime_relay.config.upstream import (
    ENV_OPENAI_REALTIME_URL,
    ENV_OPENAI_REALTIME_MODEL,
    DEFAULT_OPENAI_REALTIME_URL,
    DEFAULT_OPENAI_REALTIME_MODEL,
    ENV_UPSTREAM_CONNECT_TIMEOUT_S,
    DEFAULT_UPSTREAM_CONNECT_TIMEOUT_S,
)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _normalize_path(path: str) -> str:
    path = "/" + path.strip().strip("/")
    return path if path != "/" else DEFAULT_RELAY_WS_PATH


def _load_auth_settings() -> AuthSettings:
    return AuthSettings(api_key=get_openai_api_key())


def _load_server_settings() -> ServerSettings:
    port = _int_env(ENV_PORT, DEFAULT_PORT)
    if port <= 0 or port > 65535:
        port = DEFAULT_PORT
    return ServerSettings(
        host=_str_env(ENV_HOST, DEFAULT_HOST),
        port=port,
        relay_path=_normalize_path(_str_env(ENV_RELAY_WS_PATH, DEFAULT_RELAY_WS_PATH)),
        ssl_certfile=_str_env(ENV_SSL_CERTFILE, ""),
        ssl_keyfile=_str_env(ENV_SSL_KEYFILE, ""),
    )


def _load_upstream_settings() -> UpstreamSettings:
    timeout = _float_env(ENV_UPSTREAM_CONNECT_TIMEOUT_S, DEFAULT_UPSTREAM_CONNECT_TIMEOUT_S)
    return UpstreamSettings(
        url=_str_env(ENV_OPENAI_REALTIME_URL, DEFAULT_OPENAI_REALTIME_URL),
        model=_str_env(ENV_OPENAI_REALTIME_MODEL, DEFAULT_OPENAI_REALTIME_MODEL),
        connect_timeout_s=max(0.0, timeout),
    )


def _load_limits_settings() -> LimitsSettings:
    max_connections = _int_env(ENV_MAX_CONCURRENT_CONNECTIONS, DEFAULT_MAX_CONCURRENT_CONNECTIONS)
    return LimitsSettings(max_concurrent_connections=max(0, max_connections))


def load_settings() -> AppSettings:
    return AppSettings(
        auth=_load_auth_settings(),
        server=_load_server_settings(),
        upstream=_load_upstream_settings(),
        limits=_load_limits_settings(),
    )


__all__ = ["load_settings"]
