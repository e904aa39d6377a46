"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AuthSettings:
    api_key: str


@dataclass(frozen=True, slots=True)
class ServerSettings:
    host: str
    port: int
    relay_path: str
    ssl_certfile: str
    ssl_keyfile: str


@dataclass(frozen=True, slots=True)
class UpstreamSettings:
    url: str
    model: str
    connect_timeout_s: float


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_connections: int


@dataclass(frozen=True, slots=True)
class AppSettings:
    auth: AuthSettings
    server: ServerSettings
    upstream: UpstreamSettings
    limits: LimitsSettings


__all__ = [
    "AppSettings",
    "AuthSettings",
    "LimitsSettings",
    "ServerSettings",
    "UpstreamSettings",
]
