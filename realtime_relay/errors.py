"""Shared error types for the realtime relay."""

from __future__ import annotations


class RelayError(Exception):
    """Base class for relay failures."""


class UpstreamUnavailable(RelayError):
    """The upstream session capability could not be created for a connection."""


class ConnectError(RelayError):
    """The upstream session could not be established."""


class DecodeError(RelayError):
    """A client message is not a JSON object with a non-empty string ``type``."""


class SendError(RelayError):
    """Forwarding an event to the upstream session failed.

    ``connection_lost`` separates a dead transport from a rejected payload.
    """

    def __init__(self, message: str, *, connection_lost: bool = False) -> None:
        super().__init__(message)
        self.connection_lost = connection_lost


__all__ = [
    "ConnectError",
    "DecodeError",
    "RelayError",
    "SendError",
    "UpstreamUnavailable",
]
