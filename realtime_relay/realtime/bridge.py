"""Factories for bridging relay sessions to upstream realtime sessions."""

from __future__ import annotations

import logging
from collections.abc import Callable

from realtime_relay.errors import UpstreamUnavailable

from .handle import UpstreamSessionHandle
from .session import RealtimeUpstreamSession

logger = logging.getLogger(__name__)

SessionFactory = Callable[..., UpstreamSessionHandle]


class UpstreamBridge:
    def __init__(
        self,
        *,
        api_key: str,
        url: str,
        model: str,
        session_factory: SessionFactory | None = None,
    ) -> None:
        self._api_key = api_key
        self._url = url
        self._model = model
        self._session_factory: SessionFactory = session_factory or RealtimeUpstreamSession

    @property
    def has_credentials(self) -> bool:
        return bool(self._api_key)

    def new_session(self) -> UpstreamSessionHandle:
        try:
            return self._session_factory(api_key=self._api_key, url=self._url, model=self._model)
        except Exception as exc:
            logger.warning("upstream: session capability unavailable: %s", exc)
            raise UpstreamUnavailable(str(exc) or type(exc).__name__) from exc


__all__ = ["SessionFactory", "UpstreamBridge"]
