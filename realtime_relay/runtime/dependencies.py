"""Runtime dependency construction (upstream bridge + connection registry)."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from realtime_relay.state import RuntimeDeps
from realtime_relay.state.settings import AppSettings
from realtime_relay.config.server import DOTENV_FILENAME
from realtime_relay.config.secrets import ENV_OPENAI_API_KEY
from realtime_relay.realtime.bridge import UpstreamBridge
from realtime_relay.handlers.connections import ConnectionManager

from .settings_loader import load_settings

logger = logging.getLogger(__name__)


def check_credentials(settings: AppSettings) -> bool:
    """Warn about a missing upstream credential without refusing to start."""
    if settings.auth.api_key:
        return True
    logger.error(
        'Environment variable "%s" is missing; relay sessions will close at upstream connect.',
        ENV_OPENAI_API_KEY,
    )
    return False


def load_runtime_settings() -> AppSettings:
    # Existing environment variables win over the file.
    load_dotenv(DOTENV_FILENAME, override=False)
    return load_settings()


async def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_runtime_settings()
    check_credentials(settings)

    upstream_bridge = UpstreamBridge(
        api_key=settings.auth.api_key,
        url=settings.upstream.url,
        model=settings.upstream.model,
    )
    connections = ConnectionManager(max_connections=settings.limits.max_concurrent_connections)

    return RuntimeDeps(
        connections=connections,
        upstream_bridge=upstream_bridge,
        settings=settings,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps", "check_credentials", "load_runtime_settings"]
