"""Configuration module exports (env names and defaults only)."""

from .websocket import DEFAULT_RELAY_WS_PATH
from .secrets import ENV_OPENAI_API_KEY

__all__ = [
    "DEFAULT_RELAY_WS_PATH",
    "ENV_OPENAI_API_KEY",
]
