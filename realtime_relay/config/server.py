"""HTTP server configuration (env names and defaults only)."""

from __future__ import annotations

ENV_HOST = "HOST"
ENV_PORT = "PORT"
ENV_SSL_CERTFILE = "SSL_CERTFILE"
ENV_SSL_KEYFILE = "SSL_KEYFILE"

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000

# Loaded into the process environment before settings are resolved.
DOTENV_FILENAME = ".env"

__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DOTENV_FILENAME",
    "ENV_HOST",
    "ENV_PORT",
    "ENV_SSL_CERTFILE",
    "ENV_SSL_KEYFILE",
]
