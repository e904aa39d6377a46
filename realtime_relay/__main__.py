"""Run the relay server with uvicorn."""

from __future__ import annotations

import logging
from typing import Any

import uvicorn

from realtime_relay.server import app
from realtime_relay.config.logging import get_log_level

logger = logging.getLogger(__name__)


def main() -> None:
    settings = app.state.settings
    server = settings.server

    options: dict[str, Any] = {}
    if server.ssl_certfile and server.ssl_keyfile:
        options = {"ssl_certfile": server.ssl_certfile, "ssl_keyfile": server.ssl_keyfile}
    elif server.ssl_certfile or server.ssl_keyfile:
        logger.warning("TLS disabled: both SSL_CERTFILE and SSL_KEYFILE must be set")

    protocol = "https" if options else "http"
    logger.info("Starting on %s://%s:%s", protocol, server.host, server.port)
    uvicorn.run(app, host=server.host, port=server.port, log_level=get_log_level().lower(), **options)


if __name__ == "__main__":
    main()
