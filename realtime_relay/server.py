"""Main FastAPI server for the realtime relay."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from collections.abc import Callable, Awaitable

from fastapi import FastAPI, WebSocket
from fastapi.responses import ORJSONResponse

from realtime_relay.state import AppSettings, RuntimeDeps
from realtime_relay.runtime.logging import configure_logging
from realtime_relay.handlers.status import StatusReporter
from realtime_relay.runtime.dependencies import build_runtime_deps, load_runtime_settings
from realtime_relay.handlers.websocket.manager import handle_websocket_connection

logger = logging.getLogger(__name__)

DepsBuilder = Callable[[AppSettings], Awaitable[RuntimeDeps]]


def _runtime_deps(app: FastAPI) -> RuntimeDeps:
    runtime_deps = getattr(app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


def create_app(build_deps: DepsBuilder = build_runtime_deps, settings: AppSettings | None = None) -> FastAPI:
    settings = settings or load_runtime_settings()
    configure_logging()

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        runtime_deps = await build_deps(settings)
        app.state.runtime_deps = runtime_deps
        logger.info("runtime: ready (relay path %s, port %s)", settings.server.relay_path, settings.server.port)
        try:
            yield
        finally:
            deps = getattr(app.state, "runtime_deps", None)
            if deps is not None:
                await deps.shutdown()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)
    app.state.settings = settings

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get(settings.server.relay_path)
    async def relay_status() -> ORJSONResponse:
        runtime_deps = _runtime_deps(app)
        body = StatusReporter(runtime_deps.connections, port=settings.server.port).report()
        logger.info("Sending response for %s: %s", settings.server.relay_path, body)
        return ORJSONResponse(body)

    @app.websocket(settings.server.relay_path)
    async def relay_endpoint(websocket: WebSocket) -> None:
        await handle_websocket_connection(websocket, _runtime_deps(app))

    return app


app = create_app()

__all__ = ["app", "create_app"]
