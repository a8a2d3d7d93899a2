"""Main FastAPI server for the OpenAI Realtime voice relay."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket
from fastapi.responses import ORJSONResponse
from fastapi.middleware.cors import CORSMiddleware

from voice_relay.state import RuntimeDeps
from voice_relay.runtime.logging import configure_logging
from voice_relay.config.server import SERVICE_NAME, SERVICE_VERSION
from voice_relay.runtime.dependencies import build_runtime_deps
from voice_relay.config.websocket import WS_ROOT_PATH, WS_ENDPOINT_PATH
from voice_relay.handlers.websocket.manager import handle_websocket_connection

logger = logging.getLogger(__name__)


def _runtime_deps(app: FastAPI) -> RuntimeDeps:
    runtime_deps = getattr(app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


def build_app(runtime_deps: RuntimeDeps | None = None) -> FastAPI:
    """Create the relay app. ``runtime_deps`` overrides the env-built wiring."""

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        app.state.runtime_deps = runtime_deps or build_runtime_deps()
        logger.info("runtime: ready")
        try:
            yield
        finally:
            deps = getattr(app.state, "runtime_deps", None)
            if deps is not None:
                await deps.shutdown()

    app = FastAPI(title=SERVICE_NAME, default_response_class=ORJSONResponse, lifespan=_lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/api/info")
    async def info() -> dict[str, object]:
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "endpoints": {"websocket": WS_ENDPOINT_PATH, "health": "/health"},
            "active_connections": _runtime_deps(app).connections.get_connection_count(),
        }

    async def websocket_endpoint(websocket: WebSocket) -> None:
        await handle_websocket_connection(websocket, _runtime_deps(app))

    app.add_api_websocket_route(WS_ROOT_PATH, websocket_endpoint)
    app.add_api_websocket_route(WS_ENDPOINT_PATH, websocket_endpoint)
    return app


configure_logging()

app = build_app()

__all__ = ["app", "build_app"]
