"""Akasha MCP gateway application.

Creates the Starlette ASGI application with all routes.

Route organization:
- / - Health check
- /.well-known/mcp - MCP discovery document
- /mcp - WebSocket transport
- /sse - SSE transport (GET stream, POST send)
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import BaseRoute

from .backend import BackendClient
from .config import GatewayConfig
from .protocol.engine import ProtocolEngine
from .routes import health_routes, sse_routes, websocket_routes
from .session import SessionDirectory
from .tools import ToolRegistry

logger = logging.getLogger(__name__)


def create_app(
    config: GatewayConfig | None = None,
    *,
    backend: BackendClient | None = None,
    directory: SessionDirectory | None = None,
) -> Starlette:
    """Create the gateway application.

    Args:
        config: Gateway configuration; read from the environment if omitted
        backend: Backend client override (tests inject a mock transport here)
        directory: Session directory override

    Returns:
        Configured Starlette application

    Raises:
        ConfigError: If no config is given and the environment lacks FASTAPI_URL
    """
    if config is None:
        config = GatewayConfig.from_env()
    if backend is None:
        backend = BackendClient(config.backend_url, query_path=config.query_path)
    if directory is None:
        directory = SessionDirectory()

    engine = ProtocolEngine(ToolRegistry(), backend)

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        logger.info(f"Gateway up | WS /mcp | SSE /sse | backend {config.backend_url}")
        try:
            yield
        finally:
            await backend.aclose()

    routes: list[BaseRoute] = []
    routes.extend(health_routes)
    routes.extend(websocket_routes)
    routes.extend(sse_routes)

    # CORS for all routes, any origin (including preflight)
    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization", "Accept"],
            max_age=600,
        ),
    ]

    app = Starlette(routes=routes, middleware=middleware, lifespan=lifespan)
    app.state.config = config
    app.state.engine = engine
    app.state.directory = directory
    app.state.backend = backend
    return app
