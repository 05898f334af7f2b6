"""Health check and MCP discovery endpoints."""

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from ..protocol.types import PROTOCOL_VERSION, SERVER_NAME, SERVER_VERSION


async def health_check(request: Request) -> JSONResponse:
    """Health check endpoint, also listing the transport paths."""
    return JSONResponse(
        {
            "ok": True,
            "docs": "/.well-known/mcp",
            "ws": "/mcp",
            "sse": "/sse",
            "fastapi": request.app.state.config.backend_url,
        }
    )


async def discovery(request: Request) -> JSONResponse:
    """MCP discovery document advertising the SSE transport.

    Honors X-Forwarded-* so the advertised URL is reachable behind a proxy.
    """
    host = request.headers.get("x-forwarded-host") or request.headers.get("host", "")
    proto = request.headers.get("x-forwarded-proto", "https")
    base = f"{proto}://{host}"

    return JSONResponse(
        {
            "mcp": {
                "name": SERVER_NAME,
                "version": SERVER_VERSION,
                "protocol": PROTOCOL_VERSION,
                "transport": {"type": "sse", "url": f"{base}/sse"},
            }
        }
    )


health_routes = [
    Route("/", health_check, methods=["GET"]),
    Route("/.well-known/mcp", discovery, methods=["GET"]),
]
