"""HTTP routes for the gateway."""

from .health import health_routes
from .sse import sse_routes
from .websocket import websocket_routes

__all__ = [
    "health_routes",
    "sse_routes",
    "websocket_routes",
]
