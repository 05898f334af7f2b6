"""Akasha MCP gateway.

Exposes the Akasha semantic-search API as the ``qdrant_search`` MCP tool
over two transports: WebSocket (/mcp) and SSE with POST (/sse).
"""

from .app import create_app
from .backend import BackendClient
from .config import ConfigError, GatewayConfig
from .protocol import ProtocolEngine
from .session import Session, SessionDirectory
from .tools import SEARCH_TOOL, ToolDescriptor, ToolRegistry

__version__ = "0.1.0"

__all__ = [
    "create_app",
    "BackendClient",
    "ConfigError",
    "GatewayConfig",
    "ProtocolEngine",
    "Session",
    "SessionDirectory",
    "SEARCH_TOOL",
    "ToolDescriptor",
    "ToolRegistry",
]
