"""Protocol engine.

Interprets one decoded message against the MCP method set and produces
exactly one response. Holds no transport state; a single engine is shared
by the WebSocket and SSE transports.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from .types import (
    PROTOCOL_VERSION,
    SERVER_NAME,
    SERVER_VERSION,
    JsonRpcErrorCode,
    RpcMessage,
    RpcResponse,
    ToolInvocationArgs,
)

if TYPE_CHECKING:
    from ..backend import BackendClient
    from ..tools import ToolRegistry

logger = logging.getLogger(__name__)

# Method names accepted for tool listing (canonical name plus client synonyms)
TOOL_LIST_METHODS = ("tools/list", "listTools", "getTools", "get_tools", "list_tools")

MethodHandler = Callable[[RpcMessage], Awaitable[RpcResponse]]


class ProtocolEngine:
    """Dispatches JSON-RPC messages to method handlers.

    Methods:
    - initialize: protocol version, server info, capabilities
    - notifications/initialized, ping: trivial acknowledgement
    - resources/list, prompts/list: empty collections
    - tools/list (and synonyms): the registered tool descriptors
    - tools/call: invoke the search tool through the backend client
    """

    def __init__(self, registry: ToolRegistry, backend: BackendClient) -> None:
        self.registry = registry
        self.backend = backend

        self._handlers: dict[str, MethodHandler] = {
            "initialize": self._handle_initialize,
            "notifications/initialized": self._handle_ack,
            "ping": self._handle_ack,
            "resources/list": self._handle_resources_list,
            "prompts/list": self._handle_prompts_list,
            "tools/call": self._handle_tools_call,
        }
        for method in TOOL_LIST_METHODS:
            self._handlers[method] = self._handle_tools_list

    @property
    def methods(self) -> list[str]:
        return sorted(self._handlers)

    async def handle(self, message: RpcMessage) -> RpcResponse:
        """Produce the response for one message."""
        handler = self._handlers.get(message.method) if isinstance(message.method, str) else None
        if handler is None:
            logger.debug(f"Unknown method: {message.method!r}")
            return RpcResponse.fault(
                message.id, JsonRpcErrorCode.METHOD_NOT_FOUND, "Method not found"
            )
        return await handler(message)

    # =========================================================================
    # Method Handlers
    # =========================================================================

    async def _handle_initialize(self, message: RpcMessage) -> RpcResponse:
        return RpcResponse.success(
            message.id,
            {
                "protocolVersion": PROTOCOL_VERSION,
                "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
                "capabilities": {
                    "tools": {"list": True, "call": True},
                    "prompts": {"list": True},
                    "resources": {"list": True},
                },
            },
        )

    async def _handle_ack(self, message: RpcMessage) -> RpcResponse:
        return RpcResponse.success(message.id, {"ok": True})

    async def _handle_resources_list(self, message: RpcMessage) -> RpcResponse:
        return RpcResponse.success(message.id, {"resources": []})

    async def _handle_prompts_list(self, message: RpcMessage) -> RpcResponse:
        return RpcResponse.success(message.id, {"prompts": []})

    async def _handle_tools_list(self, message: RpcMessage) -> RpcResponse:
        return RpcResponse.success(message.id, {"tools": self.registry.list_tools()})

    async def _handle_tools_call(self, message: RpcMessage) -> RpcResponse:
        params: dict[str, Any] = message.params if isinstance(message.params, dict) else {}
        name = params.get("name")

        if self.registry.get(name) is None:
            return RpcResponse.fault(message.id, JsonRpcErrorCode.METHOD_NOT_FOUND, "Unknown tool")

        args = ToolInvocationArgs.from_arguments(params.get("arguments"))
        logger.debug(f"tools/call {name}: query={args.query!r} traditions={args.traditions!r}")

        result = await self.backend.invoke(args)
        return RpcResponse.success(message.id, result.model_dump(mode="json"))
