"""MCP JSON-RPC protocol layer.

Transport-agnostic pieces: envelope types, the codec and the engine that
turns one inbound message into one response.
"""

from .codec import DecodeError, InvalidMessageError, decode, encode, encode_text, parse
from .engine import TOOL_LIST_METHODS, ProtocolEngine
from .types import (
    NO_ID,
    PROTOCOL_VERSION,
    SERVER_NAME,
    SERVER_VERSION,
    ContentPart,
    JsonContent,
    JsonRpcErrorCode,
    RpcError,
    RpcMessage,
    RpcResponse,
    TextContent,
    ToolInvocationArgs,
    ToolResult,
)

__all__ = [
    # Codec
    "DecodeError",
    "InvalidMessageError",
    "decode",
    "parse",
    "encode",
    "encode_text",
    # Engine
    "ProtocolEngine",
    "TOOL_LIST_METHODS",
    # Constants
    "NO_ID",
    "PROTOCOL_VERSION",
    "SERVER_NAME",
    "SERVER_VERSION",
    # Envelope types
    "JsonRpcErrorCode",
    "RpcMessage",
    "RpcResponse",
    "RpcError",
    # Tool results
    "ContentPart",
    "JsonContent",
    "TextContent",
    "ToolInvocationArgs",
    "ToolResult",
]
