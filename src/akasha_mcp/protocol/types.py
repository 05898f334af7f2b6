"""Protocol type definitions.

JSON-RPC 2.0 envelope types plus the MCP tool result shapes the gateway
returns from ``tools/call``.

Note: Field names use camelCase where they appear on the wire
(``isError``, ``protocolVersion``). Do not change to snake_case.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

# Protocol version advertised in the initialize handshake
PROTOCOL_VERSION = "2024-05-14"

SERVER_NAME = "akasha-mcp"
SERVER_VERSION = "0.1.0"


# =============================================================================
# JSON-RPC 2.0 Base Types
# =============================================================================


class JsonRpcErrorCode:
    """Standard JSON-RPC 2.0 error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class _NoId:
    """Marker for a message that carried no ``id`` member at all.

    Distinct from ``None``: an explicit ``"id": null`` is echoed back.
    """

    _instance: _NoId | None = None

    def __new__(cls) -> _NoId:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_ID"

    def __copy__(self) -> _NoId:
        return self

    def __deepcopy__(self, memo: dict) -> _NoId:
        return self


NO_ID: Any = _NoId()


class RpcMessage(BaseModel):
    """Inbound JSON-RPC message (request or notification).

    The id is an opaque correlation token; ``NO_ID`` means the sender
    did not supply one. ``method`` is whatever JSON value the sender put
    there; only string names can match a handler.
    """

    model_config = ConfigDict(frozen=True)

    id: Any = NO_ID
    method: Any
    params: Any = None

    @property
    def is_notification(self) -> bool:
        return self.id is NO_ID


class RpcError(BaseModel):
    """JSON-RPC 2.0 error object (a protocol-level fault)."""

    code: int
    message: str
    data: Any | None = None


class RpcResponse(BaseModel):
    """JSON-RPC 2.0 response.

    Exactly one of ``result`` and ``error`` is meaningful. ``id`` echoes the
    originating message and is left off the wire when that message had none.
    """

    id: Any = NO_ID
    result: Any = None
    error: RpcError | None = None

    @classmethod
    def success(cls, request_id: Any, result: Any) -> RpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def fault(cls, request_id: Any, code: int, message: str) -> RpcResponse:
        return cls(id=request_id, error=RpcError(code=code, message=message))

    @property
    def is_fault(self) -> bool:
        return self.error is not None

    def to_wire(self) -> dict[str, Any]:
        """Build the JSON-RPC envelope as a plain dict."""
        data: dict[str, Any] = {"jsonrpc": "2.0"}
        if self.id is not NO_ID:
            data["id"] = self.id
        if self.error is not None:
            data["error"] = self.error.model_dump(exclude_none=True)
        else:
            data["result"] = self.result
        return data


# =============================================================================
# Tool Result Types
# =============================================================================


class JsonContent(BaseModel):
    """Structured JSON content part."""

    type: Literal["json"] = "json"
    data: Any


class TextContent(BaseModel):
    """Plain text content part."""

    type: Literal["text"] = "text"
    text: str


ContentPart = Annotated[Union[JsonContent, TextContent], Field(discriminator="type")]


class ToolResult(BaseModel):
    """Outcome of a tool invocation.

    Always a successful protocol response; ``isError`` flags execution
    failures (backend down, non-2xx status, malformed payload).
    """

    content: list[ContentPart] = Field(default_factory=list)
    isError: bool = False

    @classmethod
    def from_json(cls, data: Any) -> ToolResult:
        return cls(content=[JsonContent(data=data)], isError=False)

    @classmethod
    def from_error(cls, text: str) -> ToolResult:
        return cls(content=[TextContent(text=text)], isError=True)


class ToolInvocationArgs(BaseModel):
    """Arguments for the search tool.

    Values pass through to the backend unchanged; only defaults are filled.
    """

    query: Any = None
    traditions: Any = None
    topK: Any = 6
    lang: Any = None

    @classmethod
    def from_arguments(cls, arguments: Any) -> ToolInvocationArgs:
        """Extract arguments from ``tools/call`` params, filling defaults."""
        if not isinstance(arguments, dict):
            arguments = {}
        top_k = arguments.get("topK")
        return cls(
            query=arguments.get("query"),
            traditions=arguments.get("traditions"),
            topK=6 if top_k is None else top_k,
            lang=arguments.get("lang"),
        )

    def to_request_body(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "traditions": self.traditions,
            "topK": self.topK,
            "lang": self.lang,
        }
