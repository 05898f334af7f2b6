"""JSON-RPC message codec.

Decoding is purely structural: the envelope must be a JSON object with a
non-empty ``method``. Anything else raises ``DecodeError`` and the caller
drops the message without replying, since no correlation id is known yet.

``InvalidMessageError`` narrows that down to input that parsed as JSON but
is not a usable message, for transports that acknowledge such input.
"""

from __future__ import annotations

import json
from typing import Any

from .types import NO_ID, RpcMessage, RpcResponse


class DecodeError(ValueError):
    """Raised when inbound data is not a usable JSON-RPC message."""


class InvalidMessageError(DecodeError):
    """Raised when inbound data is valid JSON but not a JSON-RPC message."""


def _is_blank(method: Any) -> bool:
    # null, false, 0 and "" carry no method name; any other value is a
    # (possibly unknown) method
    return method is None or method is False or method == "" or method == 0


def parse(data: bytes | str) -> Any:
    """Parse raw inbound data as UTF-8 JSON.

    Raises:
        DecodeError: If the data is not UTF-8 or not JSON.
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Invalid UTF-8: {e}") from e

    try:
        return json.loads(data)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Parse error: {e}") from e


def decode(data: bytes | str) -> RpcMessage:
    """Decode one inbound message.

    Raises:
        DecodeError: If the data is not UTF-8 JSON.
        InvalidMessageError: If the JSON is not an object or has no method.
    """
    parsed = parse(data)

    if not isinstance(parsed, dict):
        raise InvalidMessageError(f"Expected a JSON object, got {type(parsed).__name__}")

    method = parsed.get("method")
    if _is_blank(method):
        raise InvalidMessageError("Missing 'method' field")

    return RpcMessage(id=parsed.get("id", NO_ID), method=method, params=parsed.get("params"))


def encode(response: RpcResponse) -> bytes:
    """Encode a response as UTF-8 JSON."""
    return encode_text(response).encode("utf-8")


def encode_text(response: RpcResponse) -> str:
    """Encode a response as a JSON string (for text frames and SSE data)."""
    return json.dumps(response.to_wire(), ensure_ascii=False)
