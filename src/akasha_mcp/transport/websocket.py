"""WebSocket (full-duplex) channel.

Each text or binary frame carries one JSON-RPC message; responses go back
as text frames on the same connection.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from starlette.websockets import WebSocket, WebSocketDisconnect, WebSocketState

from ..protocol.codec import encode_text
from ..protocol.types import RpcResponse
from .base import Channel, ChannelClosedError

logger = logging.getLogger(__name__)

PREFERRED_SUBPROTOCOL = "mcp"


def select_subprotocol(offered: Sequence[str]) -> str | None:
    """Pick ``mcp`` when the client offers it, else the first offer."""
    if PREFERRED_SUBPROTOCOL in offered:
        return PREFERRED_SUBPROTOCOL
    return offered[0] if offered else None


class DuplexChannel(Channel):
    """Channel over one live WebSocket connection."""

    name = "ws"

    def __init__(self, websocket: WebSocket) -> None:
        self._websocket = websocket
        self._send_lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        """Check if both sides of the WebSocket are still open."""
        return (
            self._websocket.client_state == WebSocketState.CONNECTED
            and self._websocket.application_state == WebSocketState.CONNECTED
        )

    async def deliver(self, response: RpcResponse) -> None:
        """Send a response as one text frame."""
        async with self._send_lock:
            if not self.is_connected:
                raise ChannelClosedError("WebSocket is closed")
            try:
                await self._websocket.send_text(encode_text(response))
            except (WebSocketDisconnect, RuntimeError, OSError) as e:
                raise ChannelClosedError(f"WebSocket send failed: {e}") from e
