"""Transport layer.

Two ways to reach the protocol engine:
- WebSocket - full-duplex, one connection per client
- SSE - POST to send, a session-keyed event stream to receive

Both deliver responses through the ``Channel`` interface so the engine
stays transport-agnostic.
"""

from .base import Channel, ChannelClosedError, process_message, serve_message
from .sse import (
    DEFAULT_KEEPALIVE_INTERVAL,
    KEEPALIVE_FRAME,
    OPEN_FRAME,
    StreamChannel,
    format_event,
    session_event_stream,
)
from .websocket import DuplexChannel, select_subprotocol

__all__ = [
    # Base abstractions
    "Channel",
    "ChannelClosedError",
    "process_message",
    "serve_message",
    # SSE implementation
    "StreamChannel",
    "session_event_stream",
    "format_event",
    "DEFAULT_KEEPALIVE_INTERVAL",
    "KEEPALIVE_FRAME",
    "OPEN_FRAME",
    # WebSocket implementation
    "DuplexChannel",
    "select_subprotocol",
]
