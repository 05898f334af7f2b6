"""Server-Sent Events (SSE) channel.

The stream half of the POST/stream pair. ``GET /sse?cid=...`` opens a
session and streams frames; ``POST /sse?cid=...`` delivers its response
onto that stream through a ``StreamChannel``.

Frames:
- ``event: open``    sent once when the stream starts
- ``: ka``           keep-alive comment on every idle interval
- ``event: message`` one per delivered JSON-RPC response
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator

from starlette.requests import Request

from ..protocol.codec import encode_text
from ..protocol.types import RpcResponse
from ..session import SessionDirectory
from .base import Channel, ChannelClosedError

logger = logging.getLogger(__name__)

# Well under the 60s idle timeout common to proxies and load balancers
DEFAULT_KEEPALIVE_INTERVAL = 15.0

KEEPALIVE_FRAME = ": ka\n\n"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}


def format_event(event: str, data: str) -> str:
    """Format one SSE event frame."""
    return f"event: {event}\ndata: {data}\n\n"


OPEN_FRAME = format_event("open", json.dumps({"ok": True}, separators=(",", ":")))


class StreamChannel(Channel):
    """Channel that writes onto a session's push stream.

    The session is resolved at delivery time, so a stream that closed while
    the request was in flight makes delivery fail rather than write into a
    dead queue.
    """

    name = "sse"

    def __init__(self, directory: SessionDirectory, session_id: str) -> None:
        self._directory = directory
        self.session_id = session_id

    async def deliver(self, response: RpcResponse) -> None:
        session = self._directory.get(self.session_id)
        if session is None:
            raise ChannelClosedError(f"No open stream for session {self.session_id}")
        if not session.push(format_event("message", encode_text(response))):
            raise ChannelClosedError(f"Stream for session {self.session_id} is closed")


async def session_event_stream(
    directory: SessionDirectory,
    session_id: str,
    keepalive_interval: float = DEFAULT_KEEPALIVE_INTERVAL,
    request: Request | None = None,
) -> AsyncIterator[str]:
    """Open a session and yield its SSE frames until the stream ends.

    The session is registered on first iteration and removed when the
    generator finishes for any reason (client disconnect, cancellation,
    eviction by a newer session with the same id).
    """
    session = directory.open(session_id)
    logger.info(f"SSE open cid: {session_id}")

    try:
        yield OPEN_FRAME

        while True:
            try:
                frame = await session.next_frame(timeout=keepalive_interval)
            except TimeoutError:
                if request is not None and await request.is_disconnected():
                    break
                yield KEEPALIVE_FRAME
                continue

            if frame is None:
                break  # Session closed

            yield frame

    finally:
        directory.close(session)
        logger.info(f"SSE closed cid: {session_id}")
