"""WebSocket endpoint for full-duplex MCP.

URL: /mcp

Each inbound frame is handled in its own task, so concurrent tool calls on
one connection complete in whatever order the backend answers them.
"""

from __future__ import annotations

import asyncio
import logging

from starlette.routing import WebSocketRoute
from starlette.websockets import WebSocket, WebSocketDisconnect

from ..transport.base import serve_message
from ..transport.websocket import DuplexChannel, select_subprotocol

logger = logging.getLogger(__name__)


async def mcp_websocket_endpoint(websocket: WebSocket) -> None:
    """Accept a connection and serve JSON-RPC frames until it closes.

    In-flight calls are not cancelled on disconnect; they finish and their
    delivery fails quietly.
    """
    engine = websocket.app.state.engine

    subprotocol = select_subprotocol(websocket.scope.get("subprotocols", []))
    await websocket.accept(subprotocol=subprotocol)
    logger.info(
        f"WS connected. protocol: {subprotocol or '(none)'} "
        f"ua: {websocket.headers.get('user-agent')}"
    )

    channel = DuplexChannel(websocket)
    pending: set[asyncio.Task] = set()

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break

            data = message.get("text")
            if data is None:
                data = message.get("bytes")
            if data is None:
                continue

            task = asyncio.create_task(serve_message(engine, channel, data))
            pending.add(task)
            task.add_done_callback(pending.discard)

    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.exception(f"WebSocket error: {e}")
    finally:
        logger.info(f"WS disconnected ({len(pending)} call(s) in flight)")
        if pending:
            await asyncio.gather(*pending)


websocket_routes = [
    WebSocketRoute("/mcp", mcp_websocket_endpoint),
]
