"""SSE endpoints: the POST/stream transport pair.

- GET /sse?cid=<id>  - open the push stream for session <id>
- POST /sse?cid=<id> - send one JSON-RPC message; acknowledged with
  {"ok": true}, the response arrives on the paired stream
"""

from __future__ import annotations

import logging

from starlette.background import BackgroundTask
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse
from starlette.routing import Route

from ..protocol.codec import DecodeError, InvalidMessageError, decode
from ..transport.base import process_message
from ..transport.sse import SSE_HEADERS, StreamChannel, session_event_stream

logger = logging.getLogger(__name__)


async def sse_stream(request: Request) -> Response:
    """Open a session-keyed event stream (server -> client)."""
    cid = request.query_params.get("cid", "")
    if not cid:
        return PlainTextResponse("cid required", status_code=400)

    state = request.app.state
    return StreamingResponse(
        session_event_stream(
            state.directory,
            cid,
            keepalive_interval=state.config.keepalive_interval,
            request=request,
        ),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


async def sse_send(request: Request) -> Response:
    """Accept one JSON-RPC message for an open session (client -> server).

    Processing runs after the acknowledgement is sent. Valid JSON that is
    not a usable message is acknowledged and dropped; only unparseable
    bodies are refused.
    """
    state = request.app.state
    cid = request.query_params.get("cid", "")
    if not cid or cid not in state.directory:
        return PlainTextResponse("invalid cid", status_code=400)

    body = await request.body()
    try:
        message = decode(body)
    except InvalidMessageError as e:
        logger.debug(f"SSE {cid}: dropping message: {e}")
        return JSONResponse({"ok": True})
    except DecodeError as e:
        logger.debug(f"SSE {cid}: rejecting undecodable message: {e}")
        return PlainTextResponse("bad json", status_code=400)

    channel = StreamChannel(state.directory, cid)
    return JSONResponse(
        {"ok": True},
        background=BackgroundTask(process_message, state.engine, channel, message),
    )


sse_routes = [
    Route("/sse", sse_stream, methods=["GET"]),
    Route("/sse", sse_send, methods=["POST"]),
]
