"""Channel abstraction.

A channel delivers responses back to whoever sent the request. The engine
never sees which transport a message came from; the transports only differ
in how they build a channel and how they notice it closing.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ..protocol.codec import DecodeError, decode
from ..protocol.engine import ProtocolEngine
from ..protocol.types import RpcMessage, RpcResponse

logger = logging.getLogger(__name__)


class ChannelClosedError(ConnectionError):
    """Raised when delivering to a channel whose sink is gone."""


class Channel(ABC):
    """Delivery sink for one caller."""

    name: str = "channel"

    @abstractmethod
    async def deliver(self, response: RpcResponse) -> None:
        """Send one response.

        Raises:
            ChannelClosedError: If the underlying connection is closed.
        """


async def process_message(
    engine: ProtocolEngine, channel: Channel, message: RpcMessage
) -> RpcResponse | None:
    """Handle a decoded message and deliver its response.

    Undeliverable responses are logged and dropped; nothing is retried or
    buffered.
    """
    logger.debug(f"{channel.name} <- {message.method}")

    try:
        response = await engine.handle(message)
    except Exception as e:
        logger.exception(f"Error handling {message.method}: {e}")
        return None

    try:
        await channel.deliver(response)
    except ChannelClosedError as e:
        logger.warning(f"{channel.name}: dropping response to {message.method}: {e}")
        return response

    logger.debug(f"{channel.name} -> {'error' if response.is_fault else 'ok'} ({message.method})")
    return response


async def serve_message(
    engine: ProtocolEngine, channel: Channel, data: bytes | str
) -> RpcResponse | None:
    """Decode, handle and deliver one raw inbound message.

    Undecodable input is dropped without any reply.
    """
    try:
        message = decode(data)
    except DecodeError as e:
        logger.debug(f"{channel.name}: dropping undecodable message: {e}")
        return None

    return await process_message(engine, channel, message)
