"""
Push channel subscriber.
Receives newly stored messages over a WebSocket, reconnecting on loss.
"""

import asyncio
import logging
from typing import AsyncIterator

import websockets
from pydantic import ValidationError as PydanticValidationError

from shoutbox.core.message import Message

logger = logging.getLogger(__name__)


# pylint: disable=too-few-public-methods
class PushChannel:
    """Yields messages delivered on the push channel until cancelled."""

    def __init__(self, url: str, reconnect_delay: float = 5.0):
        self.url = url
        self.reconnect_delay = reconnect_delay

    async def messages(self) -> AsyncIterator[Message]:
        while True:
            try:
                async with websockets.connect(self.url) as websocket:
                    logger.info("Push channel connected")
                    async for raw in websocket:
                        try:
                            yield Message.model_validate_json(raw)
                        except PydanticValidationError as e:
                            logger.error("Could not parse pushed message: %s", e)
            except (websockets.WebSocketException, OSError) as e:
                logger.warning("Push channel disconnected: %s", e)

            await asyncio.sleep(self.reconnect_delay)
