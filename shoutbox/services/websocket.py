"""
WebSocket Connection Manager with Redis Pub/Sub.
Fans out newly created messages to every connected client across server processes.
"""

import asyncio
import logging
from typing import List, Optional

import redis.asyncio as redis
from fastapi import WebSocket
from pydantic import ValidationError as PydanticValidationError

from shoutbox.config.settings import settings
from shoutbox.core.message import Message

logger = logging.getLogger(__name__)

CHANNEL = "shoutbox:messages"

redis_client = redis.from_url(settings.redis_url, decode_responses=True)  # type: ignore[no-untyped-call]


class ConnectionManager:
    def __init__(self) -> None:
        self.active_connections: List[WebSocket] = []
        self.pubsub_task: Optional[asyncio.Task[None]] = None

    async def connect(self, websocket: WebSocket) -> None:
        """
        Accepts a new WebSocket connection.
        """
        await websocket.accept()
        await self._subscribe_to_redis()

        self.active_connections.append(websocket)
        logger.info("WS Connected. Total: %d", len(self.active_connections))

    def disconnect(self, websocket: WebSocket) -> None:
        """
        Removes a WebSocket connection
        """
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

        # Nobody left to notify on this process.
        if not self.active_connections:
            self._unsubscribe_from_redis()

    async def publish(self, message: Message) -> None:
        """
        Publishes a message to the Redis channel.
        This allows every server process to broadcast it to its clients.
        A failing transport never fails the caller, clients still poll.
        """
        try:
            await redis_client.publish(CHANNEL, message.model_dump_json())
        except (redis.RedisError, OSError) as e:
            logger.warning("Push channel unavailable, message %s not published: %s", message.id, e)

    async def broadcast_to_local(self, message: Message) -> None:
        """
        Sends a message to local clients.
        Called when a message is received from Redis.
        """
        payload = message.model_dump(mode="json")

        for connection in self.active_connections[:]:
            try:
                await connection.send_json(payload)
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.warning("Error sending to WS: %s", e)

    async def _subscribe_to_redis(self) -> None:
        """
        Starts a background task to listen to Redis messages.
        A listener that already died (e.g. Redis was down) is replaced.
        """
        if self.pubsub_task is not None and not self.pubsub_task.done():
            return

        async def listener() -> None:
            pubsub = redis_client.pubsub()

            try:
                await pubsub.subscribe(CHANNEL)
                logger.info("Subscribed to Redis channel: %s", CHANNEL)

                async for event in pubsub.listen():
                    if event["type"] != "message":
                        continue

                    try:
                        msg_obj = Message.model_validate_json(event["data"])
                    except PydanticValidationError as e:
                        logger.error("Could not parse Redis message: %s", e)
                        continue

                    await self.broadcast_to_local(msg_obj)

            except asyncio.CancelledError:
                await pubsub.unsubscribe(CHANNEL)
                logger.info("Unsubscribed from %s", CHANNEL)
            except (redis.RedisError, OSError) as e:
                logger.error("Redis listener error: %s", e)

        self.pubsub_task = asyncio.create_task(listener())

    def _unsubscribe_from_redis(self) -> None:
        """
        Cancels the Redis listener task
        """
        if self.pubsub_task is not None:
            self.pubsub_task.cancel()
            self.pubsub_task = None

    async def shutdown(self) -> None:
        """Stops the listener and closes the Redis connection pool."""
        self._unsubscribe_from_redis()
        self.active_connections.clear()
        await redis_client.aclose()


# Singleton instance
manager = ConnectionManager()
