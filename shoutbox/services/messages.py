"""
Message Store Service.
Validates candidates, persists them and hands new records to the push channel.
"""

import logging
from typing import Any, List

from shoutbox.core.message import Message, MessageCreate
from shoutbox.services.storage import StorageService
from shoutbox.services.websocket import ConnectionManager

logger = logging.getLogger(__name__)


class MessageService:
    """List and Append over the message collection."""

    def __init__(self, storage: StorageService, publisher: ConnectionManager):
        self.storage = storage
        self.publisher = publisher

    def list_messages(self) -> List[Message]:
        """Full history, oldest first."""
        return self.storage.get_all_messages()

    async def append_message(self, payload: Any) -> Message:
        """
        Validates and stores a new message.
        Raises ValidationError before touching storage when the payload is rejected.
        """
        candidate = MessageCreate.from_payload(payload)

        message = self.storage.add_message(candidate)
        logger.info("Stored message %d from %s", message.id, message.username)

        await self.publisher.publish(message)

        return message
