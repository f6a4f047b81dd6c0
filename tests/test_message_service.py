"""
Unit tests for the MessageService.
Storage and publisher are mocked to check ordering of validation, persistence and publishing.
"""

# pylint: disable=redefined-outer-name

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from shoutbox.core.message import Message, ValidationError
from shoutbox.services.messages import MessageService


@pytest.fixture
def stored_message():
    now = datetime.now(timezone.utc)
    return Message(id=1, username="alice", content="hi", created_at=now, updated_at=now)


@pytest.fixture
def service(stored_message):
    storage = MagicMock()
    storage.add_message.return_value = stored_message
    storage.get_all_messages.return_value = [stored_message]

    publisher = MagicMock()
    publisher.publish = AsyncMock()

    return MessageService(storage=storage, publisher=publisher)


@pytest.mark.asyncio
async def test_append_persists_then_publishes(service, stored_message):
    """A valid payload is stored and the stored record is published."""
    result = await service.append_message({"username": "alice", "content": "hi"})

    assert result == stored_message
    candidate = service.storage.add_message.call_args[0][0]
    assert candidate.username == "alice"
    service.publisher.publish.assert_awaited_once_with(stored_message)


@pytest.mark.asyncio
async def test_rejected_payload_never_reaches_storage(service):
    """Validation runs before any persistence attempt."""
    with pytest.raises(ValidationError) as exc_info:
        await service.append_message({"username": "", "content": "hi"})

    assert list(exc_info.value.errors) == ["username"]
    service.storage.add_message.assert_not_called()
    service.publisher.publish.assert_not_called()


def test_list_messages(service, stored_message):
    """List is a straight read of storage."""
    assert service.list_messages() == [stored_message]
