"""
API Routes definition.
Handles message listing/appending, the token-guarded user route and the push WebSocket.
"""

import logging
import secrets
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, WebSocket, WebSocketDisconnect, status
from pydantic import BaseModel

from shoutbox.api.dependencies import get_current_user, get_message_service
from shoutbox.config.settings import settings
from shoutbox.core.auth_models import User
from shoutbox.core.message import Message
from shoutbox.services.messages import MessageService
from shoutbox.services.websocket import manager

logger = logging.getLogger(__name__)

router = APIRouter()


class MessageListResponse(BaseModel):
    """Envelope returned by List."""

    success: bool = True
    data: List[Message]


class MessageResponse(BaseModel):
    """Envelope returned by Append."""

    success: bool = True
    data: Message


# === PUBLIC ROUTES ===


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """Returns the server status"""
    return {"status": "online"}


@router.get("/messages", response_model=MessageListResponse)
def get_messages(service: MessageService = Depends(get_message_service)) -> MessageListResponse:
    """
    Retrieves the whole message history, oldest first.
    """
    return MessageListResponse(data=service.list_messages())


@router.post("/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: Any = Body(default=None),
    service: MessageService = Depends(get_message_service),
) -> MessageResponse:
    """
    Stores a new message.
    Rejected payloads surface as 422 through the ValidationError handler.
    """
    message = await service.append_message(payload)
    return MessageResponse(data=message)


# === Protected routes ===


@router.get("/user", response_model=User)
async def get_user(current_user: User = Depends(get_current_user)) -> User:
    """Returns the user owning the bearer token"""
    return current_user


# === WebSocket Route ===


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, key: Optional[str] = None) -> None:
    """
    Real-time push endpoint.
    Every stored message is forwarded to the socket as JSON.
    """
    expected = settings.realtime_app_key
    if expected and not (key and secrets.compare_digest(expected, key)):
        logger.warning("Rejected WS connection with invalid app key")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await manager.connect(websocket)
    try:
        while True:
            # Clients only listen; reading keeps the disconnect observable.
            await websocket.receive_text()
    except WebSocketDisconnect:
        manager.disconnect(websocket)
