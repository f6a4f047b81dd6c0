"""
FastAPI dependencies for storage access and request auth.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shoutbox.config.settings import settings
from shoutbox.core.auth_models import User
from shoutbox.services.auth import current_auth_provider
from shoutbox.services.messages import MessageService
from shoutbox.services.storage import StorageService
from shoutbox.services.websocket import manager

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_storage() -> StorageService:
    """Process-wide storage bound to the configured database file."""
    return StorageService(settings.db_name)


def get_message_service(storage: StorageService = Depends(get_storage)) -> MessageService:
    return MessageService(storage=storage, publisher=manager)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    """
    Dependency that resolves the bearer token to a user.
    Rejects missing or unknown tokens with 401.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await current_auth_provider.authenticate(credentials.credentials)
    if not user or not user.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user
