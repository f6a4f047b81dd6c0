"""Authentication Provider, resolves bearer tokens to users."""

import logging
import secrets
import uuid
from abc import ABC, abstractmethod
from typing import Dict, Optional

from shoutbox.config.settings import settings
from shoutbox.core.auth_models import User

logger = logging.getLogger(__name__)


class IAuthProvider(ABC):
    """
    Abstract interface for the authentication provider.
    """

    @abstractmethod
    async def authenticate(self, token: str) -> Optional[User]:
        """
        Verifies a bearer token and returns the User it belongs to,
        otherwise None.
        """
        pass


class TokenAuthProvider(IAuthProvider):
    """
    Static token table read from settings.
    Each token maps to exactly one username.
    """

    def __init__(self, tokens: Dict[str, str]):
        self._tokens = dict(tokens)

    async def authenticate(self, token: str) -> Optional[User]:
        if not token.strip():
            logger.warning("Authentication attempt with empty token")
            return None

        for known_token, username in self._tokens.items():
            if secrets.compare_digest(known_token, token):
                user_uuid = uuid.uuid5(uuid.NAMESPACE_DNS, username)
                return User(id=user_uuid, username=username, is_authenticated=True)

        logger.warning("Authentication attempt with unknown token")
        return None


# Create a singleton for Auth provider
current_auth_provider: IAuthProvider = TokenAuthProvider(settings.auth_tokens)
