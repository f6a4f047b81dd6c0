"""Authentication models for the token-guarded user route"""

from uuid import UUID

from pydantic import BaseModel


class User(BaseModel):
    """Represents a user"""

    id: UUID
    username: str
    is_authenticated: bool = False
