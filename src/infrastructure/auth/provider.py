"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID

from domain.entities.profile import UserRole


@dataclass
class TokenUser:
    """The authenticated principal carried by a bearer token."""

    id: UUID
    email: str = ""
    username: Optional[str] = None
    role: UserRole = UserRole.CREATOR


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Return the principal for a valid token, None otherwise."""
        ...

    def create_token(self, user: TokenUser) -> str:
        """Issue a token for a principal (local and test use only)."""
        ...
