"""Invite repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.invite import Invite


class IInviteRepository(Protocol):
    """Repository interface for Invite entities."""

    async def create(self, invite: Invite) -> Invite:
        """Create a new invite."""
        ...

    async def get_by_id(self, id: UUID) -> Invite | None:
        """Get an invite by its primary key."""
        ...

    async def get_active_by_code(self, invite_code: str) -> Invite | None:
        """Get the active invite carrying an (uppercase) code."""
        ...

    async def get_active_for_agency(self, agency_id: UUID) -> list[Invite]:
        """Get active invites for an agency, newest first."""
        ...

    async def deactivate(self, id: UUID) -> bool:
        """Flip an active invite to inactive. False if it already was."""
        ...

    async def claim_use(self, id: UUID) -> bool:
        """Consume one use if the invite is active and not exhausted.

        Returns False when no use could be claimed.
        """
        ...
