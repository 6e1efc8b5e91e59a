"""Membership repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.agency import Membership, MembershipStatus


class IMembershipRepository(Protocol):
    """Repository interface for Membership entities."""

    async def get_for_user(self, user_id: UUID) -> Membership | None:
        """Get the single membership of a user, if any."""
        ...

    async def get_for_agency(self, agency_id: UUID) -> list[Membership]:
        """Get all memberships of an agency, newest first."""
        ...

    async def get_member_ids(self, agency_id: UUID) -> list[UUID]:
        """Get the user IDs of every member of an agency."""
        ...

    async def add(self, membership: Membership) -> Membership:
        """Add a membership."""
        ...

    async def update_status(self, user_id: UUID, status: MembershipStatus) -> Membership:
        """Update the status of a user's membership."""
        ...

    async def delete(self, user_id: UUID) -> bool:
        """Delete a user's membership."""
        ...
