"""Agency repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.agency import Agency


class IAgencyRepository(Protocol):
    """Repository interface for Agency entities."""

    async def get(self, id: UUID) -> Agency | None:
        """Get an agency by ID."""
        ...

    async def get_by_name(self, name: str) -> Agency | None:
        """Get an agency by its normalized name."""
        ...

    async def list_public(self) -> list[Agency]:
        """Get all agencies that allow joining without an invite."""
        ...

    async def create(self, agency: Agency) -> Agency:
        """Create a new agency."""
        ...

    async def update(self, agency: Agency) -> Agency:
        """Update an agency's descriptive fields and settings."""
        ...

    async def increment_member_count(self, id: UUID, delta: int = 1) -> None:
        """Atomically add ``delta`` to the member counter."""
        ...

    async def increment_active_invites(self, id: UUID, delta: int = 1) -> None:
        """Atomically add ``delta`` to the active-invite counter."""
        ...
