"""Profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile, ProfileFilters, UserRole


class IProfileRepository(Protocol):
    """Repository interface for Profile entities."""

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by user ID."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        ...

    async def find(
        self, filters: ProfileFilters, limit: int = 20, offset: int = 0
    ) -> list[Profile]:
        """List profiles matching filters, newest first."""
        ...

    async def count(self, filters: ProfileFilters) -> int:
        """Count profiles matching filters."""
        ...

    async def set_role(self, id: UUID, role: UserRole) -> None:
        """Overwrite the stored role."""
        ...

    async def set_active(self, id: UUID, is_active: bool) -> Profile | None:
        """Activate or deactivate an account. None if it does not exist."""
        ...

    async def increment_submission_counters(
        self, id: UUID, total: int = 0, approved: int = 0
    ) -> None:
        """Atomically add to the creator's submission counters."""
        ...
