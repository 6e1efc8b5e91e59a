"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class UserRole(StrEnum):
    """Account type asserted by the identity provider."""

    CREATOR = "creator"
    ADMIN = "admin"


@dataclass
class Profile:
    """Domain entity for a user profile (synced from the identity provider).

    Carries the creator counters; the approval rate is
    ``approved_submissions / total_submissions``.
    """

    id: UUID = field(default_factory=uuid4)
    email: str = ""
    username: str = ""
    role: UserRole = UserRole.CREATOR
    is_active: bool = True
    total_submissions: int = 0
    approved_submissions: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @property
    def approval_rate(self) -> float:
        if not self.total_submissions:
            return 0.0
        return self.approved_submissions / self.total_submissions


@dataclass
class ProfileFilters:
    """Optional filters for listing profiles."""

    role: UserRole | None = None
    is_active: bool | None = None
    search_term: str | None = None
