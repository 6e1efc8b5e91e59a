"""Agency domain entities."""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum, StrEnum
from typing import Any
from uuid import UUID, uuid4


class AgencyRole(IntEnum):
    """Agency role hierarchy. Higher value = more permissions.

    Use >= comparison for permission checks:
        member_role >= AgencyRole.ADMIN  # True if Admin or Owner
    """

    CREATOR = 10
    ADMIN = 30
    OWNER = 40


def has_permission(user_role: AgencyRole, required_role: AgencyRole) -> bool:
    """Check if a member role meets the required permission level."""
    return user_role >= required_role


class MembershipStatus(StrEnum):
    """Status of an agency membership."""

    PENDING = "pending"
    ACTIVE = "active"


def normalize_agency_name(name: str) -> str:
    """Reduce a name to the lowercase alphanumeric slug used as agency name."""
    return re.sub(r"[^a-z0-9]", "", name.lower())


@dataclass
class AgencySettings:
    """Join policy of an agency.

    ``allow_public_join`` and ``require_approval`` are independent: a public
    agency may still hold new members as pending until an admin approves them.
    """

    allow_public_join: bool = False
    require_approval: bool = True
    max_creators: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "allow_public_join": self.allow_public_join,
            "require_approval": self.require_approval,
            "max_creators": self.max_creators,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "AgencySettings":
        data = data or {}
        return cls(
            allow_public_join=bool(data.get("allow_public_join", False)),
            require_approval=bool(data.get("require_approval", True)),
            max_creators=data.get("max_creators"),
        )


@dataclass
class Agency:
    """Domain entity for an Agency (a.k.a. corporation)."""

    name: str
    display_name: str
    owner_id: UUID
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    industry: str | None = None
    social_media: dict[str, str] = field(default_factory=dict)
    settings: AgencySettings = field(default_factory=AgencySettings)
    member_count: int = 0
    active_invites: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match over the listing fields."""
        needle = term.strip().lower()
        if not needle:
            return True
        haystack = (self.display_name, self.name, self.industry, self.description)
        return any(needle in value.lower() for value in haystack if value)

    @property
    def initial_member_status(self) -> MembershipStatus:
        """Status given to a member joining this agency."""
        if self.settings.require_approval:
            return MembershipStatus.PENDING
        return MembershipStatus.ACTIVE


@dataclass
class Membership:
    """Domain entity binding a user to an agency.

    A user holds at most one membership across all agencies.
    """

    user_id: UUID
    agency_id: UUID
    role: AgencyRole = AgencyRole.CREATOR
    status: MembershipStatus = MembershipStatus.ACTIVE
    id: UUID = field(default_factory=uuid4)
    joined_at: datetime = field(default_factory=datetime.utcnow)
    invited_by: UUID | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == MembershipStatus.PENDING


@dataclass
class AgencyStats:
    """Membership and invite counts shown on an agency dashboard."""

    total_members: int = 0
    active_members: int = 0
    pending_members: int = 0
    active_invites: int = 0
