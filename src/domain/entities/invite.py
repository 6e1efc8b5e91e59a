"""Invite domain entity."""

import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import UUID, uuid4

from domain.entities.agency import AgencyRole

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits
INVITE_CODE_LENGTH = 8

# Default invite expiry: 30 days
INVITE_EXPIRY_DAYS = 30

# Roles an invite may grant on redemption
INVITABLE_ROLES = (AgencyRole.CREATOR, AgencyRole.ADMIN)


def generate_invite_code(length: int = INVITE_CODE_LENGTH) -> str:
    """Draw a code of independent uniform characters from ``[A-Z0-9]``.

    No uniqueness check is made against existing codes; 36**8 possible codes
    keeps collisions negligible at agency scale.
    """
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))


def normalize_invite_code(code: str) -> str:
    """Codes are matched case-insensitively and stored uppercase."""
    return code.strip().upper()


@dataclass
class Invite:
    """Domain entity for an agency invite code."""

    agency_id: UUID
    invite_code: str
    created_by: UUID
    id: UUID = field(default_factory=uuid4)
    invite_link: str = ""
    role: AgencyRole = AgencyRole.CREATOR
    max_uses: int | None = None
    current_uses: int = 0
    is_active: bool = True
    note: str | None = None
    email: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    expires_at: datetime = field(
        default_factory=lambda: datetime.utcnow() + timedelta(days=INVITE_EXPIRY_DAYS)
    )

    @property
    def is_expired(self) -> bool:
        """Check if the invite has passed its expiry time."""
        return datetime.utcnow() > self.expires_at

    @property
    def is_exhausted(self) -> bool:
        """Check if every allowed use has been consumed."""
        return self.max_uses is not None and self.current_uses >= self.max_uses

    @property
    def is_redeemable(self) -> bool:
        """Active, unexpired and with at least one use left."""
        return self.is_active and not self.is_expired and not self.is_exhausted
