"""Pydantic schemas for Membership API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from domain.entities.agency import Membership


class MembershipResponse(BaseModel):
    """Schema for Membership response."""

    id: UUID
    user_id: UUID
    agency_id: UUID
    role: str
    status: str
    joined_at: datetime
    invited_by: UUID | None = None

    @classmethod
    def from_entity(cls, membership: Membership) -> "MembershipResponse":
        return cls(
            id=membership.id,
            user_id=membership.user_id,
            agency_id=membership.agency_id,
            role=membership.role.name.lower(),
            status=membership.status.value,
            joined_at=membership.joined_at,
            invited_by=membership.invited_by,
        )


class MembershipDetailResponse(BaseModel):
    """Schema for a single, possibly absent, membership."""

    data: MembershipResponse | None = None


class MembershipListResponse(BaseModel):
    """Schema for list of Memberships response."""

    data: list[MembershipResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
