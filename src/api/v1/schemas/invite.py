"""Pydantic schemas for Invite API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.entities.invite import Invite


class CreateInviteRequest(BaseModel):
    """Schema for creating an agency invite code."""

    role: str = Field("creator", pattern="^(creator|admin)$")
    max_uses: int | None = Field(None, ge=1, description="Omit for unlimited uses")
    expires_in_days: int | None = Field(None, ge=1, le=365)
    note: str | None = Field(None, max_length=500)
    email: str | None = Field(None, max_length=255)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        """Basic email validation."""
        if v is None:
            return None
        v = v.strip().lower()
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Invalid email address")
        return v


class JoinViaInviteRequest(BaseModel):
    """Schema for redeeming an invite code."""

    invite_code: str = Field(..., min_length=1, max_length=32)


class InviteResponse(BaseModel):
    """Schema for Invite response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "agency_id": "456e4567-e89b-12d3-a456-426614174000",
                "invite_code": "K7Q2MZ9A",
                "invite_link": "https://portal.example.com/invite/K7Q2MZ9A",
                "role": "creator",
                "max_uses": 10,
                "current_uses": 3,
                "is_active": True,
                "is_redeemable": True,
                "note": "Spring campaign",
                "created_by": "789e4567-e89b-12d3-a456-426614174000",
                "created_at": "2026-02-01T10:00:00",
                "expires_at": "2026-03-03T10:00:00",
            }
        }
    )

    id: UUID
    agency_id: UUID
    invite_code: str
    invite_link: str
    role: str
    max_uses: int | None = None
    current_uses: int
    is_active: bool
    is_redeemable: bool
    note: str | None = None
    email: str | None = None
    created_by: UUID
    created_at: datetime
    expires_at: datetime

    @classmethod
    def from_entity(cls, invite: Invite) -> "InviteResponse":
        return cls(
            id=invite.id,
            agency_id=invite.agency_id,
            invite_code=invite.invite_code,
            invite_link=invite.invite_link,
            role=invite.role.name.lower(),
            max_uses=invite.max_uses,
            current_uses=invite.current_uses,
            is_active=invite.is_active,
            is_redeemable=invite.is_redeemable,
            note=invite.note,
            email=invite.email,
            created_by=invite.created_by,
            created_at=invite.created_at,
            expires_at=invite.expires_at,
        )


class InviteDetailResponse(BaseModel):
    """Schema for single Invite response."""

    data: InviteResponse


class InviteListResponse(BaseModel):
    """Schema for list of Invites response."""

    data: list[InviteResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
