"""Pydantic schemas for Agency API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.invite import InviteResponse
from domain.entities.agency import Agency, AgencyStats


class SocialMedia(BaseModel):
    """Public social handles of an agency."""

    instagram: str | None = Field(None, max_length=255)
    tiktok: str | None = Field(None, max_length=255)
    twitter: str | None = Field(None, max_length=255)
    linkedin: str | None = Field(None, max_length=255)

    def to_handles(self) -> dict[str, str]:
        return {key: value for key, value in self.model_dump().items() if value}


class AgencySettingsSchema(BaseModel):
    """Join policy of an agency."""

    allow_public_join: bool = False
    require_approval: bool = True
    max_creators: int | None = Field(None, ge=1)


class AgencySettingsUpdate(BaseModel):
    """Partial join-policy update; omitted fields are kept."""

    allow_public_join: bool | None = None
    require_approval: bool | None = None
    max_creators: int | None = Field(None, ge=1)


class AgencyCreate(BaseModel):
    """Schema for creating an agency."""

    name: str = Field(..., min_length=1, max_length=100, description="Reduced to [a-z0-9]")
    display_name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    industry: str | None = Field(None, max_length=100)
    social_media: SocialMedia = Field(default_factory=SocialMedia)
    settings: AgencySettingsSchema = Field(default_factory=AgencySettingsSchema)
    create_first_invite: bool = False
    first_invite_note: str | None = Field(None, max_length=500)


class AgencyUpdate(BaseModel):
    """Schema for updating an agency. All fields optional."""

    display_name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    industry: str | None = Field(None, max_length=100)
    social_media: SocialMedia | None = None
    settings: AgencySettingsUpdate | None = None


class AgencyResponse(BaseModel):
    """Schema for Agency response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "brightmedia",
                "display_name": "Bright Media",
                "description": "Short-form video agency",
                "industry": "Entertainment",
                "social_media": {"instagram": "@brightmedia"},
                "settings": {
                    "allow_public_join": True,
                    "require_approval": True,
                    "max_creators": None,
                },
                "owner_id": "789e4567-e89b-12d3-a456-426614174000",
                "member_count": 4,
                "active_invites": 1,
                "created_at": "2026-02-01T10:00:00",
                "updated_at": "2026-02-01T10:00:00",
            }
        }
    )

    id: UUID
    name: str
    display_name: str
    description: str | None = None
    industry: str | None = None
    social_media: dict[str, str] = Field(default_factory=dict)
    settings: AgencySettingsSchema
    owner_id: UUID
    member_count: int
    active_invites: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, agency: Agency) -> "AgencyResponse":
        return cls(
            id=agency.id,
            name=agency.name,
            display_name=agency.display_name,
            description=agency.description,
            industry=agency.industry,
            social_media=agency.social_media,
            settings=AgencySettingsSchema(**agency.settings.to_dict()),
            owner_id=agency.owner_id,
            member_count=agency.member_count,
            active_invites=agency.active_invites,
            created_at=agency.created_at,
            updated_at=agency.updated_at,
        )


class AgencyDetailResponse(BaseModel):
    """Schema for single Agency response."""

    data: AgencyResponse


class AgencyCreatedResponse(BaseModel):
    """Schema for agency creation response, with the first invite if requested."""

    data: AgencyResponse
    invite: InviteResponse | None = None


class AgencyListResponse(BaseModel):
    """Schema for list of Agencies response."""

    data: list[AgencyResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class AgencyStatsResponse(BaseModel):
    """Schema for agency dashboard counts."""

    total_members: int
    active_members: int
    pending_members: int
    active_invites: int

    @classmethod
    def from_entity(cls, stats: AgencyStats) -> "AgencyStatsResponse":
        return cls(
            total_members=stats.total_members,
            active_members=stats.active_members,
            pending_members=stats.pending_members,
            active_invites=stats.active_invites,
        )
