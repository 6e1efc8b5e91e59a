"""Pydantic schemas for the user administration API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from api.v1.schemas.common import PageMeta
from domain.entities.profile import Profile


class ProfileResponse(BaseModel):
    """Schema for Profile response."""

    id: UUID
    email: str
    username: str
    role: str
    is_active: bool
    total_submissions: int
    approved_submissions: int
    approval_rate: float
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, profile: Profile) -> "ProfileResponse":
        return cls(
            id=profile.id,
            email=profile.email,
            username=profile.username,
            role=profile.role.value,
            is_active=profile.is_active,
            total_submissions=profile.total_submissions,
            approved_submissions=profile.approved_submissions,
            approval_rate=profile.approval_rate,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


class ProfileDetailResponse(BaseModel):
    data: ProfileResponse


class ProfileListResponse(BaseModel):
    """Schema for a page of Profiles."""

    data: list[ProfileResponse]
    meta: PageMeta
