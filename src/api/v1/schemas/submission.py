"""Pydantic schemas for Submission API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.common import PageMeta
from domain.entities.submission import (
    Platform,
    SubmissionStats,
    VideoSubmission,
)


class SubmitVideoRequest(BaseModel):
    """Schema for submitting video links. At least one URL is required."""

    tiktok_url: str | None = Field(None, max_length=1000)
    instagram_url: str | None = Field(None, max_length=1000)
    caption: str | None = Field(None, max_length=2200)
    hashtags: str | None = Field(None, max_length=1000, description="Comma or space separated")
    notes: str | None = Field(None, max_length=2000)

    def platform_urls(self) -> dict[Platform, str | None]:
        """URL per platform; one field per Platform member."""
        return {platform: getattr(self, f"{platform.value}_url") for platform in Platform}


class UpdateSubmissionRequest(BaseModel):
    """Schema for editing a pending submission. Omitted fields are unchanged."""

    caption: str | None = Field(None, max_length=2200)
    hashtags: str | None = Field(None, max_length=1000, description="Comma or space separated")
    notes: str | None = Field(None, max_length=2000)


class ReviewRequest(BaseModel):
    """Schema for an admin review decision."""

    action: str = Field(..., pattern="^(approve|reject)$")
    feedback: str | None = Field(None, max_length=2000)


class SubmissionResponse(BaseModel):
    """Schema for VideoSubmission response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "creator_id": "456e4567-e89b-12d3-a456-426614174000",
                "creator_username": "jane",
                "video_url": "https://www.tiktok.com/@jane/video/1",
                "platform": "tiktok",
                "caption": "Launch day",
                "hashtags": ["#launch", "#promo"],
                "notes": "",
                "status": "pending",
                "admin_id": None,
                "admin_feedback": None,
                "submitted_at": "2026-02-01T10:00:00",
                "reviewed_at": None,
                "updated_at": "2026-02-01T10:00:00",
            }
        }
    )

    id: UUID
    creator_id: UUID
    creator_username: str
    video_url: str
    platform: str
    caption: str
    hashtags: list[str]
    notes: str
    status: str
    admin_id: UUID | None = None
    admin_feedback: str | None = None
    submitted_at: datetime
    reviewed_at: datetime | None = None
    updated_at: datetime

    @classmethod
    def from_entity(cls, submission: VideoSubmission) -> "SubmissionResponse":
        return cls(
            id=submission.id,
            creator_id=submission.creator_id,
            creator_username=submission.creator_username,
            video_url=submission.video_url,
            platform=submission.platform.value,
            caption=submission.caption,
            hashtags=submission.hashtags,
            notes=submission.notes,
            status=submission.status.value,
            admin_id=submission.admin_id,
            admin_feedback=submission.admin_feedback,
            submitted_at=submission.submitted_at,
            reviewed_at=submission.reviewed_at,
            updated_at=submission.updated_at,
        )


class SubmissionDetailResponse(BaseModel):
    """Schema for single Submission response."""

    data: SubmissionResponse


class SubmissionListResponse(BaseModel):
    """Schema for a page of Submissions."""

    data: list[SubmissionResponse]
    meta: PageMeta


class CreatorActivityResponse(BaseModel):
    creator_id: UUID
    username: str
    count: int


class SubmissionStatsResponse(BaseModel):
    """Schema for submission dashboard counts."""

    total: int
    pending: int
    approved: int
    rejected: int
    today_submissions: int
    most_active_creator: CreatorActivityResponse | None = None

    @classmethod
    def from_entity(cls, stats: SubmissionStats) -> "SubmissionStatsResponse":
        top = stats.most_active_creator
        return cls(
            total=stats.total,
            pending=stats.pending,
            approved=stats.approved,
            rejected=stats.rejected,
            today_submissions=stats.today_submissions,
            most_active_creator=(
                CreatorActivityResponse(
                    creator_id=top.creator_id, username=top.username, count=top.count
                )
                if top
                else None
            ),
        )
