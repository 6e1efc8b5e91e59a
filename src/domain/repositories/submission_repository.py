"""Submission repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.submission import (
    ReviewAction,
    SubmissionFilters,
    VideoSubmission,
)


class ISubmissionRepository(Protocol):
    """Repository interface for VideoSubmission entities."""

    async def create(self, submission: VideoSubmission) -> VideoSubmission:
        """Create a new submission."""
        ...

    async def get(self, id: UUID) -> VideoSubmission | None:
        """Get a submission by ID."""
        ...

    async def get_by_video_url(self, video_url: str) -> VideoSubmission | None:
        """Get the submission for a video URL, if one exists."""
        ...

    async def find(
        self, filters: SubmissionFilters, limit: int = 20, offset: int = 0
    ) -> list[VideoSubmission]:
        """List submissions matching filters, newest first."""
        ...

    async def count(self, filters: SubmissionFilters) -> int:
        """Count submissions matching filters."""
        ...

    async def get_all(self, creator_ids: list[UUID] | None = None) -> list[VideoSubmission]:
        """Get every submission, optionally restricted to some creators."""
        ...

    async def apply_review(
        self,
        id: UUID,
        admin_id: UUID,
        action: ReviewAction,
        feedback: str | None,
    ) -> VideoSubmission | None:
        """Transition a pending submission. None if it was no longer pending."""
        ...

    async def update_content(
        self,
        id: UUID,
        caption: str | None = None,
        hashtags: list[str] | None = None,
        notes: str | None = None,
    ) -> VideoSubmission | None:
        """Edit caption, hashtags or notes of a pending submission.

        None if the submission is missing or no longer pending.
        """
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a pending submission. False if it was no longer pending."""
        ...
