"""Video submission domain entities."""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class Platform(StrEnum):
    """Social platform a video link belongs to.

    Values are the string keys stored with each submission; supporting a new
    platform means adding a member here and a URL field on the submit request.
    """

    TIKTOK = "tiktok"
    INSTAGRAM = "instagram"


class SubmissionStatus(StrEnum):
    """Review state of a submission. PENDING is the only non-terminal state."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReviewAction(StrEnum):
    """Decision an admin applies to a pending submission."""

    APPROVE = "approve"
    REJECT = "reject"


_HASHTAG_SPLIT = re.compile(r"[,\s]+")


def parse_hashtags(raw: str | None) -> list[str]:
    """Split free text on commas/whitespace and prefix each tag with ``#``.

    Duplicates are kept.
    """
    if not raw:
        return []
    tags = (token.strip() for token in _HASHTAG_SPLIT.split(raw))
    return [tag if tag.startswith("#") else f"#{tag}" for tag in tags if tag]


@dataclass
class VideoSubmission:
    """Domain entity for a creator's video link submission."""

    creator_id: UUID
    creator_username: str
    video_url: str
    platform: Platform
    id: UUID = field(default_factory=uuid4)
    caption: str = ""
    hashtags: list[str] = field(default_factory=list)
    notes: str = ""
    status: SubmissionStatus = SubmissionStatus.PENDING
    admin_id: UUID | None = None
    admin_feedback: str | None = None
    submitted_at: datetime = field(default_factory=datetime.utcnow)
    reviewed_at: datetime | None = None
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_pending(self) -> bool:
        return self.status == SubmissionStatus.PENDING


@dataclass
class SubmissionFilters:
    """Optional filters for listing submissions."""

    status: SubmissionStatus | None = None
    platform: Platform | None = None
    creator_id: UUID | None = None
    creator_ids: list[UUID] | None = None
    admin_id: UUID | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    search_term: str | None = None


@dataclass
class CreatorActivity:
    """Submission count for a single creator."""

    creator_id: UUID
    username: str
    count: int


@dataclass
class SubmissionStats:
    """Aggregate counts over a set of submissions."""

    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    today_submissions: int = 0
    most_active_creator: CreatorActivity | None = None
