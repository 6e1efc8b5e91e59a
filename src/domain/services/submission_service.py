"""Submission service: intake and the one-way review state machine."""

from collections import Counter
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    AgencyNotFoundError,
    AlreadyReviewedError,
    DuplicateVideoUrlError,
    NoUrlProvidedError,
    ProfileNotFoundError,
    SubmissionNotFoundError,
    SubmissionNotModifiableError,
)
from domain.entities.profile import UserRole
from domain.entities.submission import (
    CreatorActivity,
    Platform,
    ReviewAction,
    SubmissionFilters,
    SubmissionStats,
    SubmissionStatus,
    VideoSubmission,
    parse_hashtags,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.access import require_admin_profile, require_creator_profile

logger = structlog.get_logger()


def local_midnight_utc() -> datetime:
    """Start of today on the server's local clock, as naive UTC."""
    midnight = datetime.now().astimezone().replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.astimezone(timezone.utc).replace(tzinfo=None)


class SubmissionService:
    """Service layer for video submissions and their review."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def submit(
        self,
        creator_id: UUID,
        urls: Mapping[Platform, str | None],
        caption: str | None = None,
        hashtags: str | None = None,
        notes: str | None = None,
    ) -> list[VideoSubmission]:
        """Create one pending submission per supplied platform URL.

        Every URL is checked before anything is written, so a duplicate
        rejects the whole call. The creator's ``total_submissions`` grows by
        the number of rows created, in the same transaction.

        Raises:
            NoUrlProvidedError: No non-blank URL was given.
            ProfileNotFoundError: The creator has no profile.
            InsufficientPermissionsError: The profile is inactive or not a creator.
            DuplicateVideoUrlError: A URL was already submitted (or repeated).
        """
        entries = [
            (Platform(platform), url.strip())
            for platform, url in urls.items()
            if url and url.strip()
        ]
        if not entries:
            raise NoUrlProvidedError()

        async with self._uow_factory() as uow:
            profile = await require_creator_profile(uow, creator_id)

            seen: set[str] = set()
            for _, url in entries:
                if url in seen or await uow.submissions.get_by_video_url(url):
                    raise DuplicateVideoUrlError(url)
                seen.add(url)

            tags = parse_hashtags(hashtags)
            created: list[VideoSubmission] = []
            for platform, url in entries:
                submission = VideoSubmission(
                    creator_id=creator_id,
                    creator_username=profile.username,
                    video_url=url,
                    platform=platform,
                    caption=(caption or "").strip(),
                    hashtags=list(tags),
                    notes=(notes or "").strip(),
                )
                try:
                    created.append(await uow.submissions.create(submission))
                except IntegrityError:
                    # Lost a race with another submit of the same URL
                    await uow.rollback()
                    raise DuplicateVideoUrlError(url)

            await uow.profiles.increment_submission_counters(creator_id, total=len(created))
            await uow.commit()

            logger.info(
                "submission_created",
                creator_id=str(creator_id),
                count=len(created),
                platforms=[s.platform.value for s in created],
            )
            return created

    async def review(
        self,
        submission_id: UUID,
        admin_id: UUID,
        action: ReviewAction,
        feedback: str | None = None,
    ) -> VideoSubmission:
        """Approve or reject a pending submission.

        The transition is a conditional update on ``status = 'pending'``;
        a second review, concurrent or not, fails with AlreadyReviewedError.
        Approval bumps the creator's ``approved_submissions`` in the same
        transaction.
        """
        async with self._uow_factory() as uow:
            await require_admin_profile(uow, admin_id)

            submission = await uow.submissions.get(submission_id)
            if not submission:
                raise SubmissionNotFoundError(str(submission_id))
            if not submission.is_pending:
                raise AlreadyReviewedError(str(submission_id), submission.status.value)

            feedback = feedback.strip() if feedback else None
            reviewed = await uow.submissions.apply_review(
                submission_id, admin_id, action, feedback or None
            )
            if reviewed is None:
                current = await uow.submissions.get(submission_id)
                status = current.status.value if current else SubmissionStatus.PENDING.value
                raise AlreadyReviewedError(str(submission_id), status)

            if action == ReviewAction.APPROVE:
                await uow.profiles.increment_submission_counters(
                    submission.creator_id, approved=1
                )
            await uow.commit()

            logger.info(
                "submission_reviewed",
                submission_id=str(submission_id),
                admin_id=str(admin_id),
                status=reviewed.status.value,
            )
            return reviewed

    async def list_submissions(
        self,
        viewer_id: UUID,
        filters: SubmissionFilters | None = None,
        agency_id: UUID | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[VideoSubmission], int]:
        """Filtered page of submissions plus the total match count.

        Creators only ever see their own submissions. ``agency_id`` restricts
        results to creators who are members of that agency.
        """
        filters = filters or SubmissionFilters()
        async with self._uow_factory() as uow:
            viewer = await uow.profiles.get(viewer_id)
            if not viewer:
                raise ProfileNotFoundError(str(viewer_id))
            if viewer.role != UserRole.ADMIN:
                filters.creator_id = viewer_id

            if agency_id is not None:
                if not await uow.agencies.get(agency_id):
                    raise AgencyNotFoundError(str(agency_id))
                filters.creator_ids = await uow.memberships.get_member_ids(agency_id)

            items = await uow.submissions.find(filters, limit=limit, offset=offset)
            total = await uow.submissions.count(filters)
            return items, total

    async def get_submission(self, submission_id: UUID, viewer_id: UUID) -> VideoSubmission:
        """Get one submission. Creators can only fetch their own."""
        async with self._uow_factory() as uow:
            submission = await uow.submissions.get(submission_id)
            if not submission:
                raise SubmissionNotFoundError(str(submission_id))

            if submission.creator_id != viewer_id:
                viewer = await uow.profiles.get(viewer_id)
                if not viewer or viewer.role != UserRole.ADMIN:
                    raise SubmissionNotFoundError(str(submission_id))
            return submission

    async def update_submission(
        self,
        submission_id: UUID,
        creator_id: UUID,
        caption: str | None = None,
        hashtags: str | None = None,
        notes: str | None = None,
    ) -> VideoSubmission:
        """Edit caption, hashtags or notes of the creator's own pending submission.

        Arguments left as None keep their stored value. Reviewed submissions
        are frozen.

        Raises:
            InsufficientPermissionsError: The caller is not an active creator.
            SubmissionNotFoundError: Missing, or owned by another creator.
            SubmissionNotModifiableError: The submission was already reviewed.
        """
        async with self._uow_factory() as uow:
            await require_creator_profile(uow, creator_id)
            submission = await self._get_own_pending(uow, submission_id, creator_id)

            updated = await uow.submissions.update_content(
                submission_id,
                caption=caption.strip() if caption is not None else None,
                hashtags=parse_hashtags(hashtags) if hashtags is not None else None,
                notes=notes.strip() if notes is not None else None,
            )
            if updated is None:
                raise await self._not_modifiable(uow, submission)
            await uow.commit()

            logger.info(
                "submission_updated",
                submission_id=str(submission_id),
                creator_id=str(creator_id),
            )
            return updated

    async def delete_submission(self, submission_id: UUID, creator_id: UUID) -> None:
        """Withdraw the creator's own pending submission.

        The creator's ``total_submissions`` drops by one in the same
        transaction.
        """
        async with self._uow_factory() as uow:
            await require_creator_profile(uow, creator_id)
            submission = await self._get_own_pending(uow, submission_id, creator_id)

            if not await uow.submissions.delete(submission_id):
                raise await self._not_modifiable(uow, submission)
            await uow.profiles.increment_submission_counters(creator_id, total=-1)
            await uow.commit()

            logger.info(
                "submission_deleted",
                submission_id=str(submission_id),
                creator_id=str(creator_id),
            )

    async def get_stats(self, viewer_id: UUID, agency_id: UUID | None = None) -> SubmissionStats:
        """Counts by status, today's intake and the most active creator.

        A full scan of the submission set, scoped to the agency's members when
        ``agency_id`` is given. Requires an admin profile.
        """
        async with self._uow_factory() as uow:
            await require_admin_profile(uow, viewer_id)

            creator_ids: list[UUID] | None = None
            if agency_id is not None:
                if not await uow.agencies.get(agency_id):
                    raise AgencyNotFoundError(str(agency_id))
                creator_ids = await uow.memberships.get_member_ids(agency_id)

            submissions = await uow.submissions.get_all(creator_ids)

        return self.compute_stats(submissions, since=local_midnight_utc())

    @staticmethod
    def compute_stats(submissions: list[VideoSubmission], since: datetime) -> SubmissionStats:
        """Aggregate a submission list. Ties for most active go to the first seen."""
        stats = SubmissionStats(total=len(submissions))
        counts: Counter[UUID] = Counter()
        usernames: dict[UUID, str] = {}

        for submission in submissions:
            if submission.status == SubmissionStatus.PENDING:
                stats.pending += 1
            elif submission.status == SubmissionStatus.APPROVED:
                stats.approved += 1
            else:
                stats.rejected += 1

            if submission.submitted_at >= since:
                stats.today_submissions += 1

            counts[submission.creator_id] += 1
            usernames.setdefault(submission.creator_id, submission.creator_username)

        if counts:
            creator_id, count = counts.most_common(1)[0]
            stats.most_active_creator = CreatorActivity(
                creator_id=creator_id,
                username=usernames[creator_id],
                count=count,
            )
        return stats

    # --- Internal helpers ---

    async def _get_own_pending(
        self, uow: IUnitOfWork, submission_id: UUID, creator_id: UUID
    ) -> VideoSubmission:
        submission = await uow.submissions.get(submission_id)
        if not submission or submission.creator_id != creator_id:
            raise SubmissionNotFoundError(str(submission_id))
        if not submission.is_pending:
            raise SubmissionNotModifiableError(str(submission_id), submission.status.value)
        return submission

    async def _not_modifiable(
        self, uow: IUnitOfWork, submission: VideoSubmission
    ) -> SubmissionNotModifiableError:
        """Error for a submission reviewed between the read and the write."""
        current = await uow.submissions.get(submission.id)
        status = current.status.value if current else submission.status.value
        return SubmissionNotModifiableError(str(submission.id), status)
