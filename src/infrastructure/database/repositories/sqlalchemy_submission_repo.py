"""SQLAlchemy implementation of Submission repository."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.submission import (
    Platform,
    ReviewAction,
    SubmissionFilters,
    SubmissionStatus,
    VideoSubmission,
)
from infrastructure.database.models import SubmissionModel


class SQLAlchemySubmissionRepository:
    """SQLAlchemy implementation of ISubmissionRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, submission: VideoSubmission) -> VideoSubmission:
        """Create a new submission."""
        model = self._to_model(submission)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def get(self, id: UUID) -> VideoSubmission | None:
        """Get a submission by ID."""
        stmt = (
            select(SubmissionModel)
            .where(SubmissionModel.id == id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_video_url(self, video_url: str) -> VideoSubmission | None:
        """Get the submission for a video URL, if one exists."""
        stmt = select(SubmissionModel).where(SubmissionModel.video_url == video_url)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def find(
        self, filters: SubmissionFilters, limit: int = 20, offset: int = 0
    ) -> list[VideoSubmission]:
        """List submissions matching filters, newest first."""
        stmt = (
            select(SubmissionModel)
            .where(*self._conditions(filters))
            .order_by(SubmissionModel.submitted_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def count(self, filters: SubmissionFilters) -> int:
        """Count submissions matching filters."""
        stmt = (
            select(func.count())
            .select_from(SubmissionModel)
            .where(*self._conditions(filters))
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def get_all(self, creator_ids: list[UUID] | None = None) -> list[VideoSubmission]:
        """Get every submission, optionally restricted to some creators."""
        stmt = select(SubmissionModel).order_by(SubmissionModel.submitted_at)
        if creator_ids is not None:
            stmt = stmt.where(SubmissionModel.creator_id.in_(creator_ids))
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def apply_review(
        self,
        id: UUID,
        admin_id: UUID,
        action: ReviewAction,
        feedback: str | None,
    ) -> VideoSubmission | None:
        """Transition a pending submission. None if it was no longer pending.

        The ``status = 'pending'`` guard is part of the UPDATE, so of two
        concurrent reviews only one matches a row.
        """
        now = datetime.utcnow()
        new_status = (
            SubmissionStatus.APPROVED
            if action == ReviewAction.APPROVE
            else SubmissionStatus.REJECTED
        )
        stmt = (
            update(SubmissionModel)
            .where(
                SubmissionModel.id == id,
                SubmissionModel.status == SubmissionStatus.PENDING.value,
            )
            .values(
                status=new_status.value,
                admin_id=admin_id,
                admin_feedback=feedback,
                reviewed_at=now,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        if not result.rowcount:  # type: ignore[attr-defined]
            return None
        return await self.get(id)

    async def update_content(
        self,
        id: UUID,
        caption: str | None = None,
        hashtags: list[str] | None = None,
        notes: str | None = None,
    ) -> VideoSubmission | None:
        """Edit the creator-owned fields of a pending submission.

        Fields left as None are unchanged. None if the row is gone or no
        longer pending.
        """
        values: dict[str, Any] = {"updated_at": datetime.utcnow()}
        if caption is not None:
            values["caption"] = caption
        if hashtags is not None:
            values["hashtags"] = hashtags
        if notes is not None:
            values["notes"] = notes
        stmt = (
            update(SubmissionModel)
            .where(
                SubmissionModel.id == id,
                SubmissionModel.status == SubmissionStatus.PENDING.value,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        if not result.rowcount:  # type: ignore[attr-defined]
            return None
        return await self.get(id)

    async def delete(self, id: UUID) -> bool:
        """Delete a pending submission. False if it was no longer pending."""
        stmt = (
            delete(SubmissionModel)
            .where(
                SubmissionModel.id == id,
                SubmissionModel.status == SubmissionStatus.PENDING.value,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return bool(result.rowcount)  # type: ignore[attr-defined]

    @staticmethod
    def _conditions(filters: SubmissionFilters) -> list[Any]:
        """Build WHERE clauses for the set filters."""
        conditions: list[Any] = []
        if filters.status is not None:
            conditions.append(SubmissionModel.status == filters.status.value)
        if filters.platform is not None:
            conditions.append(SubmissionModel.platform == filters.platform.value)
        if filters.creator_id is not None:
            conditions.append(SubmissionModel.creator_id == filters.creator_id)
        if filters.creator_ids is not None:
            conditions.append(SubmissionModel.creator_id.in_(filters.creator_ids))
        if filters.admin_id is not None:
            conditions.append(SubmissionModel.admin_id == filters.admin_id)
        if filters.date_from is not None:
            conditions.append(SubmissionModel.submitted_at >= filters.date_from)
        if filters.date_to is not None:
            conditions.append(SubmissionModel.submitted_at <= filters.date_to)
        if filters.search_term:
            pattern = f"%{filters.search_term.strip()}%"
            conditions.append(
                or_(
                    SubmissionModel.creator_username.ilike(pattern),
                    SubmissionModel.caption.ilike(pattern),
                    SubmissionModel.notes.ilike(pattern),
                )
            )
        return conditions

    def _to_entity(self, model: SubmissionModel) -> VideoSubmission:
        """Convert ORM model to domain entity."""
        return VideoSubmission(
            id=model.id,
            creator_id=model.creator_id,
            creator_username=model.creator_username,
            video_url=model.video_url,
            platform=Platform(model.platform),
            caption=model.caption,
            hashtags=list(model.hashtags or []),
            notes=model.notes,
            status=SubmissionStatus(model.status),
            admin_id=model.admin_id,
            admin_feedback=model.admin_feedback,
            submitted_at=model.submitted_at,
            reviewed_at=model.reviewed_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: VideoSubmission) -> SubmissionModel:
        """Convert domain entity to ORM model."""
        return SubmissionModel(
            id=entity.id,
            creator_id=entity.creator_id,
            creator_username=entity.creator_username,
            video_url=entity.video_url,
            platform=entity.platform.value,
            caption=entity.caption,
            hashtags=list(entity.hashtags),
            notes=entity.notes,
            status=entity.status.value,
            admin_id=entity.admin_id,
            admin_feedback=entity.admin_feedback,
            submitted_at=entity.submitted_at,
            reviewed_at=entity.reviewed_at,
            updated_at=entity.updated_at,
        )
