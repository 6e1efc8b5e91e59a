"""SQLAlchemy implementation of Profile repository."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import Profile, ProfileFilters, UserRole
from infrastructure.database.models import ProfileModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by user ID."""
        stmt = (
            select(ProfileModel)
            .where(ProfileModel.id == id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        model = self._to_model(profile)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def find(
        self, filters: ProfileFilters, limit: int = 20, offset: int = 0
    ) -> list[Profile]:
        """List profiles matching filters, newest first."""
        stmt = (
            select(ProfileModel)
            .where(*self._conditions(filters))
            .order_by(ProfileModel.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def count(self, filters: ProfileFilters) -> int:
        """Count profiles matching filters."""
        stmt = (
            select(func.count())
            .select_from(ProfileModel)
            .where(*self._conditions(filters))
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def set_role(self, id: UUID, role: UserRole) -> None:
        """Overwrite the stored role."""
        stmt = (
            update(ProfileModel)
            .where(ProfileModel.id == id)
            .values(role=role.value, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
        await self._session.flush()

    async def set_active(self, id: UUID, is_active: bool) -> Profile | None:
        """Activate or deactivate an account. None if it does not exist."""
        stmt = (
            update(ProfileModel)
            .where(ProfileModel.id == id)
            .values(is_active=is_active, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        if not result.rowcount:  # type: ignore[attr-defined]
            return None
        return await self.get(id)

    async def increment_submission_counters(
        self, id: UUID, total: int = 0, approved: int = 0
    ) -> None:
        """Atomically add to the creator's submission counters."""
        stmt = (
            update(ProfileModel)
            .where(ProfileModel.id == id)
            .values(
                total_submissions=ProfileModel.total_submissions + total,
                approved_submissions=ProfileModel.approved_submissions + approved,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
        await self._session.flush()

    @staticmethod
    def _conditions(filters: ProfileFilters) -> list[Any]:
        """Build WHERE clauses for the set filters."""
        conditions: list[Any] = []
        if filters.role is not None:
            conditions.append(ProfileModel.role == filters.role.value)
        if filters.is_active is not None:
            conditions.append(ProfileModel.is_active == filters.is_active)
        if filters.search_term:
            pattern = f"%{filters.search_term.strip()}%"
            conditions.append(
                or_(
                    ProfileModel.username.ilike(pattern),
                    ProfileModel.email.ilike(pattern),
                )
            )
        return conditions

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            email=model.email,
            username=model.username,
            role=UserRole(model.role),
            is_active=model.is_active,
            total_submissions=model.total_submissions,
            approved_submissions=model.approved_submissions,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            email=entity.email,
            username=entity.username,
            role=entity.role.value,
            is_active=entity.is_active,
            total_submissions=entity.total_submissions,
            approved_submissions=entity.approved_submissions,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
