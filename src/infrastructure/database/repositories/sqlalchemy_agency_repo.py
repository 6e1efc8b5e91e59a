"""SQLAlchemy implementation of Agency repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.agency import Agency, AgencySettings
from infrastructure.database.models import AgencyModel


class SQLAlchemyAgencyRepository:
    """SQLAlchemy implementation of IAgencyRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Agency | None:
        """Get an agency by ID."""
        stmt = (
            select(AgencyModel)
            .where(AgencyModel.id == id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_name(self, name: str) -> Agency | None:
        """Get an agency by its normalized name."""
        stmt = select(AgencyModel).where(AgencyModel.name == name)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_public(self) -> list[Agency]:
        """Get all agencies that allow joining without an invite."""
        stmt = (
            select(AgencyModel)
            .where(AgencyModel.allow_public_join.is_(True))
            .order_by(AgencyModel.display_name)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, agency: Agency) -> Agency:
        """Create a new agency."""
        model = self._to_model(agency)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, agency: Agency) -> Agency:
        """Update an agency's descriptive fields and settings.

        Counters are left alone; they only move through the increment methods.
        """
        stmt = select(AgencyModel).where(AgencyModel.id == agency.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Agency {agency.id} not found")

        model.display_name = agency.display_name
        model.description = agency.description
        model.industry = agency.industry
        model.social_media = dict(agency.social_media)
        model.settings = agency.settings.to_dict()
        model.allow_public_join = agency.settings.allow_public_join
        model.updated_at = agency.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def increment_member_count(self, id: UUID, delta: int = 1) -> None:
        """Atomically add ``delta`` to the member counter."""
        stmt = (
            update(AgencyModel)
            .where(AgencyModel.id == id)
            .values(
                member_count=AgencyModel.member_count + delta,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
        await self._session.flush()

    async def increment_active_invites(self, id: UUID, delta: int = 1) -> None:
        """Atomically add ``delta`` to the active-invite counter."""
        stmt = (
            update(AgencyModel)
            .where(AgencyModel.id == id)
            .values(active_invites=AgencyModel.active_invites + delta)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
        await self._session.flush()

    def _to_entity(self, model: AgencyModel) -> Agency:
        """Convert ORM model to domain entity."""
        return Agency(
            id=model.id,
            name=model.name,
            display_name=model.display_name,
            description=model.description,
            industry=model.industry,
            social_media=dict(model.social_media or {}),
            settings=AgencySettings.from_dict(model.settings),
            owner_id=model.owner_id,
            member_count=model.member_count,
            active_invites=model.active_invites,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Agency) -> AgencyModel:
        """Convert domain entity to ORM model."""
        return AgencyModel(
            id=entity.id,
            name=entity.name,
            display_name=entity.display_name,
            description=entity.description,
            industry=entity.industry,
            social_media=dict(entity.social_media),
            settings=entity.settings.to_dict(),
            allow_public_join=entity.settings.allow_public_join,
            owner_id=entity.owner_id,
            member_count=entity.member_count,
            active_invites=entity.active_invites,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
