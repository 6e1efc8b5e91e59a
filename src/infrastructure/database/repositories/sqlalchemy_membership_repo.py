"""SQLAlchemy implementation of Membership repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.agency import AgencyRole, Membership, MembershipStatus
from infrastructure.database.models import MembershipModel

# Map string role values in DB to AgencyRole enum
_ROLE_TO_ENUM = {
    "owner": AgencyRole.OWNER,
    "admin": AgencyRole.ADMIN,
    "creator": AgencyRole.CREATOR,
}

_ENUM_TO_ROLE = {v: k for k, v in _ROLE_TO_ENUM.items()}


class SQLAlchemyMembershipRepository:
    """SQLAlchemy implementation of IMembershipRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_user(self, user_id: UUID) -> Membership | None:
        """Get the single membership of a user, if any."""
        stmt = select(MembershipModel).where(MembershipModel.user_id == user_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_for_agency(self, agency_id: UUID) -> list[Membership]:
        """Get all memberships of an agency, newest first."""
        stmt = (
            select(MembershipModel)
            .where(MembershipModel.agency_id == agency_id)
            .order_by(MembershipModel.joined_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_member_ids(self, agency_id: UUID) -> list[UUID]:
        """Get the user IDs of every member of an agency."""
        stmt = select(MembershipModel.user_id).where(MembershipModel.agency_id == agency_id)
        result = await self._session.execute(stmt)
        return list(result.scalars())

    async def add(self, membership: Membership) -> Membership:
        """Add a membership."""
        model = self._to_model(membership)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update_status(self, user_id: UUID, status: MembershipStatus) -> Membership:
        """Update the status of a user's membership."""
        stmt = select(MembershipModel).where(MembershipModel.user_id == user_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Membership for user {user_id} not found")

        model.status = status.value
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, user_id: UUID) -> bool:
        """Delete a user's membership."""
        stmt = select(MembershipModel).where(MembershipModel.user_id == user_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    def _to_entity(self, model: MembershipModel) -> Membership:
        """Convert ORM model to domain entity."""
        return Membership(
            id=model.id,
            user_id=model.user_id,
            agency_id=model.agency_id,
            role=_ROLE_TO_ENUM[model.role],
            status=MembershipStatus(model.status),
            joined_at=model.joined_at,
            invited_by=model.invited_by,
        )

    def _to_model(self, entity: Membership) -> MembershipModel:
        """Convert domain entity to ORM model."""
        return MembershipModel(
            id=entity.id,
            user_id=entity.user_id,
            agency_id=entity.agency_id,
            role=_ENUM_TO_ROLE[entity.role],
            status=entity.status.value,
            joined_at=entity.joined_at,
            invited_by=entity.invited_by,
        )
