"""SQLAlchemy implementation of Invite repository."""

from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.agency import AgencyRole
from domain.entities.invite import Invite
from infrastructure.database.models import InviteModel

_ROLE_TO_ENUM = {
    "creator": AgencyRole.CREATOR,
    "admin": AgencyRole.ADMIN,
}

_ENUM_TO_ROLE = {v: k for k, v in _ROLE_TO_ENUM.items()}


class SQLAlchemyInviteRepository:
    """SQLAlchemy implementation of IInviteRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, invite: Invite) -> Invite:
        """Create a new invite."""
        model = self._to_model(invite)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def get_by_id(self, id: UUID) -> Invite | None:
        """Get an invite by its primary key."""
        stmt = (
            select(InviteModel)
            .where(InviteModel.id == id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_active_by_code(self, invite_code: str) -> Invite | None:
        """Get the active invite carrying an (uppercase) code.

        Codes are not guaranteed unique; on a collision the newest wins.
        """
        stmt = (
            select(InviteModel)
            .where(
                InviteModel.invite_code == invite_code,
                InviteModel.is_active.is_(True),
            )
            .order_by(InviteModel.created_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_active_for_agency(self, agency_id: UUID) -> list[Invite]:
        """Get active invites for an agency, newest first."""
        stmt = (
            select(InviteModel)
            .where(
                InviteModel.agency_id == agency_id,
                InviteModel.is_active.is_(True),
            )
            .order_by(InviteModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def deactivate(self, id: UUID) -> bool:
        """Flip an active invite to inactive. False if it already was."""
        stmt = (
            update(InviteModel)
            .where(InviteModel.id == id, InviteModel.is_active.is_(True))
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def claim_use(self, id: UUID) -> bool:
        """Consume one use if the invite is active and not exhausted.

        The guard lives in the UPDATE itself, so two redemptions racing for
        the last use cannot both succeed.
        """
        stmt = (
            update(InviteModel)
            .where(
                InviteModel.id == id,
                InviteModel.is_active.is_(True),
                or_(
                    InviteModel.max_uses.is_(None),
                    InviteModel.current_uses < InviteModel.max_uses,
                ),
            )
            .values(current_uses=InviteModel.current_uses + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return bool(result.rowcount)  # type: ignore[attr-defined]

    def _to_entity(self, model: InviteModel) -> Invite:
        """Convert ORM model to domain entity."""
        return Invite(
            id=model.id,
            agency_id=model.agency_id,
            invite_code=model.invite_code,
            invite_link=model.invite_link,
            created_by=model.created_by,
            role=_ROLE_TO_ENUM[model.role],
            max_uses=model.max_uses,
            current_uses=model.current_uses,
            is_active=model.is_active,
            note=model.note,
            email=model.email,
            created_at=model.created_at,
            expires_at=model.expires_at,
        )

    def _to_model(self, entity: Invite) -> InviteModel:
        """Convert domain entity to ORM model."""
        return InviteModel(
            id=entity.id,
            agency_id=entity.agency_id,
            invite_code=entity.invite_code,
            invite_link=entity.invite_link,
            created_by=entity.created_by,
            role=_ENUM_TO_ROLE[entity.role],
            max_uses=entity.max_uses,
            current_uses=entity.current_uses,
            is_active=entity.is_active,
            note=entity.note,
            email=entity.email,
            created_at=entity.created_at,
            expires_at=entity.expires_at,
        )
