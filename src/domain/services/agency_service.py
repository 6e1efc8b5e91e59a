"""Agency service layer with business logic."""

from collections.abc import Callable
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    AgencyNameTakenError,
    AgencyNotFoundError,
    AlreadyAMemberError,
    ValidationError,
)
from domain.entities.agency import (
    Agency,
    AgencyRole,
    AgencySettings,
    AgencyStats,
    Membership,
    MembershipStatus,
    normalize_agency_name,
)
from domain.entities.invite import Invite
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.access import require_agency_role
from domain.services.invite_service import InviteService

logger = structlog.get_logger()

# Terms of the invite optionally issued with a new agency
FIRST_INVITE_MAX_USES = 10
FIRST_INVITE_EXPIRY_DAYS = 30


class AgencyService:
    """Service layer for Agency business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        invite_service: Optional["InviteService"] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._invites = invite_service

    async def create_agency(
        self,
        owner_id: UUID,
        name: str,
        display_name: str,
        description: str | None = None,
        industry: str | None = None,
        social_media: dict[str, str] | None = None,
        settings: AgencySettings | None = None,
        create_first_invite: bool = False,
        first_invite_note: str | None = None,
    ) -> tuple[Agency, Invite | None]:
        """Create an agency with its owner as first member.

        ``name`` is reduced to a lowercase alphanumeric slug which must be
        unused. The owner must not already belong to an agency.
        """
        slug = normalize_agency_name(name)
        if not slug:
            raise ValidationError("Agency name must contain at least one letter or digit")

        async with self._uow_factory() as uow:
            if await uow.agencies.get_by_name(slug):
                raise AgencyNameTakenError(slug)

            if await uow.memberships.get_for_user(owner_id):
                raise AlreadyAMemberError(str(owner_id))

            agency = Agency(
                name=slug,
                display_name=display_name.strip() or slug,
                owner_id=owner_id,
                description=description,
                industry=industry,
                social_media=social_media or {},
                settings=settings or AgencySettings(),
                member_count=1,
            )

            invite: Invite | None = None
            try:
                created = await uow.agencies.create(agency)
                await uow.memberships.add(
                    Membership(
                        user_id=owner_id,
                        agency_id=created.id,
                        role=AgencyRole.OWNER,
                        status=MembershipStatus.ACTIVE,
                    )
                )
            except IntegrityError as exc:
                await uow.rollback()
                orig = str(exc.orig).lower() if exc.orig else ""
                if "user_id" in orig:
                    raise AlreadyAMemberError(str(owner_id))
                raise AgencyNameTakenError(slug)

            if create_first_invite and self._invites:
                invite = await self._invites.issue(
                    uow,
                    agency_id=created.id,
                    user_id=owner_id,
                    role=AgencyRole.CREATOR,
                    max_uses=FIRST_INVITE_MAX_USES,
                    expires_in_days=FIRST_INVITE_EXPIRY_DAYS,
                    note=first_invite_note,
                )
                created = await uow.agencies.get(created.id) or created

            await uow.commit()

            logger.info(
                "agency_created",
                agency_id=str(created.id),
                name=slug,
                owner_id=str(owner_id),
                first_invite=invite is not None,
            )
            return created, invite

    async def get_agency(self, agency_id: UUID) -> Agency:
        """Get an agency by ID."""
        async with self._uow_factory() as uow:
            agency = await uow.agencies.get(agency_id)
            if not agency:
                raise AgencyNotFoundError(str(agency_id))
            return agency

    async def update_agency(
        self,
        agency_id: UUID,
        user_id: UUID,
        display_name: str | None = None,
        description: str | None = None,
        industry: str | None = None,
        social_media: dict[str, str] | None = None,
        settings: dict[str, Any] | None = None,
    ) -> Agency:
        """Update profile fields and settings. Requires Admin+ role.

        ``settings`` is a partial mapping merged over the current settings.
        """
        async with self._uow_factory() as uow:
            agency = await uow.agencies.get(agency_id)
            if not agency:
                raise AgencyNotFoundError(str(agency_id))

            await require_agency_role(uow, agency_id, user_id, AgencyRole.ADMIN)

            if display_name is not None:
                agency.display_name = display_name
            if description is not None:
                agency.description = description
            if industry is not None:
                agency.industry = industry
            if social_media is not None:
                agency.social_media = {**agency.social_media, **social_media}
            if settings:
                merged = {**agency.settings.to_dict(), **settings}
                agency.settings = AgencySettings.from_dict(merged)

            agency.updated_at = datetime.utcnow()
            updated = await uow.agencies.update(agency)
            await uow.commit()
            return updated

    async def get_agency_stats(self, agency_id: UUID, user_id: UUID) -> AgencyStats:
        """Membership and invite counts. Requires Admin+ role."""
        async with self._uow_factory() as uow:
            agency = await uow.agencies.get(agency_id)
            if not agency:
                raise AgencyNotFoundError(str(agency_id))

            await require_agency_role(uow, agency_id, user_id, AgencyRole.ADMIN)

            members = await uow.memberships.get_for_agency(agency_id)
            pending = sum(1 for member in members if member.is_pending)
            return AgencyStats(
                total_members=agency.member_count,
                active_members=len(members) - pending,
                pending_members=pending,
                active_invites=agency.active_invites,
            )

    async def list_public(self, search: str | None = None) -> list[Agency]:
        """List agencies open to public joining, optionally filtered by a term."""
        async with self._uow_factory() as uow:
            agencies = await uow.agencies.list_public()
        if search:
            agencies = [agency for agency in agencies if agency.matches(search)]
        return agencies
