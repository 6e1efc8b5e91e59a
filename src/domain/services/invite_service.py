"""Invite service layer with business logic."""

from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import UUID

import structlog

from core.exceptions import (
    AgencyNotFoundError,
    InviteExhaustedError,
    InviteExpiredError,
    InviteNotFoundError,
    ValidationError,
)
from domain.entities.agency import AgencyRole
from domain.entities.invite import (
    INVITABLE_ROLES,
    INVITE_CODE_LENGTH,
    INVITE_EXPIRY_DAYS,
    Invite,
    generate_invite_code,
    normalize_invite_code,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.access import require_agency_role

logger = structlog.get_logger()


class InviteService:
    """Service layer for agency invite codes."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        link_builder: Callable[[str], str] | None = None,
        code_length: int = INVITE_CODE_LENGTH,
        default_expiry_days: int = INVITE_EXPIRY_DAYS,
    ) -> None:
        self._uow_factory = uow_factory
        self._link_builder = link_builder
        self._code_length = code_length
        self._default_expiry_days = default_expiry_days

    async def create_invite(
        self,
        agency_id: UUID,
        user_id: UUID,
        role: AgencyRole = AgencyRole.CREATOR,
        max_uses: int | None = None,
        expires_in_days: int | None = None,
        note: str | None = None,
        email: str | None = None,
    ) -> Invite:
        """Create an invite code for an agency.

        Args:
            agency_id: The agency the code grants membership in.
            user_id: The issuer (must be Admin+ of the agency).
            role: Role granted on redemption (creator or admin).
            max_uses: Use limit; None means unlimited.
            expires_in_days: Lifetime of the code, defaults to 30 days.
            note: Free-text label for the issuer's own bookkeeping.
            email: Optional address the code is meant for (not enforced).

        Raises:
            AgencyNotFoundError: If the agency does not exist.
            NotAMemberError: If the issuer is not a member of the agency.
            InsufficientPermissionsError: If the issuer is below Admin.
        """
        async with self._uow_factory() as uow:
            agency = await uow.agencies.get(agency_id)
            if not agency:
                raise AgencyNotFoundError(str(agency_id))

            await require_agency_role(uow, agency_id, user_id, AgencyRole.ADMIN)

            invite = await self.issue(
                uow,
                agency_id=agency_id,
                user_id=user_id,
                role=role,
                max_uses=max_uses,
                expires_in_days=expires_in_days,
                note=note,
                email=email,
            )
            await uow.commit()
            return invite

    async def issue(
        self,
        uow: IUnitOfWork,
        agency_id: UUID,
        user_id: UUID,
        role: AgencyRole = AgencyRole.CREATOR,
        max_uses: int | None = None,
        expires_in_days: int | None = None,
        note: str | None = None,
        email: str | None = None,
    ) -> Invite:
        """Write an invite and bump the agency's counter inside ``uow``.

        No permission checks and no commit; callers own both.
        """
        if role not in INVITABLE_ROLES:
            raise ValidationError(f"Invites cannot grant the {role.name.lower()} role")
        if max_uses is not None and max_uses < 1:
            raise ValidationError("max_uses must be at least 1")

        days = expires_in_days if expires_in_days is not None else self._default_expiry_days
        code = generate_invite_code(self._code_length)
        now = datetime.utcnow()

        invite = Invite(
            agency_id=agency_id,
            invite_code=code,
            invite_link=self._link_builder(code) if self._link_builder else "",
            created_by=user_id,
            role=role,
            max_uses=max_uses,
            note=note,
            email=email,
            created_at=now,
            expires_at=now + timedelta(days=days),
        )
        created = await uow.invites.create(invite)
        await uow.agencies.increment_active_invites(agency_id)

        logger.info(
            "invite_created",
            agency_id=str(agency_id),
            invite_id=str(created.id),
            role=role.name.lower(),
            max_uses=max_uses,
        )
        return created

    async def redeem_validate(self, invite_code: str) -> Invite:
        """Look up a redeemable invite by code.

        An invite found expired or used up is deactivated on the spot before
        the error is raised.

        Raises:
            InviteNotFoundError: No active invite carries the code.
            InviteExpiredError: The invite is past ``expires_at``.
            InviteExhaustedError: The invite has no uses left.
        """
        async with self._uow_factory() as uow:
            return await self.check_redeemable(uow, invite_code)

    async def check_redeemable(self, uow: IUnitOfWork, invite_code: str) -> Invite:
        """Validate a code inside ``uow``; see :meth:`redeem_validate`."""
        code = normalize_invite_code(invite_code)
        invite = await uow.invites.get_active_by_code(code)
        if not invite:
            raise InviteNotFoundError(code)

        if invite.is_expired:
            await self._retire(uow, invite, reason="expired")
            raise InviteExpiredError(code)
        if invite.is_exhausted:
            await self._retire(uow, invite, reason="exhausted")
            raise InviteExhaustedError(code)

        return invite

    async def list_active(self, agency_id: UUID, user_id: UUID) -> list[Invite]:
        """List an agency's active invites, newest first. Requires membership.

        Expired invites that nobody has tried to redeem yet are still active
        and are included.
        """
        async with self._uow_factory() as uow:
            agency = await uow.agencies.get(agency_id)
            if not agency:
                raise AgencyNotFoundError(str(agency_id))

            await require_agency_role(uow, agency_id, user_id, AgencyRole.CREATOR)

            return await uow.invites.get_active_for_agency(agency_id)

    async def deactivate_invite(self, agency_id: UUID, invite_id: UUID, user_id: UUID) -> None:
        """Soft-deactivate an invite. Requires Admin+ role. Idempotent."""
        async with self._uow_factory() as uow:
            agency = await uow.agencies.get(agency_id)
            if not agency:
                raise AgencyNotFoundError(str(agency_id))

            await require_agency_role(uow, agency_id, user_id, AgencyRole.ADMIN)

            invite = await uow.invites.get_by_id(invite_id)
            if not invite or invite.agency_id != agency_id:
                raise InviteNotFoundError()

            if await uow.invites.deactivate(invite_id):
                await uow.agencies.increment_active_invites(agency_id, -1)
                logger.info(
                    "invite_deactivated",
                    agency_id=str(agency_id),
                    invite_id=str(invite_id),
                    by=str(user_id),
                )
            await uow.commit()

    async def _retire(self, uow: IUnitOfWork, invite: Invite, reason: str) -> None:
        """Deactivate a dead invite and commit, so the flip survives the raise."""
        if await uow.invites.deactivate(invite.id):
            await uow.agencies.increment_active_invites(invite.agency_id, -1)
            logger.info(
                "invite_deactivated_lazily",
                agency_id=str(invite.agency_id),
                invite_id=str(invite.id),
                reason=reason,
            )
        await uow.commit()
