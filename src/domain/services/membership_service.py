"""Membership service layer with business logic."""

from collections.abc import Callable
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    AgencyNotFoundError,
    AlreadyAMemberError,
    InviteExhaustedError,
    MembershipNotFoundError,
    MembershipNotPendingError,
    PublicJoinDisabledError,
)
from domain.entities.agency import (
    Agency,
    AgencyRole,
    Membership,
    MembershipStatus,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.access import require_agency_role
from domain.services.invite_service import InviteService

logger = structlog.get_logger()


class MembershipService:
    """Service layer for joining agencies and managing members."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        invite_service: InviteService,
    ) -> None:
        self._uow_factory = uow_factory
        self._invites = invite_service

    async def join_via_invite(self, user_id: UUID, invite_code: str) -> Agency:
        """Redeem an invite code and join its agency.

        The membership row, the invite use and the member counter are written
        in one transaction. The use is claimed with a conditional update, so
        when two redemptions race for the last use the loser fails with
        InviteExhaustedError and nothing it wrote is kept.

        Raises:
            InviteNotFoundError: Unknown or inactive code.
            InviteExpiredError / InviteExhaustedError: Dead invite.
            AlreadyAMemberError: The user already belongs to an agency.
            AgencyNotFoundError: The invite's agency no longer exists.
        """
        async with self._uow_factory() as uow:
            invite = await self._invites.check_redeemable(uow, invite_code)

            if await uow.memberships.get_for_user(user_id):
                raise AlreadyAMemberError(str(user_id))

            agency = await uow.agencies.get(invite.agency_id)
            if not agency:
                raise AgencyNotFoundError(str(invite.agency_id))

            membership = Membership(
                user_id=user_id,
                agency_id=agency.id,
                role=invite.role,
                status=agency.initial_member_status,
                invited_by=invite.created_by,
            )

            try:
                await uow.memberships.add(membership)
            except IntegrityError:
                await uow.rollback()
                raise AlreadyAMemberError(str(user_id))

            if not await uow.invites.claim_use(invite.id):
                await uow.rollback()
                raise InviteExhaustedError(invite.invite_code)

            await uow.agencies.increment_member_count(agency.id)
            joined = await uow.agencies.get(agency.id)
            await uow.commit()

            logger.info(
                "member_joined",
                agency_id=str(agency.id),
                user_id=str(user_id),
                via="invite",
                invite_id=str(invite.id),
                status=membership.status.value,
            )
            return joined or agency

    async def join_public(self, user_id: UUID, agency_id: UUID) -> Agency:
        """Join an agency that accepts members without an invite.

        Raises:
            AgencyNotFoundError: The agency does not exist.
            PublicJoinDisabledError: The agency is invite-only.
            AlreadyAMemberError: The user already belongs to an agency.
        """
        async with self._uow_factory() as uow:
            agency = await uow.agencies.get(agency_id)
            if not agency:
                raise AgencyNotFoundError(str(agency_id))

            if not agency.settings.allow_public_join:
                raise PublicJoinDisabledError(str(agency_id))

            if await uow.memberships.get_for_user(user_id):
                raise AlreadyAMemberError(str(user_id))

            membership = Membership(
                user_id=user_id,
                agency_id=agency_id,
                role=AgencyRole.CREATOR,
                status=agency.initial_member_status,
            )

            try:
                await uow.memberships.add(membership)
            except IntegrityError:
                await uow.rollback()
                raise AlreadyAMemberError(str(user_id))

            await uow.agencies.increment_member_count(agency_id)
            joined = await uow.agencies.get(agency_id)
            await uow.commit()

            logger.info(
                "member_joined",
                agency_id=str(agency_id),
                user_id=str(user_id),
                via="public",
                status=membership.status.value,
            )
            return joined or agency

    async def get_membership(self, user_id: UUID) -> Membership | None:
        """Get the user's membership, if any."""
        async with self._uow_factory() as uow:
            return await uow.memberships.get_for_user(user_id)

    async def list_members(self, agency_id: UUID, user_id: UUID) -> list[Membership]:
        """List an agency's members, newest first. Requires membership."""
        async with self._uow_factory() as uow:
            agency = await uow.agencies.get(agency_id)
            if not agency:
                raise AgencyNotFoundError(str(agency_id))

            await require_agency_role(uow, agency_id, user_id, AgencyRole.CREATOR)

            return await uow.memberships.get_for_agency(agency_id)

    async def approve_membership(
        self, agency_id: UUID, user_id: UUID, approver_id: UUID
    ) -> Membership:
        """Activate a pending member. Requires Admin+ role."""
        async with self._uow_factory() as uow:
            await self._get_pending(uow, agency_id, user_id, approver_id)

            approved = await uow.memberships.update_status(user_id, MembershipStatus.ACTIVE)
            await uow.commit()

            logger.info(
                "membership_approved",
                agency_id=str(agency_id),
                user_id=str(user_id),
                by=str(approver_id),
            )
            return approved

    async def reject_membership(self, agency_id: UUID, user_id: UUID, approver_id: UUID) -> None:
        """Remove a pending member. Requires Admin+ role.

        The row is deleted and the member counter decremented together.
        """
        async with self._uow_factory() as uow:
            await self._get_pending(uow, agency_id, user_id, approver_id)

            await uow.memberships.delete(user_id)
            await uow.agencies.increment_member_count(agency_id, -1)
            await uow.commit()

            logger.info(
                "membership_rejected",
                agency_id=str(agency_id),
                user_id=str(user_id),
                by=str(approver_id),
            )

    # --- Internal helpers ---

    async def _get_pending(
        self,
        uow: IUnitOfWork,
        agency_id: UUID,
        user_id: UUID,
        approver_id: UUID,
    ) -> Membership:
        agency = await uow.agencies.get(agency_id)
        if not agency:
            raise AgencyNotFoundError(str(agency_id))

        await require_agency_role(uow, agency_id, approver_id, AgencyRole.ADMIN)

        membership = await uow.memberships.get_for_user(user_id)
        if not membership or membership.agency_id != agency_id:
            raise MembershipNotFoundError(str(user_id))
        if not membership.is_pending:
            raise MembershipNotPendingError(str(user_id))
        return membership
