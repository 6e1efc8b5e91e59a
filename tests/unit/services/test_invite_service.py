"""Unit tests for InviteService."""

from datetime import datetime, timedelta
from uuid import UUID, uuid4

import pytest

from core.exceptions import (
    AgencyNotFoundError,
    InsufficientPermissionsError,
    InviteExhaustedError,
    InviteExpiredError,
    InviteNotFoundError,
    NotAMemberError,
    ValidationError,
)
from domain.entities.agency import Agency, AgencyRole, Membership, MembershipStatus
from domain.entities.invite import INVITE_CODE_ALPHABET, Invite
from domain.services.invite_service import InviteService
from tests.unit.conftest import FakeUnitOfWork, echo


@pytest.fixture
def service(uow: FakeUnitOfWork) -> InviteService:
    return InviteService(
        lambda: uow, link_builder=lambda code: f"https://portal.test/invite/{code}"
    )


@pytest.fixture
def agency(agency_id: UUID, user_id: UUID) -> Agency:
    return Agency(id=agency_id, name="brightmedia", display_name="Bright Media", owner_id=user_id)


def _membership(agency_id: UUID, user_id: UUID, role: AgencyRole) -> Membership:
    return Membership(user_id=user_id, agency_id=agency_id, role=role)


def _invite(agency_id: UUID, **overrides: object) -> Invite:
    fields: dict[str, object] = {
        "agency_id": agency_id,
        "invite_code": "K7Q2MZ9A",
        "created_by": uuid4(),
    }
    fields.update(overrides)
    return Invite(**fields)  # type: ignore[arg-type]


# --- create_invite ---


class TestCreateInvite:
    @pytest.mark.asyncio
    async def test_admin_creates_invite_and_bumps_counter(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        agency: Agency,
        agency_id: UUID,
        user_id: UUID,
    ) -> None:
        uow.agencies.get.return_value = agency
        uow.memberships.get_for_user.return_value = _membership(
            agency_id, user_id, AgencyRole.ADMIN
        )
        uow.invites.create.side_effect = echo

        invite = await service.create_invite(
            agency_id=agency_id, user_id=user_id, max_uses=5, note="Spring"
        )

        assert invite.agency_id == agency_id
        assert invite.created_by == user_id
        assert invite.role == AgencyRole.CREATOR
        assert invite.max_uses == 5
        assert invite.current_uses == 0
        assert invite.is_active
        assert invite.note == "Spring"
        assert invite.invite_link == f"https://portal.test/invite/{invite.invite_code}"
        uow.agencies.increment_active_invites.assert_awaited_once_with(agency_id)
        assert uow.committed

    @pytest.mark.asyncio
    async def test_code_is_eight_uppercase_alphanumerics(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        agency: Agency,
        agency_id: UUID,
        user_id: UUID,
    ) -> None:
        uow.agencies.get.return_value = agency
        uow.memberships.get_for_user.return_value = _membership(
            agency_id, user_id, AgencyRole.OWNER
        )
        uow.invites.create.side_effect = echo

        invite = await service.create_invite(agency_id=agency_id, user_id=user_id)

        assert len(invite.invite_code) == 8
        assert all(ch in INVITE_CODE_ALPHABET for ch in invite.invite_code)

    @pytest.mark.asyncio
    async def test_default_expiry_is_thirty_days(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        agency: Agency,
        agency_id: UUID,
        user_id: UUID,
    ) -> None:
        uow.agencies.get.return_value = agency
        uow.memberships.get_for_user.return_value = _membership(
            agency_id, user_id, AgencyRole.ADMIN
        )
        uow.invites.create.side_effect = echo

        invite = await service.create_invite(agency_id=agency_id, user_id=user_id)

        assert invite.expires_at - invite.created_at == timedelta(days=30)

    @pytest.mark.asyncio
    async def test_custom_expiry(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        agency: Agency,
        agency_id: UUID,
        user_id: UUID,
    ) -> None:
        uow.agencies.get.return_value = agency
        uow.memberships.get_for_user.return_value = _membership(
            agency_id, user_id, AgencyRole.ADMIN
        )
        uow.invites.create.side_effect = echo

        invite = await service.create_invite(
            agency_id=agency_id, user_id=user_id, expires_in_days=7
        )

        assert invite.expires_at - invite.created_at == timedelta(days=7)

    @pytest.mark.asyncio
    async def test_raises_agency_not_found(
        self, service: InviteService, uow: FakeUnitOfWork, agency_id: UUID, user_id: UUID
    ) -> None:
        uow.agencies.get.return_value = None

        with pytest.raises(AgencyNotFoundError):
            await service.create_invite(agency_id=agency_id, user_id=user_id)

    @pytest.mark.asyncio
    async def test_creator_cannot_create_invite(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        agency: Agency,
        agency_id: UUID,
        user_id: UUID,
    ) -> None:
        uow.agencies.get.return_value = agency
        uow.memberships.get_for_user.return_value = _membership(
            agency_id, user_id, AgencyRole.CREATOR
        )

        with pytest.raises(InsufficientPermissionsError):
            await service.create_invite(agency_id=agency_id, user_id=user_id)
        uow.invites.create.assert_not_awaited()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_member_of_other_agency_is_not_a_member(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        agency: Agency,
        agency_id: UUID,
        user_id: UUID,
    ) -> None:
        uow.agencies.get.return_value = agency
        uow.memberships.get_for_user.return_value = _membership(
            uuid4(), user_id, AgencyRole.OWNER
        )

        with pytest.raises(NotAMemberError):
            await service.create_invite(agency_id=agency_id, user_id=user_id)

    @pytest.mark.asyncio
    async def test_pending_admin_is_not_a_member(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        agency: Agency,
        agency_id: UUID,
        user_id: UUID,
    ) -> None:
        uow.agencies.get.return_value = agency
        membership = _membership(agency_id, user_id, AgencyRole.ADMIN)
        membership.status = MembershipStatus.PENDING
        uow.memberships.get_for_user.return_value = membership

        with pytest.raises(NotAMemberError):
            await service.create_invite(agency_id=agency_id, user_id=user_id)

    @pytest.mark.asyncio
    async def test_owner_role_cannot_be_granted(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        agency: Agency,
        agency_id: UUID,
        user_id: UUID,
    ) -> None:
        uow.agencies.get.return_value = agency
        uow.memberships.get_for_user.return_value = _membership(
            agency_id, user_id, AgencyRole.OWNER
        )

        with pytest.raises(ValidationError):
            await service.create_invite(
                agency_id=agency_id, user_id=user_id, role=AgencyRole.OWNER
            )

    @pytest.mark.asyncio
    async def test_max_uses_must_be_positive(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        agency: Agency,
        agency_id: UUID,
        user_id: UUID,
    ) -> None:
        uow.agencies.get.return_value = agency
        uow.memberships.get_for_user.return_value = _membership(
            agency_id, user_id, AgencyRole.ADMIN
        )

        with pytest.raises(ValidationError):
            await service.create_invite(agency_id=agency_id, user_id=user_id, max_uses=0)


# --- redeem_validate ---


class TestRedeemValidate:
    @pytest.mark.asyncio
    async def test_returns_redeemable_invite_without_consuming(
        self, service: InviteService, uow: FakeUnitOfWork, agency_id: UUID
    ) -> None:
        invite = _invite(agency_id, max_uses=3, current_uses=1)
        uow.invites.get_active_by_code.return_value = invite

        result = await service.redeem_validate("k7q2mz9a")

        assert result is invite
        uow.invites.get_active_by_code.assert_awaited_once_with("K7Q2MZ9A")
        uow.invites.claim_use.assert_not_awaited()
        uow.invites.deactivate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_code(self, service: InviteService, uow: FakeUnitOfWork) -> None:
        uow.invites.get_active_by_code.return_value = None

        with pytest.raises(InviteNotFoundError):
            await service.redeem_validate("NOPE0000")

    @pytest.mark.asyncio
    async def test_expired_invite_is_deactivated_then_rejected(
        self, service: InviteService, uow: FakeUnitOfWork, agency_id: UUID
    ) -> None:
        invite = _invite(agency_id, expires_at=datetime.utcnow() - timedelta(minutes=1))
        uow.invites.get_active_by_code.return_value = invite
        uow.invites.deactivate.return_value = True

        with pytest.raises(InviteExpiredError):
            await service.redeem_validate(invite.invite_code)

        uow.invites.deactivate.assert_awaited_once_with(invite.id)
        uow.agencies.increment_active_invites.assert_awaited_once_with(agency_id, -1)
        assert uow.committed

    @pytest.mark.asyncio
    async def test_exhausted_invite_is_deactivated_then_rejected(
        self, service: InviteService, uow: FakeUnitOfWork, agency_id: UUID
    ) -> None:
        invite = _invite(agency_id, max_uses=1, current_uses=1)
        uow.invites.get_active_by_code.return_value = invite
        uow.invites.deactivate.return_value = True

        with pytest.raises(InviteExhaustedError):
            await service.redeem_validate(invite.invite_code)

        uow.invites.deactivate.assert_awaited_once_with(invite.id)
        uow.agencies.increment_active_invites.assert_awaited_once_with(agency_id, -1)

    @pytest.mark.asyncio
    async def test_counter_untouched_when_already_deactivated_elsewhere(
        self, service: InviteService, uow: FakeUnitOfWork, agency_id: UUID
    ) -> None:
        invite = _invite(agency_id, max_uses=1, current_uses=1)
        uow.invites.get_active_by_code.return_value = invite
        uow.invites.deactivate.return_value = False

        with pytest.raises(InviteExhaustedError):
            await service.redeem_validate(invite.invite_code)

        uow.agencies.increment_active_invites.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_expiry_checked_before_exhaustion(
        self, service: InviteService, uow: FakeUnitOfWork, agency_id: UUID
    ) -> None:
        invite = _invite(
            agency_id,
            max_uses=1,
            current_uses=1,
            expires_at=datetime.utcnow() - timedelta(days=1),
        )
        uow.invites.get_active_by_code.return_value = invite

        with pytest.raises(InviteExpiredError):
            await service.redeem_validate(invite.invite_code)


# --- list_active / deactivate_invite ---


class TestListActive:
    @pytest.mark.asyncio
    async def test_member_lists_invites(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        agency: Agency,
        agency_id: UUID,
        user_id: UUID,
    ) -> None:
        invites = [_invite(agency_id), _invite(agency_id)]
        uow.agencies.get.return_value = agency
        uow.memberships.get_for_user.return_value = _membership(
            agency_id, user_id, AgencyRole.CREATOR
        )
        uow.invites.get_active_for_agency.return_value = invites

        result = await service.list_active(agency_id, user_id)

        assert result == invites

    @pytest.mark.asyncio
    async def test_outsider_cannot_list(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        agency: Agency,
        agency_id: UUID,
        user_id: UUID,
    ) -> None:
        uow.agencies.get.return_value = agency
        uow.memberships.get_for_user.return_value = None

        with pytest.raises(NotAMemberError):
            await service.list_active(agency_id, user_id)


class TestDeactivateInvite:
    @pytest.mark.asyncio
    async def test_admin_deactivates_and_decrements(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        agency: Agency,
        agency_id: UUID,
        user_id: UUID,
    ) -> None:
        invite = _invite(agency_id)
        uow.agencies.get.return_value = agency
        uow.memberships.get_for_user.return_value = _membership(
            agency_id, user_id, AgencyRole.ADMIN
        )
        uow.invites.get_by_id.return_value = invite
        uow.invites.deactivate.return_value = True

        await service.deactivate_invite(agency_id, invite.id, user_id)

        uow.agencies.increment_active_invites.assert_awaited_once_with(agency_id, -1)
        assert uow.committed

    @pytest.mark.asyncio
    async def test_second_deactivation_is_a_no_op(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        agency: Agency,
        agency_id: UUID,
        user_id: UUID,
    ) -> None:
        invite = _invite(agency_id, is_active=False)
        uow.agencies.get.return_value = agency
        uow.memberships.get_for_user.return_value = _membership(
            agency_id, user_id, AgencyRole.ADMIN
        )
        uow.invites.get_by_id.return_value = invite
        uow.invites.deactivate.return_value = False

        await service.deactivate_invite(agency_id, invite.id, user_id)

        uow.agencies.increment_active_invites.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invite_of_other_agency_is_not_found(
        self,
        service: InviteService,
        uow: FakeUnitOfWork,
        agency: Agency,
        agency_id: UUID,
        user_id: UUID,
    ) -> None:
        uow.agencies.get.return_value = agency
        uow.memberships.get_for_user.return_value = _membership(
            agency_id, user_id, AgencyRole.OWNER
        )
        uow.invites.get_by_id.return_value = _invite(uuid4())

        with pytest.raises(InviteNotFoundError):
            await service.deactivate_invite(agency_id, uuid4(), user_id)
        uow.invites.deactivate.assert_not_awaited()
