"""Integration tests for the invite repository's conditional updates."""

from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import UUID, uuid4

import pytest

from core.exceptions import InviteExhaustedError, InviteExpiredError
from domain.entities.agency import Agency
from domain.entities.invite import Invite
from domain.entities.profile import Profile
from domain.services.invite_service import InviteService
from domain.services.membership_service import MembershipService
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

UowFactory = Callable[[], SQLAlchemyUnitOfWork]


async def _seed_agency(uow_factory: UowFactory, active_invites: int = 0) -> Agency:
    owner = Profile(id=uuid4(), email="owner@example.com", username="owner")
    async with uow_factory() as uow:
        await uow.profiles.create(owner)
        agency = await uow.agencies.create(
            Agency(
                name=f"agency{uuid4().hex[:8]}",
                display_name="Agency",
                owner_id=owner.id,
                member_count=1,
                active_invites=active_invites,
            )
        )
        await uow.commit()
    return agency


async def _seed_invite(uow_factory: UowFactory, agency: Agency, **fields: object) -> Invite:
    invite = Invite(
        agency_id=agency.id,
        invite_code=fields.pop("invite_code", "RACE0001"),  # type: ignore[arg-type]
        created_by=agency.owner_id,
        **fields,  # type: ignore[arg-type]
    )
    async with uow_factory() as uow:
        created = await uow.invites.create(invite)
        await uow.commit()
    return created


async def _reload_invite(uow_factory: UowFactory, invite_id: UUID) -> Invite:
    async with uow_factory() as uow:
        invite = await uow.invites.get_by_id(invite_id)
    assert invite is not None
    return invite


class TestClaimUse:
    @pytest.mark.asyncio
    async def test_claims_until_limit(self, uow_factory: UowFactory) -> None:
        agency = await _seed_agency(uow_factory)
        invite = await _seed_invite(uow_factory, agency, max_uses=2)

        results = []
        for _ in range(3):
            async with uow_factory() as uow:
                results.append(await uow.invites.claim_use(invite.id))
                await uow.commit()

        assert results == [True, True, False]
        assert (await _reload_invite(uow_factory, invite.id)).current_uses == 2

    @pytest.mark.asyncio
    async def test_unlimited_invite_keeps_counting(self, uow_factory: UowFactory) -> None:
        agency = await _seed_agency(uow_factory)
        invite = await _seed_invite(uow_factory, agency, max_uses=None)

        for _ in range(5):
            async with uow_factory() as uow:
                assert await uow.invites.claim_use(invite.id)
                await uow.commit()

        assert (await _reload_invite(uow_factory, invite.id)).current_uses == 5

    @pytest.mark.asyncio
    async def test_inactive_invite_cannot_be_claimed(self, uow_factory: UowFactory) -> None:
        agency = await _seed_agency(uow_factory)
        invite = await _seed_invite(uow_factory, agency, is_active=False)

        async with uow_factory() as uow:
            assert not await uow.invites.claim_use(invite.id)

    @pytest.mark.asyncio
    async def test_two_redemptions_racing_for_last_use(self, uow_factory: UowFactory) -> None:
        """Both pass validation; only the first claim lands."""
        agency = await _seed_agency(uow_factory)
        invite = await _seed_invite(uow_factory, agency, max_uses=1)
        invites = InviteService(uow_factory)

        async with uow_factory() as slow, uow_factory() as fast:
            assert (await invites.check_redeemable(slow, invite.invite_code)).id == invite.id
            assert (await invites.check_redeemable(fast, invite.invite_code)).id == invite.id

            assert await fast.invites.claim_use(invite.id)
            await fast.commit()

            assert not await slow.invites.claim_use(invite.id)
            await slow.rollback()

        assert (await _reload_invite(uow_factory, invite.id)).current_uses == 1


class TestDeactivate:
    @pytest.mark.asyncio
    async def test_flips_once(self, uow_factory: UowFactory) -> None:
        agency = await _seed_agency(uow_factory)
        invite = await _seed_invite(uow_factory, agency)

        async with uow_factory() as uow:
            first = await uow.invites.deactivate(invite.id)
            second = await uow.invites.deactivate(invite.id)
            await uow.commit()

        assert (first, second) == (True, False)
        assert not (await _reload_invite(uow_factory, invite.id)).is_active

    @pytest.mark.asyncio
    async def test_inactive_invite_is_invisible_to_code_lookup(
        self, uow_factory: UowFactory
    ) -> None:
        agency = await _seed_agency(uow_factory)
        invite = await _seed_invite(uow_factory, agency)

        async with uow_factory() as uow:
            await uow.invites.deactivate(invite.id)
            await uow.commit()

        async with uow_factory() as uow:
            assert await uow.invites.get_active_by_code(invite.invite_code) is None
            assert await uow.invites.get_active_for_agency(agency.id) == []


class TestLazyDeactivation:
    @pytest.mark.asyncio
    async def test_expired_invite_is_retired_on_redeem_attempt(
        self, uow_factory: UowFactory
    ) -> None:
        agency = await _seed_agency(uow_factory, active_invites=1)
        invite = await _seed_invite(
            uow_factory,
            agency,
            created_at=datetime.utcnow() - timedelta(days=31),
            expires_at=datetime.utcnow() - timedelta(days=1),
        )
        service = InviteService(uow_factory)

        with pytest.raises(InviteExpiredError):
            await service.redeem_validate(invite.invite_code)

        assert not (await _reload_invite(uow_factory, invite.id)).is_active
        async with uow_factory() as uow:
            reloaded = await uow.agencies.get(agency.id)
        assert reloaded is not None
        assert reloaded.active_invites == 0

    @pytest.mark.asyncio
    async def test_join_on_exhausted_invite_retires_it(self, uow_factory: UowFactory) -> None:
        agency = await _seed_agency(uow_factory, active_invites=1)
        invite = await _seed_invite(uow_factory, agency, max_uses=1, current_uses=1)
        service = MembershipService(uow_factory, invite_service=InviteService(uow_factory))

        joiner = Profile(id=uuid4(), email="late@example.com", username="late")
        async with uow_factory() as uow:
            await uow.profiles.create(joiner)
            await uow.commit()

        with pytest.raises(InviteExhaustedError):
            await service.join_via_invite(joiner.id, invite.invite_code)

        assert not (await _reload_invite(uow_factory, invite.id)).is_active
        async with uow_factory() as uow:
            assert await uow.memberships.get_for_user(joiner.id) is None
            reloaded = await uow.agencies.get(agency.id)
        assert reloaded is not None
        assert reloaded.active_invites == 0
        assert reloaded.member_count == 1
