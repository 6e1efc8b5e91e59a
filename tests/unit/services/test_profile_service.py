"""Unit tests for ProfileService."""

from uuid import UUID

import pytest
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    CannotDeactivateSelfError,
    InsufficientPermissionsError,
    ProfileNotFoundError,
    RoleNotManageableError,
)
from domain.entities.profile import Profile, ProfileFilters, UserRole
from domain.services.profile_service import ProfileService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork) -> ProfileService:
    return ProfileService(lambda: uow)


class TestEnsureProfile:
    @pytest.mark.asyncio
    async def test_creates_profile_on_first_sight(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        uow.profiles.get.return_value = None

        await service.ensure_profile(
            user_id, email="jane@example.com", username="jane", role=UserRole.ADMIN
        )

        created: Profile = uow.profiles.create.await_args.args[0]
        assert created.id == user_id
        assert created.email == "jane@example.com"
        assert created.username == "jane"
        assert created.role == UserRole.ADMIN
        assert created.total_submissions == 0
        assert uow.committed

    @pytest.mark.asyncio
    async def test_username_falls_back_to_email_local_part(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        uow.profiles.get.return_value = None

        await service.ensure_profile(user_id, email="jane.doe@example.com")

        created: Profile = uow.profiles.create.await_args.args[0]
        assert created.username == "jane.doe"
        assert created.role == UserRole.CREATOR

    @pytest.mark.asyncio
    async def test_existing_profile_is_left_alone(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        uow.profiles.get.return_value = Profile(id=user_id)

        await service.ensure_profile(user_id, email="x@example.com")

        uow.profiles.create.assert_not_awaited()
        uow.profiles.set_role.assert_not_awaited()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_changed_token_role_is_synced(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        uow.profiles.get.return_value = Profile(id=user_id, role=UserRole.CREATOR)

        await service.ensure_profile(user_id, role=UserRole.ADMIN)

        uow.profiles.set_role.assert_awaited_once_with(user_id, UserRole.ADMIN)
        uow.profiles.create.assert_not_awaited()
        assert uow.committed

    @pytest.mark.asyncio
    async def test_cached_user_with_new_role_is_rechecked(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        uow.profiles.get.return_value = None
        await service.ensure_profile(user_id, role=UserRole.CREATOR)
        uow.profiles.get.return_value = Profile(id=user_id, role=UserRole.CREATOR)

        await service.ensure_profile(user_id, role=UserRole.ADMIN)
        await service.ensure_profile(user_id, role=UserRole.ADMIN)

        assert uow.profiles.get.await_count == 2
        uow.profiles.set_role.assert_awaited_once_with(user_id, UserRole.ADMIN)

    @pytest.mark.asyncio
    async def test_second_call_skips_the_database(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        uow.profiles.get.return_value = None

        await service.ensure_profile(user_id)
        await service.ensure_profile(user_id)

        assert uow.profiles.get.await_count == 1

    @pytest.mark.asyncio
    async def test_lost_insert_race_counts_as_success(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        uow.profiles.get.return_value = None
        uow.profiles.create.side_effect = IntegrityError(
            "INSERT", {}, Exception("UNIQUE constraint failed: profiles.id")
        )

        await service.ensure_profile(user_id)

        assert uow.rolled_back

    @pytest.mark.asyncio
    async def test_other_integrity_errors_propagate(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        uow.profiles.get.return_value = None
        uow.profiles.create.side_effect = IntegrityError(
            "INSERT", {}, Exception("CHECK constraint failed: ck_profiles_role")
        )

        with pytest.raises(IntegrityError):
            await service.ensure_profile(user_id)
        assert uow.rolled_back


class TestGetProfile:
    @pytest.mark.asyncio
    async def test_returns_profile(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        profile = Profile(id=user_id, username="jane")
        uow.profiles.get.return_value = profile

        assert await service.get_profile(user_id) is profile

    @pytest.mark.asyncio
    async def test_missing_profile(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        uow.profiles.get.return_value = None

        with pytest.raises(ProfileNotFoundError):
            await service.get_profile(user_id)


def _admin(admin_id: UUID) -> Profile:
    return Profile(id=admin_id, username="reviewer", role=UserRole.ADMIN)


class TestListProfiles:
    @pytest.mark.asyncio
    async def test_admin_gets_page_and_total(
        self, service: ProfileService, uow: FakeUnitOfWork, actor_id: UUID
    ) -> None:
        uow.profiles.get.return_value = _admin(actor_id)
        creator = Profile(username="jane")
        uow.profiles.find.return_value = [creator]
        uow.profiles.count.return_value = 7
        filters = ProfileFilters(role=UserRole.CREATOR, search_term="jan")

        items, total = await service.list_profiles(actor_id, filters, limit=1, offset=2)

        assert items == [creator]
        assert total == 7
        uow.profiles.find.assert_awaited_once_with(filters, limit=1, offset=2)

    @pytest.mark.asyncio
    async def test_creator_cannot_list(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        uow.profiles.get.return_value = Profile(id=user_id)

        with pytest.raises(InsufficientPermissionsError):
            await service.list_profiles(user_id)
        uow.profiles.find.assert_not_awaited()


class TestSetActive:
    @pytest.mark.asyncio
    async def test_deactivates_creator(
        self,
        service: ProfileService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        actor_id: UUID,
    ) -> None:
        target = Profile(id=user_id)
        uow.profiles.get.side_effect = [_admin(actor_id), target]
        uow.profiles.set_active.return_value = Profile(id=user_id, is_active=False)

        result = await service.set_active(actor_id, user_id, active=False)

        assert not result.is_active
        uow.profiles.set_active.assert_awaited_once_with(user_id, False)
        assert uow.committed

    @pytest.mark.asyncio
    async def test_admin_cannot_deactivate_self(
        self, service: ProfileService, uow: FakeUnitOfWork, actor_id: UUID
    ) -> None:
        uow.profiles.get.return_value = _admin(actor_id)

        with pytest.raises(CannotDeactivateSelfError):
            await service.set_active(actor_id, actor_id, active=False)
        uow.profiles.set_active.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_only_creators_are_managed(
        self,
        service: ProfileService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        actor_id: UUID,
    ) -> None:
        uow.profiles.get.side_effect = [_admin(actor_id), _admin(user_id)]

        with pytest.raises(RoleNotManageableError):
            await service.set_active(actor_id, user_id, active=True)
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_unknown_target(
        self,
        service: ProfileService,
        uow: FakeUnitOfWork,
        user_id: UUID,
        actor_id: UUID,
    ) -> None:
        uow.profiles.get.side_effect = [_admin(actor_id), None]

        with pytest.raises(ProfileNotFoundError):
            await service.set_active(actor_id, user_id, active=True)
