"""Profile service: keeps a profile row for every authenticated principal."""

from collections.abc import Callable
from typing import ClassVar
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    CannotDeactivateSelfError,
    ProfileNotFoundError,
    RoleNotManageableError,
)
from domain.entities.profile import Profile, ProfileFilters, UserRole
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.access import require_admin_profile

logger = structlog.get_logger()


class ProfileService:
    """Service layer for user profiles."""

    # Role last stored for each provisioned user. Skips a DB round-trip on
    # every authenticated request while the token's role is unchanged.
    _provisioned_users: ClassVar[dict[UUID, UserRole]] = {}

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    @classmethod
    def clear_provisioned_cache(cls) -> None:
        """Clear the provisioned-users cache. Intended for testing."""
        cls._provisioned_users.clear()

    async def ensure_profile(
        self,
        user_id: UUID,
        email: str | None = None,
        username: str | None = None,
        role: UserRole = UserRole.CREATOR,
    ) -> None:
        """Create the user's profile on first sight, or sync its role.

        The identity provider owns the role: when the token's role differs
        from the stored one, the stored role is overwritten. Idempotent. A
        concurrent first request that loses the insert race is treated as
        success.
        """
        if self._provisioned_users.get(user_id) == role:
            return

        async with self._uow_factory() as uow:
            existing = await uow.profiles.get(user_id)
            if existing:
                if existing.role != role:
                    await uow.profiles.set_role(user_id, role)
                    await uow.commit()
                    logger.info(
                        "profile_role_synced",
                        user_id=str(user_id),
                        old_role=existing.role.value,
                        role=role.value,
                    )
                self._provisioned_users[user_id] = role
                return

            email = email or ""
            profile = Profile(
                id=user_id,
                email=email,
                username=username or (email.split("@")[0] if email else str(user_id)[:8]),
                role=role,
            )

            try:
                await uow.profiles.create(profile)
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                # Only a primary-key clash means another request won the race
                orig = str(exc.orig).lower() if exc.orig else ""
                if "unique" not in orig and "duplicate" not in orig:
                    raise
                logger.debug("profile_already_created", user_id=str(user_id))
                # The winner may have stored another role; re-check next time
                return
            else:
                logger.info("profile_created", user_id=str(user_id), role=role.value)

            self._provisioned_users[user_id] = role

    async def get_profile(self, user_id: UUID) -> Profile:
        """Get a user's profile."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if not profile:
                raise ProfileNotFoundError(str(user_id))
            return profile

    # --- Account management (admin only) ---

    async def list_profiles(
        self,
        admin_id: UUID,
        filters: ProfileFilters | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Profile], int]:
        """Filtered page of profiles, newest first, plus the total match count."""
        filters = filters or ProfileFilters()
        async with self._uow_factory() as uow:
            await require_admin_profile(uow, admin_id)
            items = await uow.profiles.find(filters, limit=limit, offset=offset)
            total = await uow.profiles.count(filters)
            return items, total

    async def get_user(self, admin_id: UUID, user_id: UUID) -> Profile:
        """Get any user's profile."""
        async with self._uow_factory() as uow:
            await require_admin_profile(uow, admin_id)
            profile = await uow.profiles.get(user_id)
            if not profile:
                raise ProfileNotFoundError(str(user_id))
            return profile

    async def set_active(self, admin_id: UUID, user_id: UUID, active: bool) -> Profile:
        """Activate or deactivate a creator account.

        Inactive creators keep their data but can no longer submit.

        Raises:
            CannotDeactivateSelfError: An admin targeted their own account.
            ProfileNotFoundError: The target has no profile.
            RoleNotManageableError: The target is not a creator.
        """
        if not active and user_id == admin_id:
            raise CannotDeactivateSelfError()

        async with self._uow_factory() as uow:
            await require_admin_profile(uow, admin_id)
            target = await uow.profiles.get(user_id)
            if not target:
                raise ProfileNotFoundError(str(user_id))
            if target.role != UserRole.CREATOR:
                raise RoleNotManageableError(str(user_id), target.role.value)

            updated = await uow.profiles.set_active(user_id, active)
            if updated is None:
                raise ProfileNotFoundError(str(user_id))
            await uow.commit()

            logger.info(
                "profile_activation_changed",
                user_id=str(user_id),
                admin_id=str(admin_id),
                is_active=active,
            )
            return updated
