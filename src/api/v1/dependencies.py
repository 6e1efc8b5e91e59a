"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Annotated, Callable

from fastapi import Depends

from api.dependencies.auth import get_current_user
from core.config import settings
from domain.services.agency_service import AgencyService
from domain.services.invite_service import InviteService
from domain.services.membership_service import MembershipService
from domain.services.profile_service import ProfileService
from domain.services.submission_service import SubmissionService
from infrastructure.auth.provider import TokenUser
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_uow_factory())


@lru_cache
def get_invite_service() -> InviteService:
    """Get Invite service instance."""
    return InviteService(
        get_uow_factory(),
        link_builder=settings.invite_link,
        code_length=settings.invite_code_length,
        default_expiry_days=settings.invite_default_expiry_days,
    )


@lru_cache
def get_membership_service() -> MembershipService:
    """Get Membership service instance."""
    return MembershipService(get_uow_factory(), invite_service=get_invite_service())


@lru_cache
def get_agency_service() -> AgencyService:
    """Get Agency service instance."""
    return AgencyService(get_uow_factory(), invite_service=get_invite_service())


@lru_cache
def get_submission_service() -> SubmissionService:
    """Get Submission service instance."""
    return SubmissionService(get_uow_factory())


async def get_initialized_user(
    user: Annotated[TokenUser, Depends(get_current_user)],
    profile_service: ProfileService = Depends(get_profile_service),
) -> TokenUser:
    """Authenticated user whose profile row is guaranteed to exist.

    Routes that write rows referencing the caller depend on this instead of
    ``CurrentUser``. The stored role follows the token's role.
    """
    await profile_service.ensure_profile(
        user.id,
        email=user.email,
        username=user.username,
        role=user.role,
    )
    return user


InitializedUser = Annotated[TokenUser, Depends(get_initialized_user)]
