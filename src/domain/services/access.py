"""Permission checks shared by the services."""

from uuid import UUID

from core.exceptions import (
    InsufficientPermissionsError,
    NotAMemberError,
    ProfileNotFoundError,
)
from domain.entities.agency import AgencyRole, Membership, has_permission
from domain.entities.profile import Profile, UserRole
from domain.repositories.unit_of_work import IUnitOfWork


async def require_agency_role(
    uow: IUnitOfWork,
    agency_id: UUID,
    user_id: UUID,
    required_role: AgencyRole,
) -> Membership:
    """Verify the user is an active member with at least the required role.

    Pending members count as non-members until approved.
    """
    membership = await uow.memberships.get_for_user(user_id)
    if not membership or membership.agency_id != agency_id or membership.is_pending:
        raise NotAMemberError(str(agency_id))
    if not has_permission(membership.role, required_role):
        raise InsufficientPermissionsError(required_role.name.lower())
    return membership


async def require_admin_profile(uow: IUnitOfWork, user_id: UUID) -> Profile:
    """Verify the user holds an active admin account."""
    profile = await uow.profiles.get(user_id)
    if not profile or not profile.is_active or profile.role != UserRole.ADMIN:
        raise InsufficientPermissionsError(UserRole.ADMIN.value)
    return profile


async def require_creator_profile(uow: IUnitOfWork, user_id: UUID) -> Profile:
    """Verify the user holds an active creator account.

    Raises:
        ProfileNotFoundError: The user has no profile row.
        InsufficientPermissionsError: The account is inactive or not a creator.
    """
    profile = await uow.profiles.get(user_id)
    if not profile:
        raise ProfileNotFoundError(str(user_id))
    if not profile.is_active or profile.role != UserRole.CREATOR:
        raise InsufficientPermissionsError(UserRole.CREATOR.value)
    return profile
