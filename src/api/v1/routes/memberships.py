"""Membership API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_membership_service
from api.v1.schemas.membership import (
    MembershipDetailResponse,
    MembershipListResponse,
    MembershipResponse,
)
from core.rate_limit import limiter
from domain.services.membership_service import MembershipService

# Agency member management
agency_members_router = APIRouter(
    prefix="/agencies/{agency_id}/members",
    tags=["memberships"],
)

# The caller's own membership
memberships_router = APIRouter(
    prefix="/memberships",
    tags=["memberships"],
)


@agency_members_router.get(
    "",
    response_model=MembershipListResponse,
    summary="List agency members",
    responses={
        403: {"description": "Not a member"},
        404: {"description": "Agency not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_members(
    request: Request,
    agency_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> MembershipListResponse:
    """List all members, pending ones included, newest first."""
    members = await service.list_members(agency_id, user.id)
    data = [MembershipResponse.from_entity(member) for member in members]
    return MembershipListResponse(data=data, meta={"total": len(data)})


@agency_members_router.post(
    "/{user_id}/approve",
    response_model=MembershipDetailResponse,
    summary="Approve pending member",
    responses={
        403: {"description": "Insufficient permissions (Admin+ only)"},
        404: {"description": "No such member in this agency"},
        409: {"description": "Membership is not pending"},
    },
)
@limiter.limit("20/minute")  # type: ignore[untyped-decorator]
async def approve_membership(
    request: Request,
    agency_id: UUID,
    user_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> MembershipDetailResponse:
    """Activate a pending membership. Requires Admin+ role."""
    membership = await service.approve_membership(agency_id, user_id, user.id)
    return MembershipDetailResponse(data=MembershipResponse.from_entity(membership))


@agency_members_router.post(
    "/{user_id}/reject",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Reject pending member",
    responses={
        204: {"description": "Pending membership removed"},
        403: {"description": "Insufficient permissions (Admin+ only)"},
        404: {"description": "No such member in this agency"},
        409: {"description": "Membership is not pending"},
    },
)
@limiter.limit("20/minute")  # type: ignore[untyped-decorator]
async def reject_membership(
    request: Request,
    agency_id: UUID,
    user_id: UUID,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> None:
    """Remove a pending membership. Requires Admin+ role."""
    await service.reject_membership(agency_id, user_id, user.id)
    return None


@memberships_router.get(
    "/me",
    response_model=MembershipDetailResponse,
    summary="Get my membership",
    responses={200: {"description": "The caller's membership, or null"}},
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def get_my_membership(
    request: Request,
    user: CurrentUser,
    service: MembershipService = Depends(get_membership_service),
) -> MembershipDetailResponse:
    """Get the caller's agency membership, if any."""
    membership = await service.get_membership(user.id)
    return MembershipDetailResponse(
        data=MembershipResponse.from_entity(membership) if membership else None
    )
