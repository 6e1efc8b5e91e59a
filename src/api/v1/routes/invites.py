"""Invite API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import InitializedUser, get_invite_service, get_membership_service
from api.v1.schemas.agency import AgencyDetailResponse, AgencyResponse
from api.v1.schemas.invite import (
    CreateInviteRequest,
    InviteDetailResponse,
    InviteListResponse,
    InviteResponse,
    JoinViaInviteRequest,
)
from core.rate_limit import limiter
from domain.entities.agency import AgencyRole
from domain.services.invite_service import InviteService
from domain.services.membership_service import MembershipService

# Agency-scoped invite management
agency_invites_router = APIRouter(
    prefix="/agencies/{agency_id}/invites",
    tags=["invites"],
)

# Code lookup and redemption
invites_router = APIRouter(
    prefix="/invites",
    tags=["invites"],
)

_ROLE_MAP = {
    "creator": AgencyRole.CREATOR,
    "admin": AgencyRole.ADMIN,
}


@agency_invites_router.post(
    "",
    response_model=InviteDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create invite code",
    responses={
        201: {"description": "Invite created"},
        403: {"description": "Insufficient permissions (Admin+ only)"},
        404: {"description": "Agency not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_invite(
    request: Request,
    agency_id: UUID,
    body: CreateInviteRequest,
    user: InitializedUser,
    service: InviteService = Depends(get_invite_service),
) -> InviteDetailResponse:
    """Generate an invite code for an agency. Requires Admin+ role."""
    invite = await service.create_invite(
        agency_id=agency_id,
        user_id=user.id,
        role=_ROLE_MAP[body.role],
        max_uses=body.max_uses,
        expires_in_days=body.expires_in_days,
        note=body.note,
        email=body.email,
    )
    return InviteDetailResponse(data=InviteResponse.from_entity(invite))


@agency_invites_router.get(
    "",
    response_model=InviteListResponse,
    summary="List active invites",
    responses={
        200: {"description": "Active invites, newest first"},
        403: {"description": "Not a member"},
        404: {"description": "Agency not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_agency_invites(
    request: Request,
    agency_id: UUID,
    user: CurrentUser,
    service: InviteService = Depends(get_invite_service),
) -> InviteListResponse:
    """List the agency's active invites.

    Active invites past their expiry are included; ``is_redeemable`` tells
    them apart.
    """
    invites = await service.list_active(agency_id, user.id)
    data = [InviteResponse.from_entity(invite) for invite in invites]
    return InviteListResponse(data=data, meta={"total": len(data)})


@agency_invites_router.delete(
    "/{invite_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Deactivate invite",
    responses={
        204: {"description": "Invite deactivated"},
        403: {"description": "Insufficient permissions (Admin+ only)"},
        404: {"description": "Agency or invite not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def deactivate_invite(
    request: Request,
    agency_id: UUID,
    invite_id: UUID,
    user: CurrentUser,
    service: InviteService = Depends(get_invite_service),
) -> None:
    """Stop an invite from being redeemed. Requires Admin+ role."""
    await service.deactivate_invite(agency_id, invite_id, user.id)
    return None


@invites_router.get(
    "/{invite_code}",
    response_model=InviteDetailResponse,
    summary="Validate invite code",
    responses={
        200: {"description": "Invite is redeemable"},
        404: {"description": "Invalid or expired invite code"},
        410: {"description": "Invite expired or used up"},
    },
)
@limiter.limit("20/minute")  # type: ignore[untyped-decorator]
async def redeem_invite(
    request: Request,
    invite_code: str,
    user: CurrentUser,
    service: InviteService = Depends(get_invite_service),
) -> InviteDetailResponse:
    """Check that a code can be redeemed, without joining."""
    invite = await service.redeem_validate(invite_code)
    return InviteDetailResponse(data=InviteResponse.from_entity(invite))


@invites_router.post(
    "/join",
    response_model=AgencyDetailResponse,
    summary="Join agency via invite",
    responses={
        200: {"description": "Joined; membership may be pending approval"},
        404: {"description": "Invalid invite code or agency gone"},
        409: {"description": "Already a member of an agency"},
        410: {"description": "Invite expired or used up"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def join_via_invite(
    request: Request,
    body: JoinViaInviteRequest,
    user: InitializedUser,
    service: MembershipService = Depends(get_membership_service),
) -> AgencyDetailResponse:
    """Redeem an invite code and join its agency."""
    agency = await service.join_via_invite(user.id, body.invite_code)
    return AgencyDetailResponse(data=AgencyResponse.from_entity(agency))
