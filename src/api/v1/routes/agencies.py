"""Agency API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import InitializedUser, get_agency_service, get_membership_service
from api.v1.schemas.agency import (
    AgencyCreate,
    AgencyCreatedResponse,
    AgencyDetailResponse,
    AgencyListResponse,
    AgencyResponse,
    AgencyStatsResponse,
    AgencyUpdate,
)
from api.v1.schemas.invite import InviteResponse
from core.rate_limit import limiter
from domain.entities.agency import AgencySettings
from domain.services.agency_service import AgencyService
from domain.services.membership_service import MembershipService

router = APIRouter(prefix="/agencies", tags=["agencies"])


@router.post(
    "",
    response_model=AgencyCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an agency",
    responses={
        201: {"description": "Agency created; caller is its owner"},
        409: {"description": "Name taken or caller already in an agency"},
    },
)
@limiter.limit("5/minute")  # type: ignore[untyped-decorator]
async def create_agency(
    request: Request,
    body: AgencyCreate,
    user: InitializedUser,
    service: AgencyService = Depends(get_agency_service),
) -> AgencyCreatedResponse:
    """Create an agency. The caller becomes its Owner."""
    agency, invite = await service.create_agency(
        owner_id=user.id,
        name=body.name,
        display_name=body.display_name,
        description=body.description,
        industry=body.industry,
        social_media=body.social_media.to_handles(),
        settings=AgencySettings(**body.settings.model_dump()),
        create_first_invite=body.create_first_invite,
        first_invite_note=body.first_invite_note,
    )
    return AgencyCreatedResponse(
        data=AgencyResponse.from_entity(agency),
        invite=InviteResponse.from_entity(invite) if invite else None,
    )


@router.get(
    "/public",
    response_model=AgencyListResponse,
    summary="List public agencies",
    responses={200: {"description": "Agencies open to joining without an invite"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_public_agencies(
    request: Request,
    user: CurrentUser,
    search: str | None = Query(None, max_length=100),
    service: AgencyService = Depends(get_agency_service),
) -> AgencyListResponse:
    """List public agencies, optionally filtered by a case-insensitive term."""
    agencies = await service.list_public(search)
    data = [AgencyResponse.from_entity(agency) for agency in agencies]
    return AgencyListResponse(data=data, meta={"total": len(data)})


@router.get(
    "/{agency_id}",
    response_model=AgencyDetailResponse,
    summary="Get agency details",
    responses={404: {"description": "Agency not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_agency(
    request: Request,
    agency_id: UUID,
    user: CurrentUser,
    service: AgencyService = Depends(get_agency_service),
) -> AgencyDetailResponse:
    """Get an agency's public profile."""
    agency = await service.get_agency(agency_id)
    return AgencyDetailResponse(data=AgencyResponse.from_entity(agency))


@router.patch(
    "/{agency_id}",
    response_model=AgencyDetailResponse,
    summary="Update agency",
    responses={
        403: {"description": "Insufficient permissions (Admin+ only)"},
        404: {"description": "Agency not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_agency(
    request: Request,
    agency_id: UUID,
    body: AgencyUpdate,
    user: CurrentUser,
    service: AgencyService = Depends(get_agency_service),
) -> AgencyDetailResponse:
    """Update profile fields or join settings. Requires Admin+ role."""
    agency = await service.update_agency(
        agency_id=agency_id,
        user_id=user.id,
        display_name=body.display_name,
        description=body.description,
        industry=body.industry,
        social_media=body.social_media.to_handles() if body.social_media else None,
        settings=body.settings.model_dump(exclude_unset=True) if body.settings else None,
    )
    return AgencyDetailResponse(data=AgencyResponse.from_entity(agency))


@router.get(
    "/{agency_id}/stats",
    response_model=AgencyStatsResponse,
    summary="Get agency statistics",
    responses={
        403: {"description": "Insufficient permissions (Admin+ only)"},
        404: {"description": "Agency not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_agency_stats(
    request: Request,
    agency_id: UUID,
    user: CurrentUser,
    service: AgencyService = Depends(get_agency_service),
) -> AgencyStatsResponse:
    """Member and invite counts. Requires Admin+ role."""
    stats = await service.get_agency_stats(agency_id, user.id)
    return AgencyStatsResponse.from_entity(stats)


@router.post(
    "/{agency_id}/join",
    response_model=AgencyDetailResponse,
    summary="Join a public agency",
    responses={
        403: {"description": "Agency is invite-only"},
        404: {"description": "Agency not found"},
        409: {"description": "Already a member of an agency"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def join_public_agency(
    request: Request,
    agency_id: UUID,
    user: InitializedUser,
    service: MembershipService = Depends(get_membership_service),
) -> AgencyDetailResponse:
    """Join an agency that accepts members without an invite."""
    agency = await service.join_public(user.id, agency_id)
    return AgencyDetailResponse(data=AgencyResponse.from_entity(agency))
