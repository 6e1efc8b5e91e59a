"""User administration API routes (admin only)."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from api.v1.dependencies import InitializedUser, get_profile_service
from api.v1.schemas.common import PageMeta
from api.v1.schemas.user import (
    ProfileDetailResponse,
    ProfileListResponse,
    ProfileResponse,
)
from core.rate_limit import limiter
from domain.entities.profile import ProfileFilters, UserRole
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "",
    response_model=ProfileListResponse,
    summary="List users",
    responses={403: {"description": "Admin only"}},
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def list_users(
    request: Request,
    user: InitializedUser,
    role: UserRole | None = Query(None),
    is_active: bool | None = Query(None),
    search: str | None = Query(None, max_length=200),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileListResponse:
    """List accounts, newest first. ``search`` matches username or email."""
    filters = ProfileFilters(role=role, is_active=is_active, search_term=search)
    items, total = await service.list_profiles(
        user.id, filters, limit=limit, offset=offset
    )
    return ProfileListResponse(
        data=[ProfileResponse.from_entity(item) for item in items],
        meta=PageMeta(total=total, limit=limit, offset=offset),
    )


@router.get(
    "/{user_id}",
    response_model=ProfileDetailResponse,
    summary="Get user",
    responses={
        403: {"description": "Admin only"},
        404: {"description": "User not found"},
    },
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def get_user(
    request: Request,
    user_id: UUID,
    user: InitializedUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    profile = await service.get_user(user.id, user_id)
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))


@router.post(
    "/{user_id}/activate",
    response_model=ProfileDetailResponse,
    summary="Activate creator account",
    responses={
        400: {"description": "Target is not a creator"},
        403: {"description": "Admin only"},
        404: {"description": "User not found"},
    },
)
@limiter.limit("20/minute")  # type: ignore[untyped-decorator]
async def activate_user(
    request: Request,
    user_id: UUID,
    user: InitializedUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Re-enable a creator account."""
    profile = await service.set_active(user.id, user_id, active=True)
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))


@router.post(
    "/{user_id}/deactivate",
    response_model=ProfileDetailResponse,
    summary="Deactivate creator account",
    responses={
        400: {"description": "Own account, or target is not a creator"},
        403: {"description": "Admin only"},
        404: {"description": "User not found"},
    },
)
@limiter.limit("20/minute")  # type: ignore[untyped-decorator]
async def deactivate_user(
    request: Request,
    user_id: UUID,
    user: InitializedUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Disable a creator account. Deactivated creators cannot submit."""
    profile = await service.set_active(user.id, user_id, active=False)
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))
