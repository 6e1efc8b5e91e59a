"""Submission API routes."""

from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.v1.dependencies import InitializedUser, get_submission_service
from api.v1.schemas.common import PageMeta
from api.v1.schemas.submission import (
    ReviewRequest,
    SubmissionDetailResponse,
    SubmissionListResponse,
    SubmissionResponse,
    SubmissionStatsResponse,
    SubmitVideoRequest,
    UpdateSubmissionRequest,
)
from core.rate_limit import limiter
from domain.entities.submission import (
    Platform,
    ReviewAction,
    SubmissionFilters,
    SubmissionStatus,
)
from domain.services.submission_service import SubmissionService

router = APIRouter(prefix="/submissions", tags=["submissions"])


def _naive_utc(value: datetime | None) -> datetime | None:
    """Stored timestamps are naive UTC; align offset-aware query params."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


@router.post(
    "",
    response_model=SubmissionListResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit video links",
    responses={
        201: {"description": "One pending submission per URL"},
        400: {"description": "No URL provided"},
        403: {"description": "Caller is not an active creator"},
        409: {"description": "URL already submitted"},
    },
)
@limiter.limit("20/minute")  # type: ignore[untyped-decorator]
async def submit_video(
    request: Request,
    body: SubmitVideoRequest,
    user: InitializedUser,
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionListResponse:
    """Submit one video link per platform for review."""
    created = await service.submit(
        creator_id=user.id,
        urls=body.platform_urls(),
        caption=body.caption,
        hashtags=body.hashtags,
        notes=body.notes,
    )
    data = [SubmissionResponse.from_entity(submission) for submission in created]
    return SubmissionListResponse(
        data=data,
        meta=PageMeta(total=len(data), limit=len(data), offset=0),
    )


@router.get(
    "",
    response_model=SubmissionListResponse,
    summary="List submissions",
    responses={200: {"description": "Page of submissions, newest first"}},
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def list_submissions(
    request: Request,
    user: InitializedUser,
    status_filter: SubmissionStatus | None = Query(None, alias="status"),
    platform: Platform | None = Query(None),
    creator_id: UUID | None = Query(None),
    admin_id: UUID | None = Query(None),
    agency_id: UUID | None = Query(None),
    date_from: datetime | None = Query(None),
    date_to: datetime | None = Query(None),
    search: str | None = Query(None, max_length=200),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionListResponse:
    """List submissions. Creators only see their own."""
    filters = SubmissionFilters(
        status=status_filter,
        platform=platform,
        creator_id=creator_id,
        admin_id=admin_id,
        date_from=_naive_utc(date_from),
        date_to=_naive_utc(date_to),
        search_term=search,
    )
    items, total = await service.list_submissions(
        user.id, filters, agency_id=agency_id, limit=limit, offset=offset
    )
    return SubmissionListResponse(
        data=[SubmissionResponse.from_entity(item) for item in items],
        meta=PageMeta(total=total, limit=limit, offset=offset),
    )


@router.get(
    "/stats",
    response_model=SubmissionStatsResponse,
    summary="Get submission statistics",
    responses={
        403: {"description": "Admin only"},
        404: {"description": "Agency not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_submission_stats(
    request: Request,
    user: InitializedUser,
    agency_id: UUID | None = Query(None),
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionStatsResponse:
    """Counts by status, today's intake and the most active creator."""
    stats = await service.get_stats(user.id, agency_id)
    return SubmissionStatsResponse.from_entity(stats)


@router.get(
    "/{submission_id}",
    response_model=SubmissionDetailResponse,
    summary="Get submission",
    responses={404: {"description": "Submission not found"}},
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def get_submission(
    request: Request,
    submission_id: UUID,
    user: InitializedUser,
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionDetailResponse:
    """Get a single submission."""
    submission = await service.get_submission(submission_id, user.id)
    return SubmissionDetailResponse(data=SubmissionResponse.from_entity(submission))


@router.patch(
    "/{submission_id}",
    response_model=SubmissionDetailResponse,
    summary="Edit pending submission",
    responses={
        400: {"description": "Submission already reviewed"},
        403: {"description": "Caller is not an active creator"},
        404: {"description": "Submission not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def update_submission(
    request: Request,
    submission_id: UUID,
    body: UpdateSubmissionRequest,
    user: InitializedUser,
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionDetailResponse:
    """Edit caption, hashtags or notes of your own pending submission."""
    updated = await service.update_submission(
        submission_id,
        user.id,
        caption=body.caption,
        hashtags=body.hashtags,
        notes=body.notes,
    )
    return SubmissionDetailResponse(data=SubmissionResponse.from_entity(updated))


@router.delete(
    "/{submission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Withdraw pending submission",
    responses={
        204: {"description": "Submission deleted"},
        400: {"description": "Submission already reviewed"},
        403: {"description": "Caller is not an active creator"},
        404: {"description": "Submission not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def delete_submission(
    request: Request,
    submission_id: UUID,
    user: InitializedUser,
    service: SubmissionService = Depends(get_submission_service),
) -> None:
    """Delete your own pending submission."""
    await service.delete_submission(submission_id, user.id)
    return None


@router.post(
    "/{submission_id}/review",
    response_model=SubmissionDetailResponse,
    summary="Review submission",
    responses={
        403: {"description": "Admin only"},
        404: {"description": "Submission not found"},
        409: {"description": "Already reviewed"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def review_submission(
    request: Request,
    submission_id: UUID,
    body: ReviewRequest,
    user: InitializedUser,
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionDetailResponse:
    """Approve or reject a pending submission."""
    reviewed = await service.review(
        submission_id=submission_id,
        admin_id=user.id,
        action=ReviewAction(body.action),
        feedback=body.feedback,
    )
    return SubmissionDetailResponse(data=SubmissionResponse.from_entity(reviewed))
