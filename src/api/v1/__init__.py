"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.agencies import router as agencies_router
from api.v1.routes.invites import agency_invites_router, invites_router
from api.v1.routes.memberships import agency_members_router, memberships_router
from api.v1.routes.submissions import router as submissions_router
from api.v1.routes.users import router as users_router

router = APIRouter()
router.include_router(agencies_router)
router.include_router(agency_invites_router)
router.include_router(invites_router)
router.include_router(agency_members_router)
router.include_router(memberships_router)
router.include_router(submissions_router)
router.include_router(users_router)
