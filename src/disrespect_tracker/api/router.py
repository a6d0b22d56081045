"""Main API router aggregation."""

from fastapi import APIRouter

from disrespect_tracker.api.auth import router as auth_router
from disrespect_tracker.api.events import router as events_router
from disrespect_tracker.api.friends import router as friends_router
from disrespect_tracker.api.invites import router as invites_router
from disrespect_tracker.api.users import router as users_router

# Main API router
api_router = APIRouter(prefix="/api")

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(events_router)
api_router.include_router(friends_router)
api_router.include_router(invites_router)
api_router.include_router(users_router)
