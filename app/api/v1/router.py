"""API v1 router configuration."""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    admin_activities,
    admins,
    auth,
    blacklist,
    doctors,
    health,
    notifications,
    suspensions,
)

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(admins.router, prefix="/admins", tags=["Admins"])
api_router.include_router(doctors.router, prefix="/doctors", tags=["Doctors"])
api_router.include_router(suspensions.router, prefix="/doctors", tags=["Suspensions"])
api_router.include_router(
    admin_activities.router, prefix="/admin-activities", tags=["Admin Activities"]
)
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(blacklist.router, prefix="/blacklist", tags=["Blacklist"])
