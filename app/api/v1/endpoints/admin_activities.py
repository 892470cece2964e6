"""Admin activity log endpoints."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_admin
from app.schemas.admin_activities import AdminActivityListResponse, AdminActivityStatsResponse
from app.services.admin_activity_service import AdminActivityService

router = APIRouter()


def get_admin_activity_service() -> AdminActivityService:
    """Get admin activity service instance."""
    return AdminActivityService()


@router.get("/", response_model=AdminActivityListResponse)
async def list_admin_activities(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    admin_id: UUID | None = Query(None),
    action: str | None = Query(None),
    start_date: datetime | None = Query(None),
    end_date: datetime | None = Query(None),
    db: AsyncSession = Depends(get_db),
    viewer: dict = Depends(get_current_admin),
    service: AdminActivityService = Depends(get_admin_activity_service),
):
    """
    Page through the admin activity log, newest first.

    Admins below Super Admin do not see admin-management and maintenance
    entries, and see admin updates anonymized.
    """
    return await service.list_activities(
        db,
        viewer,
        page=page,
        limit=limit,
        admin_id=admin_id,
        action=action,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/stats", response_model=AdminActivityStatsResponse)
async def get_admin_activity_stats(
    period: str = Query("7d", description="1d, 7d or 30d"),
    db: AsyncSession = Depends(get_db),
    viewer: dict = Depends(get_current_admin),
    service: AdminActivityService = Depends(get_admin_activity_service),
):
    """Activity totals for the last day, week or month. Unknown periods use 7d."""
    return await service.get_stats(db, viewer, period=period)


@router.get("/admin/{admin_id}", response_model=AdminActivityListResponse)
async def list_activities_for_admin(
    admin_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    viewer: dict = Depends(get_current_admin),
    service: AdminActivityService = Depends(get_admin_activity_service),
):
    """One admin's activity, with the same redaction as the full log."""
    return await service.list_activities(db, viewer, page=page, limit=limit, admin_id=admin_id)
