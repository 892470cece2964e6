"""Admin notification endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundException
from app.database import get_db
from app.dependencies import (
    get_activity_logger,
    get_audit_context,
    get_current_admin,
)
from app.schemas.admins import AdminRole
from app.schemas.notifications import (
    CleanupResponse,
    MarkAllReadResponse,
    NotificationCategory,
    NotificationCreate,
    NotificationListResponse,
    NotificationResponse,
    NotificationStats,
    NotificationType,
)
from app.services.activity_logger import ActivityAction, ActivityLogger, AuditContext
from app.services.notification_service import NotificationService

router = APIRouter(dependencies=[Depends(get_current_admin)])


@router.get("/", response_model=NotificationListResponse, summary="List admin notifications")
async def list_notifications(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    category: NotificationCategory | None = Query(None),
    notification_type: NotificationType | None = Query(None, alias="type"),
    is_read: bool | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> NotificationListResponse:
    """
    List notifications, newest first.

    ``unread`` counts every unread notification regardless of the filters.
    """
    result = await NotificationService.list_notifications(
        db,
        skip=skip,
        limit=limit,
        category=category,
        notification_type=notification_type,
        is_read=is_read,
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in result["notifications"]],
        total=result["total"],
        unread=result["unread"],
    )


@router.patch(
    "/read-all",
    response_model=MarkAllReadResponse,
    summary="Mark all notifications read",
)
async def mark_all_read(db: AsyncSession = Depends(get_db)) -> MarkAllReadResponse:
    """Mark every unread notification read."""
    updated = await NotificationService.mark_all_as_read(db)
    return MarkAllReadResponse(updated=updated)


@router.post("/", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
async def create_notification(
    notification_data: NotificationCreate,
    db: AsyncSession = Depends(get_db),
    audit: AuditContext = Depends(get_audit_context),
    activity_logger: ActivityLogger = Depends(get_activity_logger),
) -> NotificationResponse:
    """Post a notification to every admin."""
    notification = await NotificationService.create_notification(
        db,
        notification_data.title,
        notification_data.message,
        notification_type=notification_data.type,
        category=notification_data.category,
        priority=notification_data.priority,
        related_entity_id=notification_data.related_entity_id,
        related_entity_type=notification_data.related_entity_type,
        metadata=notification_data.metadata,
    )

    await activity_logger.log_activity(
        db,
        audit,
        ActivityAction.SEND_NOTIFICATION,
        f"Sent notification: {notification['title']}",
        {"notification_id": notification["id"], "category": notification["category"]},
    )

    return NotificationResponse.model_validate(notification)


@router.get("/stats", response_model=NotificationStats, summary="Notification statistics")
async def notification_stats(
    admin: dict = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> NotificationStats:
    """
    Count notifications by category and priority.

    Security and system notifications are only counted for Super Admins.
    """
    stats = await NotificationService.get_stats(
        db, include_restricted=admin["role"] == AdminRole.SUPER_ADMIN
    )
    return NotificationStats.model_validate(stats)


@router.delete(
    "/cleanup",
    response_model=CleanupResponse,
    summary="Delete old read notifications",
)
async def cleanup_notifications(
    days_old: int = Query(7, ge=0, description="Age in days of the read notifications to delete"),
    db: AsyncSession = Depends(get_db),
) -> CleanupResponse:
    """Delete read notifications older than ``days_old`` days. Unread ones are kept."""
    deleted = await NotificationService.cleanup_read(db, days_old=days_old)
    return CleanupResponse(deleted_count=deleted)


@router.get("/{notification_id}", response_model=NotificationResponse)
async def get_notification(
    notification_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> NotificationResponse:
    """Get a notification by ID."""
    notification = await NotificationService.get_notification(db, notification_id)
    if not notification:
        raise NotFoundException("Notification not found")
    return NotificationResponse.model_validate(notification)


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> NotificationResponse:
    """Mark one notification read."""
    notification = await NotificationService.mark_as_read(db, notification_id)
    if not notification:
        raise NotFoundException("Notification not found")
    return NotificationResponse.model_validate(notification)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a notification."""
    if not await NotificationService.delete_notification(db, notification_id):
        raise NotFoundException("Notification not found")
