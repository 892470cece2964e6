"""Admin notification service."""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import structlog
from fastapi.encoders import jsonable_encoder
from sqlalchemy import and_, case, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.notifications import notifications

logger = structlog.get_logger(__name__)

# Categories only Super Admins see in the stats
RESTRICTED_CATEGORIES = ("security", "system")


class NotificationService:
    """Service for the admin notification feed."""

    @staticmethod
    async def create_notification(
        db: AsyncSession,
        title: str,
        message: str,
        notification_type: str = "info",
        category: str = "system",
        priority: str = "medium",
        related_entity_id: UUID | None = None,
        related_entity_type: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> dict:
        """
        Create and commit an admin notification.

        Args:
            db: Database session
            title: Notification title
            message: Notification body
            notification_type: info, success, warning or alert
            category: suspensions, security, doctors or system
            priority: low, medium or high
            related_entity_id: ID of the entity this is about
            related_entity_type: Type name of that entity
            metadata: Additional structured context

        Returns:
            Created notification
        """
        query = (
            notifications.insert()
            .values(
                title=title,
                message=message,
                type=notification_type,
                category=category,
                priority=priority,
                recipients="admin",
                related_entity_id=related_entity_id,
                related_entity_type=related_entity_type,
                metadata=jsonable_encoder(metadata or {}),
            )
            .returning(notifications)
        )

        result = await db.execute(query)
        notification = result.mappings().first()
        await db.commit()

        if not notification:
            raise ValueError("Failed to create notification")

        return dict(notification)

    @classmethod
    async def notify_admins(cls, db: AsyncSession, title: str, message: str, **kwargs: Any) -> bool:
        """
        Create a notification as a side effect of another action.

        Failures are logged and swallowed so the calling action still succeeds.
        """
        try:
            await cls.create_notification(db, title, message, **kwargs)
        except Exception as e:
            await db.rollback()
            logger.error("admin_notification_failed", title=title, error=str(e))
            return False

        logger.info("admin_notification_created", title=title)
        return True

    @staticmethod
    async def list_notifications(
        db: AsyncSession,
        skip: int = 0,
        limit: int = 50,
        category: str | None = None,
        notification_type: str | None = None,
        is_read: bool | None = None,
    ) -> dict:
        """List notifications newest first, with total and unread counts."""
        conditions: list = []
        if category:
            conditions.append(notifications.c.category == category)
        if notification_type:
            conditions.append(notifications.c.type == notification_type)
        if is_read is not None:
            conditions.append(notifications.c.is_read == is_read)

        where_clause = and_(*conditions) if conditions else True

        total = (
            await db.execute(select(func.count()).select_from(notifications).where(where_clause))
        ).scalar_one()
        unread = (
            await db.execute(
                select(func.count())
                .select_from(notifications)
                .where(notifications.c.is_read == False)  # noqa: E712
            )
        ).scalar_one()

        query = (
            select(notifications)
            .where(where_clause)
            .order_by(notifications.c.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await db.execute(query)

        return {
            "notifications": [dict(row) for row in result.mappings().all()],
            "total": total,
            "unread": unread,
        }

    @staticmethod
    async def get_notification(db: AsyncSession, notification_id: UUID) -> dict | None:
        """Get a notification by ID."""
        result = await db.execute(select(notifications).where(notifications.c.id == notification_id))
        notification = result.mappings().first()
        return dict(notification) if notification else None

    @staticmethod
    async def mark_as_read(db: AsyncSession, notification_id: UUID) -> dict | None:
        """Mark one notification read."""
        query = (
            update(notifications)
            .where(notifications.c.id == notification_id)
            .values(is_read=True, read_at=datetime.now(UTC))
            .returning(notifications)
        )
        result = await db.execute(query)
        notification = result.mappings().first()
        await db.commit()
        return dict(notification) if notification else None

    @staticmethod
    async def mark_all_as_read(db: AsyncSession) -> int:
        """Mark every unread notification read."""
        query = (
            update(notifications)
            .where(notifications.c.is_read == False)  # noqa: E712
            .values(is_read=True, read_at=datetime.now(UTC))
        )
        result = await db.execute(query)
        await db.commit()
        return result.rowcount or 0

    @staticmethod
    async def delete_notification(db: AsyncSession, notification_id: UUID) -> bool:
        """Delete a notification."""
        result = await db.execute(delete(notifications).where(notifications.c.id == notification_id))
        await db.commit()
        return (result.rowcount or 0) > 0

    @staticmethod
    async def cleanup_read(db: AsyncSession, days_old: int = 7) -> int:
        """Delete read notifications that were read more than ``days_old`` days ago."""
        cutoff = datetime.now(UTC) - timedelta(days=days_old)
        result = await db.execute(
            delete(notifications).where(
                notifications.c.is_read == True,  # noqa: E712
                notifications.c.read_at < cutoff,
            )
        )
        await db.commit()

        deleted = result.rowcount or 0
        logger.info("notifications_cleaned_up", deleted=deleted, days_old=days_old)
        return deleted

    @staticmethod
    async def get_stats(db: AsyncSession, include_restricted: bool = True) -> dict:
        """
        Count notifications by category and by priority.

        Args:
            db: Database session
            include_restricted: Whether security and system notifications count
        """
        where_clause = (
            True if include_restricted else notifications.c.category.not_in(RESTRICTED_CATEGORIES)
        )
        unread = func.sum(case((notifications.c.is_read == False, 1), else_=0))  # noqa: E712

        async def _buckets(column) -> dict[str, dict[str, int]]:
            result = await db.execute(
                select(
                    column.label("bucket"),
                    func.count().label("bucket_count"),
                    unread.label("unread_count"),
                )
                .where(where_clause)
                .group_by(column)
            )
            return {
                row.bucket: {"count": row.bucket_count, "unread_count": int(row.unread_count or 0)}
                for row in result.all()
            }

        by_category = await _buckets(notifications.c.category)
        by_priority = await _buckets(notifications.c.priority)

        return {
            "total": sum(b["count"] for b in by_category.values()),
            "unread": sum(b["unread_count"] for b in by_category.values()),
            "by_category": by_category,
            "by_priority": by_priority,
        }
