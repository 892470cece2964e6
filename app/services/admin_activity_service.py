"""Admin activity log queries with role-based redaction."""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.admin_activities import admin_activities
from app.schemas.admins import AdminRole
from app.services.activity_logger import ActivityAction

# Hidden entirely from anyone below Super Admin
SENSITIVE_ACTIONS: frozenset[str] = frozenset(
    {
        ActivityAction.CREATE_ADMIN,
        ActivityAction.DELETE_ADMIN,
        ActivityAction.PROMOTE_ADMIN,
        ActivityAction.DEMOTE_ADMIN,
        ActivityAction.EXPORT_DATA,
        ActivityAction.SYSTEM_MAINTENANCE,
    }
)

# Visible to everyone, but with the acting admin masked
ANONYMIZED_ACTIONS: frozenset[str] = frozenset({ActivityAction.UPDATE_ADMIN})

STATS_PERIODS: dict[str, timedelta] = {
    "1d": timedelta(days=1),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
}


def is_super_admin(viewer: dict[str, Any]) -> bool:
    """Check whether the viewer sees the unredacted log."""
    return viewer.get("role") == AdminRole.SUPER_ADMIN


def serialize_activity(row: dict[str, Any]) -> dict[str, Any]:
    """Convert a database row into a response dict."""
    activity = dict(row)
    activity["id"] = str(activity["id"])
    activity["admin_id"] = str(activity["admin_id"])
    activity["metadata"] = activity.get("metadata") or {}
    return activity


def redact_activity(activity: dict[str, Any], viewer: dict[str, Any]) -> dict[str, Any] | None:
    """
    Apply role-based redaction to one serialized activity.

    Returns:
        The activity as the viewer may see it, or None if it must be hidden
    """
    if is_super_admin(viewer):
        return activity

    if activity["action"] in SENSITIVE_ACTIONS:
        return None

    if activity["action"] in ANONYMIZED_ACTIONS:
        return {
            **activity,
            "admin_id": "anonymous",
            "admin_name": "Admin User",
            "admin_role": AdminRole.ADMIN.value,
            "ip_address": "***.***.***.***",
            "user_agent": "Anonymous Browser",
            "metadata": {},
        }

    return activity


def redact_activities(rows: list[dict[str, Any]], viewer: dict[str, Any]) -> list[dict[str, Any]]:
    """Serialize and redact a list of rows, dropping hidden ones."""
    visible = []
    for row in rows:
        activity = redact_activity(serialize_activity(row), viewer)
        if activity is not None:
            visible.append(activity)
    return visible


class AdminActivityService:
    """Service for reading the admin activity log."""

    @staticmethod
    def _visibility_conditions(viewer: dict[str, Any]) -> list:
        if is_super_admin(viewer):
            return []
        return [admin_activities.c.action.notin_(sorted(SENSITIVE_ACTIONS))]

    async def list_activities(
        self,
        db: AsyncSession,
        viewer: dict[str, Any],
        page: int = 1,
        limit: int = 50,
        admin_id: UUID | None = None,
        action: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> dict[str, Any]:
        """
        Get a page of activities visible to the viewer.

        Sensitive actions are excluded in the query itself so that totals and
        page sizes match what the viewer actually receives.
        """
        conditions: list = self._visibility_conditions(viewer)

        if admin_id:
            conditions.append(admin_activities.c.admin_id == admin_id)
        if action:
            conditions.append(admin_activities.c.action == action)
        if start_date:
            conditions.append(admin_activities.c.created_at >= start_date)
        if end_date:
            conditions.append(admin_activities.c.created_at <= end_date)

        where_clause = and_(*conditions) if conditions else True

        count_query = select(func.count()).select_from(admin_activities).where(where_clause)
        total = (await db.execute(count_query)).scalar_one()

        query = (
            select(admin_activities)
            .where(where_clause)
            .order_by(admin_activities.c.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await db.execute(query)
        rows = [dict(row) for row in result.mappings().all()]

        return {
            "activities": redact_activities(rows, viewer),
            "pagination": {
                "current_page": page,
                "total_pages": (total + limit - 1) // limit,
                "total_items": total,
                "items_per_page": limit,
            },
        }

    async def get_stats(
        self,
        db: AsyncSession,
        viewer: dict[str, Any],
        period: str = "7d",
    ) -> dict[str, Any]:
        """Aggregate activity for a period; unknown periods fall back to 7 days."""
        if period not in STATS_PERIODS:
            period = "7d"
        since = datetime.now(UTC) - STATS_PERIODS[period]

        conditions = [admin_activities.c.created_at >= since, *self._visibility_conditions(viewer)]
        where_clause = and_(*conditions)

        total = (
            await db.execute(select(func.count()).select_from(admin_activities).where(where_clause))
        ).scalar_one()

        count_col = func.count().label("activity_count")
        by_action = await db.execute(
            select(admin_activities.c.action, count_col)
            .where(where_clause)
            .group_by(admin_activities.c.action)
            .order_by(count_col.desc())
        )

        # Admin names are not exposed to a regular viewer for masked actions
        admin_conditions = list(conditions)
        if not is_super_admin(viewer):
            admin_conditions.append(admin_activities.c.action.notin_(sorted(ANONYMIZED_ACTIONS)))
        by_admin = await db.execute(
            select(admin_activities.c.admin_name, count_col)
            .where(and_(*admin_conditions))
            .group_by(admin_activities.c.admin_name)
            .order_by(count_col.desc())
            .limit(10)
        )

        recent = await db.execute(
            select(admin_activities)
            .where(where_clause)
            .order_by(admin_activities.c.created_at.desc())
            .limit(10)
        )

        return {
            "period": period,
            "total_activities": total,
            "activities_by_action": [
                {"key": row.action, "count": row.activity_count} for row in by_action.all()
            ],
            "activities_by_admin": [
                {"key": row.admin_name, "count": row.activity_count} for row in by_admin.all()
            ],
            "recent_activities": redact_activities(
                [dict(row) for row in recent.mappings().all()], viewer
            ),
        }
