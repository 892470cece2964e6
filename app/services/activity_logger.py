"""Admin activity audit sink."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import structlog
from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.admin_activities import admin_activities

logger = structlog.get_logger(__name__)


class ActivityAction(StrEnum):
    """Actions recorded in the admin activity log."""

    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    CREATE_ADMIN = "CREATE_ADMIN"
    UPDATE_ADMIN = "UPDATE_ADMIN"
    DELETE_ADMIN = "DELETE_ADMIN"
    PROMOTE_ADMIN = "PROMOTE_ADMIN"
    DEMOTE_ADMIN = "DEMOTE_ADMIN"
    APPROVE_DOCTOR = "APPROVE_DOCTOR"
    REJECT_DOCTOR = "REJECT_DOCTOR"
    SUSPEND_DOCTOR = "SUSPEND_DOCTOR"
    UNSUSPEND_DOCTOR = "UNSUSPEND_DOCTOR"
    DELETE_DOCTOR = "DELETE_DOCTOR"
    ADD_BLACKLIST = "ADD_BLACKLIST"
    UPDATE_BLACKLIST = "UPDATE_BLACKLIST"
    DELETE_BLACKLIST = "DELETE_BLACKLIST"
    SEND_NOTIFICATION = "SEND_NOTIFICATION"
    EXPORT_DATA = "EXPORT_DATA"
    SYSTEM_MAINTENANCE = "SYSTEM_MAINTENANCE"
    VIEW_ADMIN_ACTIVITIES = "VIEW_ADMIN_ACTIVITIES"


@dataclass(frozen=True)
class AuditContext:
    """Who performed a request and where it came from."""

    admin: dict[str, Any]
    ip_address: str = "unknown"
    user_agent: str = "unknown"

    @property
    def admin_id(self) -> Any:
        return self.admin["id"]

    @property
    def admin_name(self) -> str:
        return f"{self.admin['first_name']} {self.admin['last_name']}".strip()

    @property
    def admin_role(self) -> str:
        return str(self.admin["role"])


class ActivityLogger:
    """
    Writes admin activity entries.

    Logging is a side effect of an already committed action, so a failure
    here is reported through structlog and never raised to the caller.
    """

    async def log_activity(
        self,
        db: AsyncSession,
        audit: AuditContext,
        action: ActivityAction,
        details: str,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        """
        Record one activity entry.

        Args:
            db: Database session
            audit: Acting admin and request origin
            action: Action performed
            details: Human readable description
            metadata: Additional structured context

        Returns:
            True if the entry was written, False otherwise
        """
        values = {
            "admin_id": audit.admin_id,
            "admin_name": audit.admin_name,
            "admin_role": audit.admin_role,
            "action": str(action),
            "details": details,
            "ip_address": audit.ip_address,
            "user_agent": audit.user_agent,
            "metadata": jsonable_encoder(metadata or {}),
        }

        try:
            await self._write(db, values)
        except Exception as e:
            await db.rollback()
            logger.error(
                "activity_log_failed",
                action=str(action),
                admin_id=str(audit.admin_id),
                error=str(e),
            )
            return False

        logger.info("activity_logged", action=str(action), admin=audit.admin_name)
        return True

    async def _write(self, db: AsyncSession, values: dict[str, Any]) -> None:
        await db.execute(admin_activities.insert().values(**values))
        await db.commit()
