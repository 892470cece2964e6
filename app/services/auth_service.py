"""Authentication service for admin password login and JWT."""

from datetime import timedelta

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import ForbiddenException, UnauthorizedException
from app.core.security import create_access_token, verify_password
from app.services.activity_logger import ActivityAction, ActivityLogger, AuditContext
from app.services.admin_service import AdminService

logger = structlog.get_logger(__name__)


class AuthService:
    """Authentication service for handling admin login and JWT operations."""

    def __init__(self, activity_logger: ActivityLogger | None = None):
        """Initialize auth service with an activity logger."""
        self.activity_logger = activity_logger or ActivityLogger()

    @staticmethod
    def create_token(admin: dict) -> tuple[str, int]:
        """
        Create an access token for an admin.

        Args:
            admin: Admin record

        Returns:
            Tuple of (encoded token, lifetime in seconds)
        """
        expires_in = settings.access_token_expire_minutes * 60
        token = create_access_token(
            data={"sub": str(admin["id"]), "role": admin["role"]},
            expires_delta=timedelta(seconds=expires_in),
        )
        return token, expires_in

    async def login(
        self,
        db: AsyncSession,
        email: str,
        password: str,
        ip_address: str = "unknown",
        user_agent: str = "unknown",
    ) -> tuple[dict, str, int]:
        """
        Authenticate an admin by email and password.

        Returns:
            Tuple of (admin dict, access token, lifetime in seconds)

        Raises:
            UnauthorizedException: If the credentials are wrong
            ForbiddenException: If the account is deactivated
        """
        admin = await AdminService.get_admin_by_email(db, email)

        if not admin or not verify_password(password, admin["password_hash"]):
            logger.warning("admin_login_failed", email=email.lower())
            raise UnauthorizedException("Invalid email or password")

        if not admin["is_active"]:
            raise ForbiddenException("Admin account is deactivated")

        admin = await AdminService.update_last_login(db, admin["id"]) or admin
        token, expires_in = self.create_token(admin)

        await self.activity_logger.log_activity(
            db,
            AuditContext(admin=admin, ip_address=ip_address, user_agent=user_agent),
            ActivityAction.LOGIN,
            f"Admin {admin['first_name']} {admin['last_name']} logged in",
            {"email": admin["email"]},
        )

        logger.info("admin_logged_in", admin_id=str(admin["id"]))
        return admin, token, expires_in
