"""FastAPI dependencies."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.doctor_lifecycle import SuspensionPolicy
from app.core.exceptions import ForbiddenException, UnauthorizedException
from app.core.redis_client import CacheManager, get_redis_client
from app.core.security import decode_access_token
from app.database import get_db
from app.schemas.admins import AdminRole
from app.services.activity_logger import ActivityLogger, AuditContext
from app.services.admin_service import AdminService

# Security; missing credentials are reported as 401 below, not by HTTPBearer
security = HTTPBearer(auto_error=False)


def get_cache_manager() -> CacheManager:
    """Get cache manager backed by the shared Redis client."""
    return CacheManager(get_redis_client())


async def get_current_admin_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> UUID:
    """
    Extract and validate admin ID from JWT token.

    Args:
        credentials: Bearer token credentials

    Returns:
        Admin ID from token

    Raises:
        UnauthorizedException: If token is missing, invalid or expired
    """
    if credentials is None:
        raise UnauthorizedException("Not authenticated")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedException("Could not validate credentials")

    admin_id_str = payload.get("sub")
    if admin_id_str is None or not isinstance(admin_id_str, str):
        raise UnauthorizedException("Could not validate credentials")

    try:
        return UUID(admin_id_str)
    except ValueError:
        raise UnauthorizedException("Invalid admin ID format")


async def get_current_admin(
    admin_id: Annotated[UUID, Depends(get_current_admin_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """
    Get current admin from database.

    Raises:
        UnauthorizedException: If the admin no longer exists
        ForbiddenException: If the admin is deactivated
    """
    admin = await AdminService.get_admin_by_id(db, admin_id)

    if not admin:
        raise UnauthorizedException("Admin not found")

    if not admin["is_active"]:
        raise ForbiddenException("Admin account is deactivated")

    return admin


async def require_super_admin(
    admin: Annotated[dict, Depends(get_current_admin)],
) -> dict:
    """Dependency to ensure the current admin is a Super Admin."""
    if admin["role"] != AdminRole.SUPER_ADMIN:
        raise ForbiddenException("Super Admin access required")
    return admin


def get_client_ip(request: Request) -> str:
    """Client address, preferring the first hop of X-Forwarded-For."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def get_audit_context(
    request: Request,
    admin: Annotated[dict, Depends(get_current_admin)],
) -> AuditContext:
    """Acting admin plus request origin, for the activity log."""
    return AuditContext(
        admin=admin,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent", "unknown"),
    )


def get_suspension_policy() -> SuspensionPolicy:
    """Escalation policy built from settings."""
    return SuspensionPolicy(
        warning_threshold=settings.suspension_warning_threshold,
        deletion_threshold=settings.suspension_deletion_threshold,
    )


def get_activity_logger() -> ActivityLogger:
    """Activity log sink."""
    return ActivityLogger()


# Type aliases for dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
Cache = Annotated[CacheManager | None, Depends(get_cache_manager)]
CurrentAdmin = Annotated[dict, Depends(get_current_admin)]
SuperAdmin = Annotated[dict, Depends(require_super_admin)]
Audit = Annotated[AuditContext, Depends(get_audit_context)]
Policy = Annotated[SuspensionPolicy, Depends(get_suspension_policy)]
AuditLogger = Annotated[ActivityLogger, Depends(get_activity_logger)]
