"""Authentication endpoints."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_activity_logger, get_client_ip
from app.schemas.admins import AdminResponse
from app.schemas.auth import LoginRequest, TokenResponse
from app.services.activity_logger import ActivityLogger
from app.services.auth_service import AuthService

router = APIRouter()


@router.post(
    "/login",
    response_model=TokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Admin password login",
)
async def login(
    credentials: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    activity_logger: ActivityLogger = Depends(get_activity_logger),
) -> TokenResponse:
    """
    Exchange admin email and password for a Bearer access token.

    Raises:
        401: If the email or password is wrong
        403: If the admin account is deactivated
    """
    auth_service = AuthService(activity_logger)
    admin, token, expires_in = await auth_service.login(
        db,
        email=credentials.email,
        password=credentials.password,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent", "unknown"),
    )

    return TokenResponse(
        access_token=token,
        expires_in=expires_in,
        admin=AdminResponse.model_validate(admin),
    )
