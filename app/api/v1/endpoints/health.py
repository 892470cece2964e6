"""Health check endpoints."""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from app.config import settings
from app.core.doctor_lifecycle import SuspensionPolicy
from app.core.redis_client import check_redis_connection
from app.database import check_database_connection
from app.dependencies import get_suspension_policy

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    environment: str


class PolicyInfo(BaseModel):
    """Suspension thresholds the running instance enforces."""

    warning_threshold: int
    deletion_threshold: int


class DetailedHealthResponse(HealthResponse):
    """Detailed health check response model."""

    database: str
    redis: str
    suspension_policy: PolicyInfo


def _component(healthy: bool) -> str:
    return "healthy" if healthy else "unhealthy"


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check() -> HealthResponse:
    """Basic health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        environment=settings.environment,
    )


@router.get(
    "/health/detailed",
    response_model=DetailedHealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Detailed health check",
)
async def detailed_health_check(
    policy: SuspensionPolicy = Depends(get_suspension_policy),
) -> DetailedHealthResponse:
    """
    Detailed health check with database and Redis status.

    The database is required; Redis only backs the doctor cache, so losing it
    degrades the service without taking it down.
    """
    db_healthy = await check_database_connection()
    redis_healthy = await check_redis_connection()

    if not db_healthy:
        overall = "unhealthy"
    elif not redis_healthy:
        overall = "degraded"
    else:
        overall = "healthy"

    return DetailedHealthResponse(
        status=overall,
        version=settings.app_version,
        environment=settings.environment,
        database=_component(db_healthy),
        redis=_component(redis_healthy),
        suspension_policy=PolicyInfo(
            warning_threshold=policy.warning_threshold,
            deletion_threshold=policy.deletion_threshold,
        ),
    )


@router.get("/ping", status_code=status.HTTP_200_OK, summary="Simple ping")
async def ping() -> dict[str, str]:
    """Simple ping endpoint."""
    return {"message": "pong"}
