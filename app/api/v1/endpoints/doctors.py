"""Doctor management endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.doctor_lifecycle import DoctorStatus
from app.core.exceptions import NotFoundException
from app.core.redis_client import CacheManager
from app.database import get_db
from app.dependencies import (
    get_activity_logger,
    get_audit_context,
    get_cache_manager,
    get_current_admin,
)
from app.schemas.doctors import (
    DoctorCreate,
    DoctorDeleteResponse,
    DoctorResponse,
    DoctorSentimentUpdate,
    DoctorStatusUpdate,
    DoctorUpdate,
)
from app.services.activity_logger import ActivityLogger, AuditContext
from app.services.doctor_service import DoctorService

router = APIRouter(dependencies=[Depends(get_current_admin)])


def get_doctor_service(
    cache_manager: CacheManager = Depends(get_cache_manager),
    activity_logger: ActivityLogger = Depends(get_activity_logger),
) -> DoctorService:
    """Get doctor service instance."""
    return DoctorService(cache_manager=cache_manager, activity_logger=activity_logger)


# ============================================================================
# Doctor CRUD Endpoints
# ============================================================================


@router.post("/", response_model=DoctorResponse, status_code=status.HTTP_201_CREATED)
async def create_doctor(
    doctor_data: DoctorCreate,
    db: AsyncSession = Depends(get_db),
    doctor_service: DoctorService = Depends(get_doctor_service),
):
    """
    Register a doctor for review. New doctors start as ``pending``.

    - **doctor_name**: Full name
    - **email**: Contact email (unique)
    - **phone**: Contact phone
    - **specialization**: Medical specializations
    - **licenses**: License numbers
    - **department**: Department
    - **about**: Biography

    Credentials that appear on the blacklist are refused with 403.
    """
    return await doctor_service.create_doctor(db, doctor_data)


@router.get("/", response_model=list[DoctorResponse])
async def list_doctors(
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(20, ge=1, le=100, description="Number of records to return"),
    status_filter: DoctorStatus | None = Query(None, alias="status", description="Filter by status"),
    specialization: str | None = Query(None, description="Filter by specialization"),
    db: AsyncSession = Depends(get_db),
    doctor_service: DoctorService = Depends(get_doctor_service),
):
    """List doctors, newest first."""
    doctors_list = await doctor_service.get_doctors(
        db=db,
        skip=skip,
        limit=limit,
        status=status_filter,
        specialization=specialization,
    )

    return [DoctorResponse.model_validate(d) for d in doctors_list]


@router.get("/{doctor_id}", response_model=DoctorResponse)
async def get_doctor(
    doctor_id: UUID,
    db: AsyncSession = Depends(get_db),
    doctor_service: DoctorService = Depends(get_doctor_service),
):
    """Get doctor details by ID."""
    doctor = await doctor_service.get_doctor_by_id(db, doctor_id)

    if not doctor:
        raise NotFoundException("Doctor not found")

    return DoctorResponse.model_validate(doctor)


@router.patch("/{doctor_id}", response_model=DoctorResponse)
async def update_doctor(
    doctor_id: UUID,
    doctor_data: DoctorUpdate,
    db: AsyncSession = Depends(get_db),
    doctor_service: DoctorService = Depends(get_doctor_service),
):
    """Update doctor profile fields. Only provided fields are changed."""
    doctor = await doctor_service.update_doctor(db, doctor_id, doctor_data)

    if not doctor:
        raise NotFoundException("Doctor not found")

    return DoctorResponse.model_validate(doctor)


@router.patch("/{doctor_id}/status", response_model=DoctorResponse)
async def update_doctor_status(
    doctor_id: UUID,
    status_data: DoctorStatusUpdate,
    db: AsyncSession = Depends(get_db),
    audit: AuditContext = Depends(get_audit_context),
    doctor_service: DoctorService = Depends(get_doctor_service),
):
    """
    Change a doctor's status.

    Allowed: pending to approved or rejected, approved to rejected, rejected
    to approved or pending, and suspended to approved. Approving a suspended
    doctor revokes its active suspensions. Suspending goes through
    ``POST /doctors/{doctor_id}/suspend``.

    A doctor rejected for the third time has its credentials blacklisted.
    """
    doctor = await doctor_service.change_status(
        db, doctor_id, status_data.status, audit, reason=status_data.reason
    )
    return DoctorResponse.model_validate(doctor)


@router.patch("/{doctor_id}/sentiment", response_model=DoctorResponse)
async def update_doctor_sentiment(
    doctor_id: UUID,
    sentiment_data: DoctorSentimentUpdate,
    db: AsyncSession = Depends(get_db),
    doctor_service: DoctorService = Depends(get_doctor_service),
):
    """Update a doctor's patient sentiment and, optionally, its score."""
    doctor = await doctor_service.update_sentiment(db, doctor_id, sentiment_data)

    if not doctor:
        raise NotFoundException("Doctor not found")

    return DoctorResponse.model_validate(doctor)


@router.delete("/{doctor_id}", response_model=DoctorDeleteResponse)
async def delete_doctor(
    doctor_id: UUID,
    db: AsyncSession = Depends(get_db),
    audit: AuditContext = Depends(get_audit_context),
    doctor_service: DoctorService = Depends(get_doctor_service),
):
    """Permanently delete a doctor and blacklist its credentials."""
    doctor = await doctor_service.delete_doctor(db, doctor_id, audit)
    return DoctorDeleteResponse(
        id=doctor["id"],
        doctor_name=doctor["doctor_name"],
        blacklisted=True,
        message=f"Doctor {doctor['doctor_name']} has been deleted and blacklisted",
    )
