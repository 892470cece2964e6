"""Doctor suspension endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.endpoints.doctors import get_doctor_service
from app.core.doctor_lifecycle import SuspensionPolicy
from app.database import get_db
from app.dependencies import (
    get_activity_logger,
    get_audit_context,
    get_current_admin,
    get_suspension_policy,
)
from app.schemas.doctors import DoctorResponse
from app.schemas.suspensions import (
    SuspensionCountResponse,
    SuspensionCreate,
    SuspensionListResponse,
    SuspensionResponse,
    SuspensionResult,
)
from app.services.activity_logger import ActivityLogger, AuditContext
from app.services.doctor_service import DoctorService
from app.services.suspension_service import SuspensionService

router = APIRouter(dependencies=[Depends(get_current_admin)])


def get_suspension_service(
    policy: SuspensionPolicy = Depends(get_suspension_policy),
    activity_logger: ActivityLogger = Depends(get_activity_logger),
    doctor_service: DoctorService = Depends(get_doctor_service),
) -> SuspensionService:
    """Get suspension service instance."""
    return SuspensionService(
        policy=policy,
        activity_logger=activity_logger,
        doctor_service=doctor_service,
    )


@router.get("/{doctor_id}/suspension-count", response_model=SuspensionCountResponse)
async def get_suspension_count(
    doctor_id: UUID,
    db: AsyncSession = Depends(get_db),
    service: SuspensionService = Depends(get_suspension_service),
):
    """
    Get how many times a doctor has been suspended.

    ``next_suspension_will_delete`` and ``standing`` tell the panel whether
    one more suspension deletes the doctor.
    """
    return await service.get_suspension_count(db, doctor_id)


@router.post("/{doctor_id}/suspend", response_model=SuspensionResult)
async def suspend_doctor(
    doctor_id: UUID,
    request: SuspensionCreate,
    db: AsyncSession = Depends(get_db),
    audit: AuditContext = Depends(get_audit_context),
    service: SuspensionService = Depends(get_suspension_service),
):
    """
    Suspend a doctor.

    - **suspension_type**: temporary, permanent or investigation
    - **severity**: minor, moderate, major or critical
    - **reasons**: At least one non-blank reason
    - **duration**: Days (default 30); -1 or null for indefinite
    - **end_date**: Explicit end date, overrides duration
    - **impact**: Restricted capabilities; system_access implies all

    When the doctor already has as many suspensions as the policy tolerates,
    the doctor is deleted and blacklisted instead, and ``deleted`` is true.
    """
    result = await service.suspend_doctor(db, doctor_id, request, audit)

    if result["deleted"]:
        return SuspensionResult(
            deleted=True,
            message=result["message"],
            suspension_count=result["suspension_count"],
        )

    return SuspensionResult(
        message=result["message"],
        suspension_count=result["suspension_count"],
        warning=result["warning"],
        doctor=DoctorResponse.model_validate(result["doctor"]),
        suspension=SuspensionResponse.from_record(result["suspension"]),
    )


@router.get("/{doctor_id}/suspensions", response_model=SuspensionListResponse)
async def list_suspensions(
    doctor_id: UUID,
    db: AsyncSession = Depends(get_db),
    service: SuspensionService = Depends(get_suspension_service),
):
    """Get a doctor's suspension history, newest first."""
    records = await service.list_suspensions(db, doctor_id)
    return SuspensionListResponse(
        suspensions=[SuspensionResponse.from_record(record) for record in records],
        count=len(records),
    )
