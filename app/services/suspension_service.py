"""Doctor suspension workflow."""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.doctor_lifecycle import DoctorStatus, SuspensionOutcome, SuspensionPolicy
from app.core.exceptions import NotFoundException, ValidationException
from app.models.doctor_suspensions import doctor_suspensions
from app.models.doctors import doctors
from app.schemas.suspensions import SuspensionCreate, SuspensionStatus
from app.services.activity_logger import ActivityAction, ActivityLogger, AuditContext
from app.services.blacklist_service import BlacklistService
from app.services.doctor_service import DoctorService
from app.services.notification_service import NotificationService

logger = structlog.get_logger(__name__)


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def build_suspension_values(
    doctor_id: UUID,
    request: SuspensionCreate,
    reasons: list[str],
    suspended_by: UUID,
    now: datetime,
) -> dict[str, Any]:
    """
    Column values for a new ``active`` suspension record.

    The end date is the explicit ``end_date`` when given, otherwise
    ``now + duration`` days. Indefinite suspensions have neither an end date
    nor a duration, and an ``end_date`` sent with one is ignored.
    """
    if request.is_indefinite:
        duration_days = None
        end_date = None
    else:
        duration_days = request.duration
        end_date = request.end_date or now + timedelta(days=request.duration)

    impact = request.impact
    return {
        "doctor_id": doctor_id,
        "suspension_type": request.suspension_type.value,
        "status": SuspensionStatus.ACTIVE.value,
        "severity": request.severity.value,
        "reasons": [
            {
                "category": request.reason_category.value,
                "description": reason,
                "severity": request.severity.value,
            }
            for reason in reasons
        ],
        "start_date": now,
        "end_date": end_date,
        "duration_days": duration_days,
        "patient_access": impact.patient_access,
        "appointment_scheduling": impact.appointment_scheduling,
        "prescription_writing": impact.prescription_writing,
        "system_access": impact.system_access,
        "suspended_by": suspended_by,
        "reviewed_by": [],
        "appeal_status": "none",
        "appeal_notes": "",
        "notification_sent": True,
        "doctor_notified": True,
        "patients_notified": False,
        "publicly_visible": False,
    }


class SuspensionService:
    """
    Suspends doctors and escalates repeat offenders to deletion.

    The count, the escalation decision and every write for one request run
    in a single transaction holding a row lock on the doctor. Activity
    logging, notifications and cache invalidation only happen after that
    transaction commits, and their failures never reach the caller.
    """

    def __init__(
        self,
        policy: SuspensionPolicy,
        activity_logger: ActivityLogger,
        doctor_service: DoctorService | None = None,
    ):
        self.policy = policy
        self.activity_logger = activity_logger
        self.doctor_service = doctor_service or DoctorService()

    @staticmethod
    async def count_suspensions(db: AsyncSession, doctor_id: UUID) -> int:
        """Count every suspension record ever issued to a doctor."""
        query = (
            select(func.count())
            .select_from(doctor_suspensions)
            .where(doctor_suspensions.c.doctor_id == doctor_id)
        )
        return (await db.execute(query)).scalar_one()

    async def _require_doctor(self, db: AsyncSession, doctor_id: UUID) -> dict:
        doctor = await self.doctor_service.get_doctor_by_id(db, doctor_id)
        if not doctor:
            raise NotFoundException("Doctor not found")
        return doctor

    async def get_suspension_count(self, db: AsyncSession, doctor_id: UUID) -> dict[str, Any]:
        """Get a doctor's suspension count and where it stands against the policy."""
        doctor = await self._require_doctor(db, doctor_id)
        count = await self.count_suspensions(db, doctor_id)

        return {
            "doctor_id": doctor_id,
            "doctor_name": doctor["doctor_name"],
            "suspension_count": count,
            "warning_threshold": self.policy.warning_threshold,
            "deletion_threshold": self.policy.deletion_threshold,
            "is_at_warning_threshold": self.policy.is_at_warning(count),
            "next_suspension_will_delete": self.policy.next_will_delete(count),
            "standing": self.policy.standing(count).value,
        }

    async def list_suspensions(self, db: AsyncSession, doctor_id: UUID) -> list[dict]:
        """Get a doctor's suspension records, newest first."""
        await self._require_doctor(db, doctor_id)

        query = (
            select(doctor_suspensions)
            .where(doctor_suspensions.c.doctor_id == doctor_id)
            .order_by(doctor_suspensions.c.start_date.desc(), doctor_suspensions.c.created_at.desc())
        )
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    async def suspend_doctor(
        self,
        db: AsyncSession,
        doctor_id: UUID,
        request: SuspensionCreate,
        audit: AuditContext,
    ) -> dict[str, Any]:
        """
        Suspend a doctor, or delete and blacklist it once the policy says so.

        Args:
            db: Database session
            doctor_id: Doctor to suspend
            request: Suspension details
            audit: Acting admin and request origin

        Returns:
            ``{doctor, suspension, suspension_count, warning}`` on the normal
            path, or ``{deleted: True, message, suspension_count}`` when the
            doctor was deleted

        Raises:
            ValidationException: If no non-blank reason was given
            NotFoundException: If the doctor does not exist
        """
        reasons = request.clean_reasons()
        if not reasons:
            raise ValidationException("At least one suspension reason is required")

        now = datetime.now(UTC)

        try:
            doctor = await DoctorService.lock_doctor(db, doctor_id)
            if doctor is None:
                raise NotFoundException("Doctor not found")

            count = await self.count_suspensions(db, doctor_id)
            outcome = self.policy.decide(count)

            values = build_suspension_values(doctor_id, request, reasons, audit.admin_id, now)
            record_result = await db.execute(
                doctor_suspensions.insert().values(**values).returning(doctor_suspensions)
            )
            suspension = dict(record_result.mappings().one())

            if outcome is SuspensionOutcome.DELETE:
                await BlacklistService.add_to_blacklist(
                    db,
                    reason="doctor_deleted",
                    email=doctor["email"],
                    phone=doctor["phone"],
                    licenses=doctor["licenses"],
                    original_entity_id=doctor_id,
                    original_entity_name=doctor["doctor_name"],
                    description=(
                        f"Doctor automatically deleted due to {_ordinal(count + 1)} suspension. "
                        f"Suspension count: {count + 1}"
                    ),
                    created_by=audit.admin_id,
                )
                await db.execute(
                    delete(doctor_suspensions).where(doctor_suspensions.c.doctor_id == doctor_id)
                )
                await db.execute(delete(doctors).where(doctors.c.id == doctor_id))
            else:
                doctor_result = await db.execute(
                    update(doctors)
                    .where(doctors.c.id == doctor_id)
                    .values(status=DoctorStatus.SUSPENDED.value)
                    .returning(doctors)
                )
                doctor = dict(doctor_result.mappings().one())

            await db.commit()
        except Exception:
            await db.rollback()
            raise

        new_count = count + 1
        self.doctor_service.invalidate_doctor(doctor_id)

        if outcome is SuspensionOutcome.DELETE:
            logger.warning(
                "doctor_auto_deleted",
                doctor_id=str(doctor_id),
                suspension_count=new_count,
            )
            await self._after_deletion(db, doctor, suspension, new_count, audit)
            return {
                "deleted": True,
                "message": (
                    f"Doctor {doctor['doctor_name']} has been automatically deleted "
                    f"due to {_ordinal(new_count)} suspension"
                ),
                "suspension_count": new_count,
            }

        logger.info(
            "doctor_suspended",
            doctor_id=str(doctor_id),
            suspension_id=str(suspension["id"]),
            suspension_count=new_count,
        )
        await self._after_suspension(db, doctor, suspension, new_count, audit)

        warning = None
        if self.policy.is_at_warning(new_count):
            warning = (
                f"Doctor has {new_count} suspensions. Suspension number "
                f"{self.policy.deletion_threshold} will permanently delete and blacklist this doctor."
            )

        return {
            "deleted": False,
            "message": f"Doctor {doctor['doctor_name']} has been suspended",
            "doctor": doctor,
            "suspension": suspension,
            "suspension_count": new_count,
            "warning": warning,
        }

    async def _log_suspension(
        self, db: AsyncSession, doctor: dict, suspension: dict, new_count: int, audit: AuditContext
    ) -> None:
        await self.activity_logger.log_activity(
            db,
            audit,
            ActivityAction.SUSPEND_DOCTOR,
            f"Suspended doctor {doctor['doctor_name']}",
            {
                "doctor_id": doctor["id"],
                "doctor_name": doctor["doctor_name"],
                "suspension_id": suspension["id"],
                "suspension_type": suspension["suspension_type"],
                "suspension_count": new_count,
                "suspended_by": audit.admin_id,
            },
        )

    async def _notify_suspended(
        self, db: AsyncSession, doctor: dict, suspension: dict, new_count: int, audit: AuditContext
    ) -> None:
        duration = suspension["duration_days"]
        reasons = ", ".join(reason["description"] for reason in suspension["reasons"])
        await NotificationService.notify_admins(
            db,
            "Doctor Suspended",
            f"Doctor {doctor['doctor_name']} has been suspended. "
            f"Type: {suspension['suspension_type']}, "
            f"Duration: {f'{duration} days' if duration else 'indefinite'}. Reasons: {reasons}",
            notification_type="warning",
            category="suspensions",
            priority="high",
            related_entity_id=doctor["id"],
            related_entity_type="Doctor",
            metadata={
                "doctor_name": doctor["doctor_name"],
                "doctor_email": doctor["email"],
                "suspension_type": suspension["suspension_type"],
                "duration": duration,
                "suspension_count": new_count,
                "action": "doctor_suspended",
                "suspended_by": audit.admin_id,
            },
        )

    async def _after_suspension(
        self, db: AsyncSession, doctor: dict, suspension: dict, new_count: int, audit: AuditContext
    ) -> None:
        await self._log_suspension(db, doctor, suspension, new_count, audit)
        await self._notify_suspended(db, doctor, suspension, new_count, audit)

    async def _after_deletion(
        self, db: AsyncSession, doctor: dict, suspension: dict, new_count: int, audit: AuditContext
    ) -> None:
        await self._log_suspension(db, doctor, suspension, new_count, audit)
        await self.activity_logger.log_activity(
            db,
            audit,
            ActivityAction.DELETE_DOCTOR,
            f"Automatically deleted doctor {doctor['doctor_name']} "
            f"after {_ordinal(new_count)} suspension",
            {
                "doctor_id": doctor["id"],
                "doctor_name": doctor["doctor_name"],
                "doctor_email": doctor["email"],
                "auto_deleted": True,
                "suspension_count": new_count,
                "final_suspension": suspension,
            },
        )
        await self._notify_suspended(db, doctor, suspension, new_count, audit)
        await NotificationService.notify_admins(
            db,
            f"Doctor Blacklisted - {_ordinal(new_count)} Suspension",
            f"Doctor {doctor['doctor_name']} has been automatically deleted and blacklisted "
            f"due to {_ordinal(new_count)} suspension. Email: {doctor['email']}",
            notification_type="alert",
            category="security",
            priority="high",
            metadata={
                "doctor_name": doctor["doctor_name"],
                "doctor_email": doctor["email"],
                "suspension_count": new_count,
                "action": "doctor_blacklisted_deleted",
            },
        )
