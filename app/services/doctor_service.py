"""Doctor service for business logic."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import Select, Text, and_, cast, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.doctor_lifecycle import DoctorStatus, ensure_transition
from app.core.exceptions import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
)
from app.core.redis_client import CacheManager
from app.models.doctor_suspensions import doctor_suspensions
from app.models.doctors import doctors
from app.schemas.doctors import DoctorCreate, DoctorSentimentUpdate, DoctorUpdate
from app.services.activity_logger import ActivityAction, ActivityLogger, AuditContext
from app.services.blacklist_service import BlacklistService
from app.services.notification_service import NotificationService

logger = structlog.get_logger(__name__)

STATUS_ACTIONS: dict[DoctorStatus, ActivityAction] = {
    DoctorStatus.APPROVED: ActivityAction.APPROVE_DOCTOR,
    DoctorStatus.REJECTED: ActivityAction.REJECT_DOCTOR,
}


class DoctorService:
    """Service for doctor operations."""

    # Cache TTL in seconds
    DOCTOR_CACHE_TTL = 900  # 15 minutes for individual doctors
    DOCTOR_LIST_CACHE_TTL = 300  # 5 minutes for lists

    def __init__(
        self,
        cache_manager: CacheManager | None = None,
        activity_logger: ActivityLogger | None = None,
    ):
        """Initialize service with optional cache manager and activity logger."""
        self.cache = cache_manager
        self.activity_logger = activity_logger or ActivityLogger()

    @staticmethod
    def _get_doctor_cache_key(doctor_id: UUID) -> str:
        """Generate cache key for doctor."""
        return f"doctor:{doctor_id}"

    @staticmethod
    def _get_doctor_list_cache_key(
        skip: int, limit: int, status: DoctorStatus | None, specialization: str | None
    ) -> str:
        """Generate cache key for doctor list."""
        status_value = status.value if status else None
        return f"doctor:list:{skip}:{limit}:{status_value}:{specialization}"

    def invalidate_doctor(self, doctor_id: UUID) -> None:
        """Drop a doctor from the cache."""
        if self.cache:
            self.cache.delete(self._get_doctor_cache_key(doctor_id))
            self.cache.delete_pattern("doctor:list:*")

    @staticmethod
    def lock_query(doctor_id: UUID) -> Select:
        """Select a doctor row FOR UPDATE."""
        return select(doctors).where(doctors.c.id == doctor_id).with_for_update()

    @staticmethod
    async def lock_doctor(db: AsyncSession, doctor_id: UUID) -> dict | None:
        """
        Load a doctor and hold a row lock until the transaction ends.

        Every read-decide-write sequence on a doctor starts here so that
        concurrent requests for the same doctor are serialized.
        """
        result = await db.execute(DoctorService.lock_query(doctor_id))
        doctor = result.mappings().first()
        return dict(doctor) if doctor else None

    async def create_doctor(self, db: AsyncSession, doctor_data: DoctorCreate) -> dict:
        """Create a new doctor profile in ``pending`` status."""
        email = doctor_data.email.lower()

        existing = await db.execute(select(doctors.c.id).where(doctors.c.email == email))
        if existing.first():
            raise ConflictException(f"Doctor with email '{email}' already exists")

        entry = await BlacklistService.is_blacklisted(
            db, email=email, phone=doctor_data.phone, licenses=doctor_data.licenses
        )
        if entry:
            logger.warning("blacklisted_doctor_rejected", email=email, entry_id=str(entry["id"]))
            await NotificationService.notify_admins(
                db,
                "Blacklisted Credentials Registration Attempt",
                "A candidate attempted to register with blacklisted credentials. "
                f"Reason: {entry['reason']}. Registration blocked.",
                notification_type="alert",
                category="security",
                priority="high",
                related_entity_id=entry["id"],
                related_entity_type="Blacklist",
                metadata={
                    "blacklist_reason": entry["reason"],
                    "candidate_name": doctor_data.doctor_name,
                    "candidate_email": email,
                    "action": "registration_blocked_blacklist",
                },
            )
            raise ForbiddenException("These credentials are blacklisted")

        query = (
            doctors.insert()
            .values(
                doctor_name=doctor_data.doctor_name,
                email=email,
                phone=doctor_data.phone,
                specialization=doctor_data.specialization,
                licenses=doctor_data.licenses,
                department=doctor_data.department,
                about=doctor_data.about,
                status=DoctorStatus.PENDING.value,
            )
            .returning(doctors)
        )

        result = await db.execute(query)
        doctor = result.mappings().first()

        if not doctor:
            raise ValueError("Failed to create doctor")

        await db.commit()

        # Invalidate cache
        if self.cache:
            self.cache.delete_pattern("doctor:list:*")

        logger.info("doctor_created", doctor_id=str(doctor["id"]))
        return dict(doctor)

    async def get_doctor_by_id(self, db: AsyncSession, doctor_id: UUID) -> dict | None:
        """Get doctor by ID with caching."""
        # Try cache first
        if self.cache:
            cache_key = self._get_doctor_cache_key(doctor_id)
            cached = self.cache.get_json(cache_key)
            if cached:
                return cached

        # Query database
        query = select(doctors).where(doctors.c.id == doctor_id)
        result = await db.execute(query)
        doctor = result.mappings().first()

        if not doctor:
            return None

        doctor_dict = dict(doctor)

        # Cache result
        if self.cache:
            cache_key = self._get_doctor_cache_key(doctor_id)
            self.cache.set_json(cache_key, doctor_dict, ttl=self.DOCTOR_CACHE_TTL)

        return doctor_dict

    async def get_doctors(
        self,
        db: AsyncSession,
        skip: int = 0,
        limit: int = 20,
        status: DoctorStatus | None = None,
        specialization: str | None = None,
    ) -> list[dict]:
        """Get list of doctors with filtering and caching."""
        cache_key = self._get_doctor_list_cache_key(skip, limit, status, specialization)
        if self.cache:
            cached = self.cache.get_json(cache_key)
            if cached is not None:
                return cached

        conditions: list = []

        if status:
            conditions.append(doctors.c.status == status.value)

        if specialization:
            # Specializations are a JSON list; match against its text form
            conditions.append(
                func.lower(cast(doctors.c.specialization, Text)).contains(specialization.lower())
            )

        query = (
            select(doctors)
            .where(and_(*conditions) if conditions else True)
            .order_by(doctors.c.created_at.desc(), doctors.c.doctor_name)
            .offset(skip)
            .limit(limit)
        )

        result = await db.execute(query)
        doctors_list = [dict(d) for d in result.mappings().all()]

        if self.cache:
            self.cache.set_json(cache_key, doctors_list, ttl=self.DOCTOR_LIST_CACHE_TTL)

        return doctors_list

    async def update_doctor(
        self, db: AsyncSession, doctor_id: UUID, doctor_data: DoctorUpdate
    ) -> dict | None:
        """Update doctor information."""
        update_values = doctor_data.model_dump(exclude_unset=True, exclude_none=True)

        if not update_values:
            return await self.get_doctor_by_id(db, doctor_id)

        query = (
            update(doctors)
            .where(doctors.c.id == doctor_id)
            .values(**update_values)
            .returning(doctors)
        )

        result = await db.execute(query)
        updated_doctor = result.mappings().first()

        await db.commit()

        self.invalidate_doctor(doctor_id)

        return dict(updated_doctor) if updated_doctor else None

    async def update_sentiment(
        self, db: AsyncSession, doctor_id: UUID, sentiment_data: DoctorSentimentUpdate
    ) -> dict | None:
        """Update a doctor's patient sentiment summary."""
        return await self.update_doctor(
            db, doctor_id, DoctorUpdate(**sentiment_data.model_dump(exclude_none=True))
        )

    async def change_status(
        self,
        db: AsyncSession,
        doctor_id: UUID,
        target: DoctorStatus,
        audit: AuditContext,
        reason: str | None = None,
    ) -> dict:
        """
        Move a doctor to a new status.

        Approving a suspended doctor revokes its active suspension records in
        the same transaction. Every rejection is counted, and the rejection
        that reaches ``candidate_rejection_limit`` blacklists the doctor's
        credentials in the same transaction.

        Raises:
            BadRequestException: If ``target`` is ``suspended``
            NotFoundException: If the doctor does not exist
            ConflictException: If the transition is not allowed
        """
        if target is DoctorStatus.SUSPENDED:
            raise BadRequestException("Use the suspend endpoint to suspend a doctor")

        revoked = 0
        blacklist_entry = None
        try:
            doctor = await self.lock_doctor(db, doctor_id)
            if doctor is None:
                raise NotFoundException("Doctor not found")

            previous = DoctorStatus(doctor["status"])
            ensure_transition(previous, target)

            if previous is DoctorStatus.SUSPENDED and target is DoctorStatus.APPROVED:
                revoke_result = await db.execute(
                    update(doctor_suspensions)
                    .where(
                        doctor_suspensions.c.doctor_id == doctor_id,
                        doctor_suspensions.c.status == "active",
                    )
                    .values(status="revoked")
                )
                revoked = revoke_result.rowcount or 0

            values: dict[str, Any] = {"status": target.value}
            if target is DoctorStatus.APPROVED and not doctor["verified"]:
                values.update(verified=True, verification_date=datetime.now(UTC))
            if target is DoctorStatus.REJECTED and previous is not DoctorStatus.REJECTED:
                values["rejection_count"] = doctor["rejection_count"] + 1
                if values["rejection_count"] == settings.candidate_rejection_limit:
                    blacklist_entry = await BlacklistService.add_to_blacklist(
                        db,
                        reason="candidate_rejected_multiple",
                        original_entity_type=(
                            "PendingDoctor" if previous is DoctorStatus.PENDING else "Doctor"
                        ),
                        email=doctor["email"],
                        phone=doctor["phone"],
                        licenses=doctor["licenses"],
                        original_entity_id=doctor_id,
                        original_entity_name=doctor["doctor_name"],
                        description=(
                            f"Candidate rejected {values['rejection_count']} times. "
                            f"Last rejection reason: {reason or 'not given'}"
                        ),
                        created_by=audit.admin_id,
                        rejection_count=values["rejection_count"],
                    )

            result = await db.execute(
                update(doctors).where(doctors.c.id == doctor_id).values(**values).returning(doctors)
            )
            updated = dict(result.mappings().one())
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        self.invalidate_doctor(doctor_id)
        logger.info(
            "doctor_status_changed",
            doctor_id=str(doctor_id),
            previous=previous.value,
            status=target.value,
            revoked_suspensions=revoked,
        )

        if previous == target:
            return updated

        if previous is DoctorStatus.SUSPENDED and target is DoctorStatus.APPROVED:
            await self.activity_logger.log_activity(
                db,
                audit,
                ActivityAction.UNSUSPEND_DOCTOR,
                f"Unsuspended doctor {updated['doctor_name']}",
                {"doctor_id": doctor_id, "revoked_suspensions": revoked},
            )
            await NotificationService.notify_admins(
                db,
                "Doctor Unsuspended",
                f"Doctor {updated['doctor_name']} has been unsuspended and is now active again. "
                f"Email: {updated['email']}",
                notification_type="success",
                category="suspensions",
                priority="medium",
                related_entity_id=doctor_id,
                related_entity_type="Doctor",
                metadata={"action": "doctor_unsuspended", "unsuspended_by": audit.admin_id},
            )
        elif target in STATUS_ACTIONS:
            await self.activity_logger.log_activity(
                db,
                audit,
                STATUS_ACTIONS[target],
                f"Changed doctor {updated['doctor_name']} from {previous.value} to {target.value}",
                {
                    "doctor_id": doctor_id,
                    "previous_status": previous.value,
                    "reason": reason,
                    "blacklisted": blacklist_entry is not None,
                },
            )

        if blacklist_entry is not None:
            count = blacklist_entry["rejection_count"]
            await NotificationService.notify_admins(
                db,
                "Candidate Blacklisted - Multiple Rejections",
                f"Candidate {updated['doctor_name']} has been blacklisted after {count} "
                f"rejections. Email: {updated['email']}",
                notification_type="alert",
                category="security",
                priority="high",
                related_entity_id=doctor_id,
                related_entity_type="Doctor",
                metadata={
                    "candidate_name": updated["doctor_name"],
                    "candidate_email": updated["email"],
                    "rejection_count": count,
                    "last_rejection_reason": reason,
                    "action": "candidate_blacklisted",
                },
            )

        return updated

    async def delete_doctor(self, db: AsyncSession, doctor_id: UUID, audit: AuditContext) -> dict:
        """
        Permanently delete a doctor and blacklist its credentials.

        Raises:
            NotFoundException: If the doctor does not exist
        """
        try:
            doctor = await self.lock_doctor(db, doctor_id)
            if doctor is None:
                raise NotFoundException("Doctor not found")

            await BlacklistService.add_to_blacklist(
                db,
                reason="doctor_deleted",
                email=doctor["email"],
                phone=doctor["phone"],
                licenses=doctor["licenses"],
                original_entity_id=doctor_id,
                original_entity_name=doctor["doctor_name"],
                description="Doctor manually deleted by admin",
                created_by=audit.admin_id,
            )
            await db.execute(
                delete(doctor_suspensions).where(doctor_suspensions.c.doctor_id == doctor_id)
            )
            await db.execute(delete(doctors).where(doctors.c.id == doctor_id))
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        self.invalidate_doctor(doctor_id)
        logger.info("doctor_deleted", doctor_id=str(doctor_id))

        await self.activity_logger.log_activity(
            db,
            audit,
            ActivityAction.DELETE_DOCTOR,
            f"Deleted doctor {doctor['doctor_name']}",
            {"doctor_id": doctor_id, "doctor_email": doctor["email"], "auto_deleted": False},
        )
        await NotificationService.notify_admins(
            db,
            "Doctor Blacklisted - Manual Deletion",
            f"Doctor {doctor['doctor_name']} has been manually deleted and blacklisted. "
            f"Email: {doctor['email']}",
            notification_type="alert",
            category="security",
            priority="high",
            metadata={
                "doctor_name": doctor["doctor_name"],
                "doctor_email": doctor["email"],
                "action": "doctor_blacklisted_manual_deletion",
            },
        )

        return doctor
