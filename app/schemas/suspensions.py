"""Doctor suspension schemas for request/response validation."""

from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from app.config import settings
from app.schemas.doctors import DoctorResponse

# Sentinel accepted in ``duration`` for an indefinite suspension
INDEFINITE_DURATION = -1


class SuspensionType(StrEnum):
    """Kind of suspension."""

    TEMPORARY = "temporary"
    PERMANENT = "permanent"
    INVESTIGATION = "investigation"


class SuspensionStatus(StrEnum):
    """Lifecycle status of a suspension record."""

    ACTIVE = "active"
    LIFTED = "lifted"
    EXPIRED = "expired"
    REVOKED = "revoked"
    UNDER_REVIEW = "under_review"


class Severity(StrEnum):
    """Severity of a suspension or of one of its reasons."""

    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"
    CRITICAL = "critical"


class ReasonCategory(StrEnum):
    """Category attached to each suspension reason."""

    PROFESSIONAL_MISCONDUCT = "professional_misconduct"
    PATIENT_COMPLAINT = "patient_complaint"
    DOCUMENTATION = "documentation"
    LICENSING = "licensing"
    ADMINISTRATIVE = "administrative"
    OTHER = "other"


class AppealStatus(StrEnum):
    """Appeal state of a suspension."""

    NONE = "none"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"


# ============================================================================
# Suspension Request Schemas
# ============================================================================


class SuspensionImpact(BaseModel):
    """Which parts of the platform the suspension restricts."""

    patient_access: bool = False
    appointment_scheduling: bool = False
    prescription_writing: bool = False
    system_access: bool = False

    @model_validator(mode="after")
    def cascade_system_access(self) -> "SuspensionImpact":
        """Losing system access restricts everything else too."""
        if self.system_access:
            self.patient_access = True
            self.appointment_scheduling = True
            self.prescription_writing = True
        return self


class SuspensionCreate(BaseModel):
    """Schema for suspending a doctor."""

    suspension_type: SuspensionType = SuspensionType.TEMPORARY
    severity: Severity = Severity.MAJOR
    reasons: list[str] = Field(default_factory=list, description="Free-text reasons, in order")
    reason_category: ReasonCategory = ReasonCategory.ADMINISTRATIVE
    duration: int | None = Field(
        default_factory=lambda: settings.default_suspension_days,
        ge=INDEFINITE_DURATION,
        description="Duration in days; -1 or null for an indefinite suspension",
    )
    end_date: datetime | None = Field(
        None, description="Explicit end date; overrides the computed one"
    )
    impact: SuspensionImpact = Field(default_factory=SuspensionImpact)

    @field_validator("duration")
    @classmethod
    def reject_zero_duration(cls, value: int | None) -> int | None:
        """A suspension must last at least one day."""
        if value == 0:
            raise ValueError("duration must be at least 1 day, or -1 for indefinite")
        return value

    @property
    def is_indefinite(self) -> bool:
        """Whether the request asks for an open-ended suspension."""
        return self.duration is None or self.duration == INDEFINITE_DURATION

    def clean_reasons(self) -> list[str]:
        """Trimmed reasons with blanks removed."""
        return [reason.strip() for reason in self.reasons if reason and reason.strip()]


# ============================================================================
# Suspension Response Schemas
# ============================================================================


class SuspensionReason(BaseModel):
    """One reason entry on a suspension record."""

    category: ReasonCategory
    description: str
    severity: Severity


class SuspensionPeriod(BaseModel):
    """Start, end and length of a suspension."""

    start_date: datetime
    end_date: datetime | None = None
    duration: int | None = None


class SuspensionResponse(BaseModel):
    """Suspension record response schema."""

    id: UUID
    doctor_id: UUID
    suspension_type: SuspensionType
    status: SuspensionStatus
    severity: Severity
    reasons: list[SuspensionReason]
    suspension_period: SuspensionPeriod
    impact: SuspensionImpact
    suspended_by: UUID
    reviewed_by: list[UUID] = Field(default_factory=list)
    appeal_status: AppealStatus
    appeal_notes: str = ""
    notification_sent: bool
    doctor_notified: bool
    patients_notified: bool
    publicly_visible: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "SuspensionResponse":
        """Build the nested response from a flat ``doctor_suspensions`` row."""
        return cls(
            **{
                key: record[key]
                for key in (
                    "id",
                    "doctor_id",
                    "suspension_type",
                    "status",
                    "severity",
                    "reasons",
                    "suspended_by",
                    "reviewed_by",
                    "appeal_status",
                    "appeal_notes",
                    "notification_sent",
                    "doctor_notified",
                    "patients_notified",
                    "publicly_visible",
                    "created_at",
                    "updated_at",
                )
            },
            suspension_period=SuspensionPeriod(
                start_date=record["start_date"],
                end_date=record["end_date"],
                duration=record["duration_days"],
            ),
            impact=SuspensionImpact(
                patient_access=record["patient_access"],
                appointment_scheduling=record["appointment_scheduling"],
                prescription_writing=record["prescription_writing"],
                system_access=record["system_access"],
            ),
        )


class SuspensionListResponse(BaseModel):
    """A doctor's suspension history, newest first."""

    suspensions: list[SuspensionResponse]
    count: int


class SuspensionCountResponse(BaseModel):
    """Suspension count and escalation thresholds for one doctor."""

    doctor_id: UUID
    doctor_name: str
    suspension_count: int
    warning_threshold: int
    deletion_threshold: int
    is_at_warning_threshold: bool
    next_suspension_will_delete: bool
    standing: str


class SuspensionResult(BaseModel):
    """
    Outcome of a suspension request.

    On the normal path ``doctor`` and ``suspension`` are set. When the request
    crossed the deletion threshold ``deleted`` is true and both are null.
    """

    deleted: bool = False
    message: str
    suspension_count: int
    warning: str | None = None
    doctor: DoctorResponse | None = None
    suspension: SuspensionResponse | None = None
