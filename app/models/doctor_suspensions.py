"""Doctor suspension record model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.types import Uuid

from app.models.metadata import metadata

doctor_suspensions = Table(
    "doctor_suspensions",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "doctor_id",
        Uuid,
        ForeignKey("doctors.id", ondelete="CASCADE"),
        nullable=False,
    ),
    # Classification
    Column("suspension_type", String(20), nullable=False, default="temporary"),
    Column("status", String(20), nullable=False, default="active"),
    Column("severity", String(20), nullable=False, default="major"),
    # Ordered list of {category, description, severity}
    Column("reasons", JSON, nullable=False),
    # Suspension period (end_date and duration_days are NULL when indefinite)
    Column("start_date", DateTime(timezone=True), nullable=False),
    Column("end_date", DateTime(timezone=True)),
    Column("duration_days", Integer),
    # Impact flags
    Column("patient_access", Boolean, nullable=False, default=False),
    Column("appointment_scheduling", Boolean, nullable=False, default=False),
    Column("prescription_writing", Boolean, nullable=False, default=False),
    Column("system_access", Boolean, nullable=False, default=False),
    # Admin trail
    Column("suspended_by", Uuid, nullable=False),
    Column("reviewed_by", JSON, nullable=False, default=list),
    # Appeal
    Column("appeal_status", String(20), nullable=False, default="none"),
    Column("appeal_notes", Text, nullable=False, default=""),
    # Notification flags
    Column("notification_sent", Boolean, nullable=False, default=True),
    Column("doctor_notified", Boolean, nullable=False, default=True),
    Column("patients_notified", Boolean, nullable=False, default=False),
    Column("publicly_visible", Boolean, nullable=False, default=False),
    # Metadata
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    ),
    CheckConstraint(
        "suspension_type IN ('temporary', 'permanent', 'investigation')",
        name="doctor_suspensions_type_check",
    ),
    CheckConstraint(
        "status IN ('active', 'lifted', 'expired', 'revoked', 'under_review')",
        name="doctor_suspensions_status_check",
    ),
    CheckConstraint(
        "severity IN ('minor', 'moderate', 'major', 'critical')",
        name="doctor_suspensions_severity_check",
    ),
    CheckConstraint(
        "appeal_status IN ('none', 'submitted', 'under_review', 'approved', 'rejected')",
        name="doctor_suspensions_appeal_status_check",
    ),
    Index("idx_doctor_suspensions_doctor_id", "doctor_id"),
    Index("idx_doctor_suspensions_status", "status"),
    Index("idx_doctor_suspensions_suspended_by", "suspended_by"),
    Index("idx_doctor_suspensions_created_at", "created_at"),
)
