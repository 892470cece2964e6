"""Credential blacklist model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Index,
    Integer,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.types import Uuid

from app.models.metadata import metadata

blacklist = Table(
    "blacklist",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    # Blacklisted credentials
    Column("email", String(255), index=True),
    Column("phone", String(30), index=True),
    Column("licenses", JSON, nullable=False, default=list),
    Column("reason", String(40), nullable=False),
    # Original entity
    Column("original_entity_type", String(20), nullable=False),
    Column("original_entity_id", Uuid),
    Column("original_entity_name", String(200)),
    Column("description", Text),
    Column("rejection_count", Integer, nullable=False, default=0),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_by", Uuid),
    Column("blacklisted_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("expires_at", DateTime(timezone=True)),
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
        "reason IN ('doctor_deleted', 'candidate_rejected_multiple', 'license_conflict', 'manual')",
        name="blacklist_reason_check",
    ),
    CheckConstraint(
        "original_entity_type IN ('Doctor', 'PendingDoctor')",
        name="blacklist_entity_type_check",
    ),
    Index("idx_blacklist_email_active", "email", "is_active"),
    Index("idx_blacklist_phone_active", "phone", "is_active"),
    Index("idx_blacklist_reason_active", "reason", "is_active"),
)
