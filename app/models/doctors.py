"""Doctor model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    Integer,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.types import Uuid

from app.models.metadata import metadata

doctors = Table(
    "doctors",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    # Basic information
    Column("doctor_name", String(200), nullable=False, index=True),
    Column("email", String(255), nullable=False, unique=True, index=True),
    Column("phone", String(30), nullable=False),
    # Professional information
    Column("specialization", JSON, nullable=False, default=list),
    Column("licenses", JSON, nullable=False, default=list),
    Column("department", String(100), nullable=False, default=""),
    Column("about", Text, nullable=False, default=""),
    # Status
    Column("status", String(20), nullable=False, default="pending", index=True),
    Column("verified", Boolean, nullable=False, default=False),
    Column("verification_date", DateTime(timezone=True)),
    Column("rejection_count", Integer, nullable=False, default=0),
    # Patient sentiment summary
    Column("sentiment", String(20), nullable=False, default="positive", index=True),
    Column("sentiment_score", Float, nullable=False, default=0.0),
    Column("no_of_patients", Integer, nullable=False, default=0),
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
        "status IN ('pending', 'approved', 'rejected', 'suspended')",
        name="doctors_status_check",
    ),
    CheckConstraint(
        "sentiment IN ('positive', 'negative', 'neutral')",
        name="doctors_sentiment_check",
    ),
)
