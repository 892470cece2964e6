"""Admin model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.types import Uuid

from app.models.metadata import metadata

admins = Table(
    "admins",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    Column("email", String(255), nullable=False, unique=True, index=True),
    Column("password_hash", Text, nullable=False),
    Column("role", String(20), nullable=False, default="Admin", index=True),
    Column("is_active", Boolean, nullable=False, default=True),
    # Audit information
    Column("last_login_at", DateTime(timezone=True)),
    # Metadata
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    ),
    CheckConstraint("role IN ('Admin', 'Super Admin')", name="admins_role_check"),
)
