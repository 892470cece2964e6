"""Admin notification model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Index,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.types import Uuid

from app.models.metadata import metadata

notifications = Table(
    "admin_notifications",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("title", String(200), nullable=False),
    Column("message", Text, nullable=False),
    Column("type", String(20), nullable=False, default="info"),
    Column("category", String(30), nullable=False, default="system"),
    Column("priority", String(20), nullable=False, default="medium"),
    Column("recipients", String(20), nullable=False, default="admin"),
    Column("related_entity_id", Uuid),
    Column("related_entity_type", String(50)),
    Column("metadata", JSON, nullable=False, default=dict),
    Column("is_read", Boolean, nullable=False, default=False),
    Column("read_at", DateTime(timezone=True)),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    CheckConstraint(
        "type IN ('info', 'success', 'warning', 'alert')",
        name="admin_notifications_type_check",
    ),
    CheckConstraint(
        "category IN ('suspensions', 'security', 'doctors', 'system')",
        name="admin_notifications_category_check",
    ),
    CheckConstraint(
        "priority IN ('low', 'medium', 'high')",
        name="admin_notifications_priority_check",
    ),
    Index("idx_admin_notifications_category", "category"),
    Index("idx_admin_notifications_is_read", "is_read"),
    Index("idx_admin_notifications_created_at", "created_at"),
)
