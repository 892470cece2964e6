"""Admin activity audit log model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, Index, String, Table, Text, func
from sqlalchemy.types import Uuid

from app.models.metadata import metadata

admin_activities = Table(
    "admin_activities",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    # No FK: entries outlive the admin that produced them
    Column("admin_id", Uuid, nullable=False),
    Column("admin_name", String(200), nullable=False),
    Column("admin_role", String(20), nullable=False),
    Column("action", String(50), nullable=False),
    Column("details", Text, nullable=False),
    Column("ip_address", String(45), nullable=False),
    Column("user_agent", Text, nullable=False),
    Column("metadata", JSON, nullable=False, default=dict),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Index("idx_admin_activities_admin_id", "admin_id"),
    Index("idx_admin_activities_action", "action"),
    Index("idx_admin_activities_created_at", "created_at"),
)
