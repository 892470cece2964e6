"""Create admin_notifications and blacklist tables.

Revision ID: 003
Revises: 002
Create Date: 2026-01-12 00:20:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade database schema."""
    op.create_table(
        "admin_notifications",
        sa.Column(
            "id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False
        ),
        sa.Column("title", sa.VARCHAR(length=200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.VARCHAR(length=20), server_default="info", nullable=False),
        sa.Column("category", sa.VARCHAR(length=30), server_default="system", nullable=False),
        sa.Column("priority", sa.VARCHAR(length=20), server_default="medium", nullable=False),
        sa.Column("recipients", sa.VARCHAR(length=20), server_default="admin", nullable=False),
        sa.Column("related_entity_id", postgresql.UUID(), nullable=True),
        sa.Column("related_entity_type", sa.VARCHAR(length=50), nullable=True),
        sa.Column(
            "metadata", postgresql.JSON(), server_default=sa.text("'{}'::json"), nullable=False
        ),
        sa.Column("is_read", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("read_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "type IN ('info', 'success', 'warning', 'alert')",
            name="admin_notifications_type_check",
        ),
        sa.CheckConstraint(
            "category IN ('suspensions', 'security', 'doctors', 'system')",
            name="admin_notifications_category_check",
        ),
        sa.CheckConstraint(
            "priority IN ('low', 'medium', 'high')",
            name="admin_notifications_priority_check",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("idx_admin_notifications_category", "admin_notifications", ["category"])
    op.create_index("idx_admin_notifications_is_read", "admin_notifications", ["is_read"])
    op.create_index("idx_admin_notifications_created_at", "admin_notifications", ["created_at"])

    op.create_table(
        "blacklist",
        sa.Column(
            "id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False
        ),
        sa.Column("email", sa.VARCHAR(length=255), nullable=True),
        sa.Column("phone", sa.VARCHAR(length=30), nullable=True),
        sa.Column(
            "licenses", postgresql.JSON(), server_default=sa.text("'[]'::json"), nullable=False
        ),
        sa.Column("reason", sa.VARCHAR(length=40), nullable=False),
        sa.Column("original_entity_type", sa.VARCHAR(length=20), nullable=False),
        sa.Column("original_entity_id", postgresql.UUID(), nullable=True),
        sa.Column("original_entity_name", sa.VARCHAR(length=200), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("rejection_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("created_by", postgresql.UUID(), nullable=True),
        sa.Column(
            "blacklisted_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column("expires_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "reason IN ('doctor_deleted', 'candidate_rejected_multiple', "
            "'license_conflict', 'manual')",
            name="blacklist_reason_check",
        ),
        sa.CheckConstraint(
            "original_entity_type IN ('Doctor', 'PendingDoctor')",
            name="blacklist_entity_type_check",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("ix_blacklist_email", "blacklist", ["email"])
    op.create_index("ix_blacklist_phone", "blacklist", ["phone"])
    op.create_index("idx_blacklist_email_active", "blacklist", ["email", "is_active"])
    op.create_index("idx_blacklist_phone_active", "blacklist", ["phone", "is_active"])
    op.create_index("idx_blacklist_reason_active", "blacklist", ["reason", "is_active"])


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_index("idx_blacklist_reason_active", table_name="blacklist")
    op.drop_index("idx_blacklist_phone_active", table_name="blacklist")
    op.drop_index("idx_blacklist_email_active", table_name="blacklist")
    op.drop_index("ix_blacklist_phone", table_name="blacklist")
    op.drop_index("ix_blacklist_email", table_name="blacklist")
    op.drop_table("blacklist")

    op.drop_index("idx_admin_notifications_created_at", table_name="admin_notifications")
    op.drop_index("idx_admin_notifications_is_read", table_name="admin_notifications")
    op.drop_index("idx_admin_notifications_category", table_name="admin_notifications")
    op.drop_table("admin_notifications")
