"""Create admins and admin_activities tables.

Revision ID: 002
Revises: 001
Create Date: 2026-01-12 00:10:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade database schema."""
    op.create_table(
        "admins",
        sa.Column(
            "id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False
        ),
        sa.Column("first_name", sa.VARCHAR(length=100), nullable=False),
        sa.Column("last_name", sa.VARCHAR(length=100), nullable=False),
        sa.Column("email", sa.VARCHAR(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", sa.VARCHAR(length=20), server_default="Admin", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("last_login_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
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
        sa.CheckConstraint("role IN ('Admin', 'Super Admin')", name="admins_role_check"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("ix_admins_email", "admins", ["email"], unique=True)
    op.create_index("ix_admins_role", "admins", ["role"])

    # Audit log; admin_id has no FK so entries survive admin deletion
    op.create_table(
        "admin_activities",
        sa.Column(
            "id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False
        ),
        sa.Column("admin_id", postgresql.UUID(), nullable=False),
        sa.Column("admin_name", sa.VARCHAR(length=200), nullable=False),
        sa.Column("admin_role", sa.VARCHAR(length=20), nullable=False),
        sa.Column("action", sa.VARCHAR(length=50), nullable=False),
        sa.Column("details", sa.Text(), nullable=False),
        sa.Column("ip_address", sa.VARCHAR(length=45), nullable=False),
        sa.Column("user_agent", sa.Text(), nullable=False),
        sa.Column(
            "metadata", postgresql.JSON(), server_default=sa.text("'{}'::json"), nullable=False
        ),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("idx_admin_activities_admin_id", "admin_activities", ["admin_id"])
    op.create_index("idx_admin_activities_action", "admin_activities", ["action"])
    op.create_index("idx_admin_activities_created_at", "admin_activities", ["created_at"])


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_index("idx_admin_activities_created_at", table_name="admin_activities")
    op.drop_index("idx_admin_activities_action", table_name="admin_activities")
    op.drop_index("idx_admin_activities_admin_id", table_name="admin_activities")
    op.drop_table("admin_activities")

    op.drop_index("ix_admins_role", table_name="admins")
    op.drop_index("ix_admins_email", table_name="admins")
    op.drop_table("admins")
