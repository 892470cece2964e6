"""Create doctors and doctor_suspensions tables.

Revision ID: 001
Revises:
Create Date: 2026-01-12 00:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade database schema."""
    # Enable pgcrypto extension
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    # Create doctors table
    op.create_table(
        "doctors",
        sa.Column(
            "id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False
        ),
        sa.Column("doctor_name", sa.VARCHAR(length=200), nullable=False),
        sa.Column("email", sa.VARCHAR(length=255), nullable=False),
        sa.Column("phone", sa.VARCHAR(length=30), nullable=False),
        sa.Column(
            "specialization",
            postgresql.JSON(),
            server_default=sa.text("'[]'::json"),
            nullable=False,
        ),
        sa.Column(
            "licenses", postgresql.JSON(), server_default=sa.text("'[]'::json"), nullable=False
        ),
        sa.Column("department", sa.VARCHAR(length=100), server_default="", nullable=False),
        sa.Column("about", sa.Text(), server_default="", nullable=False),
        sa.Column("status", sa.VARCHAR(length=20), server_default="pending", nullable=False),
        sa.Column("verified", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("verification_date", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("sentiment", sa.VARCHAR(length=20), server_default="positive", nullable=False),
        sa.Column("sentiment_score", sa.Float(), server_default=sa.text("0"), nullable=False),
        sa.Column("no_of_patients", sa.Integer(), server_default=sa.text("0"), nullable=False),
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
            "status IN ('pending', 'approved', 'rejected', 'suspended')",
            name="doctors_status_check",
        ),
        sa.CheckConstraint(
            "sentiment IN ('positive', 'negative', 'neutral')",
            name="doctors_sentiment_check",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("ix_doctors_email", "doctors", ["email"], unique=True)
    op.create_index("ix_doctors_doctor_name", "doctors", ["doctor_name"])
    op.create_index("ix_doctors_status", "doctors", ["status"])
    op.create_index("ix_doctors_sentiment", "doctors", ["sentiment"])

    # Create doctor_suspensions table
    op.create_table(
        "doctor_suspensions",
        sa.Column(
            "id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False
        ),
        sa.Column("doctor_id", postgresql.UUID(), nullable=False),
        sa.Column(
            "suspension_type", sa.VARCHAR(length=20), server_default="temporary", nullable=False
        ),
        sa.Column("status", sa.VARCHAR(length=20), server_default="active", nullable=False),
        sa.Column("severity", sa.VARCHAR(length=20), server_default="major", nullable=False),
        sa.Column("reasons", postgresql.JSON(), nullable=False),
        sa.Column("start_date", postgresql.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("end_date", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("duration_days", sa.Integer(), nullable=True),
        sa.Column("patient_access", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column(
            "appointment_scheduling", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column(
            "prescription_writing", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column("system_access", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("suspended_by", postgresql.UUID(), nullable=False),
        sa.Column(
            "reviewed_by", postgresql.JSON(), server_default=sa.text("'[]'::json"), nullable=False
        ),
        sa.Column("appeal_status", sa.VARCHAR(length=20), server_default="none", nullable=False),
        sa.Column("appeal_notes", sa.Text(), server_default="", nullable=False),
        sa.Column(
            "notification_sent", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        sa.Column("doctor_notified", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column(
            "patients_notified", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column(
            "publicly_visible", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
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
            "suspension_type IN ('temporary', 'permanent', 'investigation')",
            name="doctor_suspensions_type_check",
        ),
        sa.CheckConstraint(
            "status IN ('active', 'lifted', 'expired', 'revoked', 'under_review')",
            name="doctor_suspensions_status_check",
        ),
        sa.CheckConstraint(
            "severity IN ('minor', 'moderate', 'major', 'critical')",
            name="doctor_suspensions_severity_check",
        ),
        sa.CheckConstraint(
            "appeal_status IN ('none', 'submitted', 'under_review', 'approved', 'rejected')",
            name="doctor_suspensions_appeal_status_check",
        ),
        sa.ForeignKeyConstraint(["doctor_id"], ["doctors.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("idx_doctor_suspensions_doctor_id", "doctor_suspensions", ["doctor_id"])
    op.create_index("idx_doctor_suspensions_status", "doctor_suspensions", ["status"])
    op.create_index("idx_doctor_suspensions_suspended_by", "doctor_suspensions", ["suspended_by"])
    op.create_index("idx_doctor_suspensions_created_at", "doctor_suspensions", ["created_at"])


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_index("idx_doctor_suspensions_created_at", table_name="doctor_suspensions")
    op.drop_index("idx_doctor_suspensions_suspended_by", table_name="doctor_suspensions")
    op.drop_index("idx_doctor_suspensions_status", table_name="doctor_suspensions")
    op.drop_index("idx_doctor_suspensions_doctor_id", table_name="doctor_suspensions")
    op.drop_table("doctor_suspensions")

    op.drop_index("ix_doctors_sentiment", table_name="doctors")
    op.drop_index("ix_doctors_status", table_name="doctors")
    op.drop_index("ix_doctors_doctor_name", table_name="doctors")
    op.drop_index("ix_doctors_email", table_name="doctors")
    op.drop_table("doctors")
