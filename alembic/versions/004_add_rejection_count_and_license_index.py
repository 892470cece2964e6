"""Add doctor rejection count and blacklist license index.

Revision ID: 004
Revises: 003
Create Date: 2026-01-19 00:10:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade database schema."""
    op.add_column(
        "doctors",
        sa.Column("rejection_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
    )

    # Serves the ?| license overlap lookup
    op.create_index(
        "idx_blacklist_licenses_gin",
        "blacklist",
        [sa.text("(licenses::jsonb)")],
        postgresql_using="gin",
    )


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_index("idx_blacklist_licenses_gin", table_name="blacklist")
    op.drop_column("doctors", "rejection_count")
