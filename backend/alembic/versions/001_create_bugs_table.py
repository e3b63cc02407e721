"""Create bugs table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `bugs` table and its created_at index.
Rollback: downgrade() drops the table (all bug reports are lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

STATUSES = ("OPEN", "IN_PROGRESS", "CLOSED")
PRIORITIES = ("LOW", "MEDIUM", "HIGH", "CRITICAL")


def upgrade() -> None:
    op.create_table(
        "bugs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("screenshot_url", sa.String(2048), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When the bug was reported (UTC); never updated",
        ),
        sa.Column(
            "status",
            sa.Enum(*STATUSES, name="bugstatus", native_enum=False, length=20),
            server_default=sa.text("'OPEN'"),
            nullable=False,
        ),
        sa.Column(
            "priority",
            sa.Enum(*PRIORITIES, name="bugpriority", native_enum=False, length=20),
            server_default=sa.text("'MEDIUM'"),
            nullable=False,
        ),
        sa.Column(
            "metadata",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=True,
            comment="Scalar key/value pairs from custom fields and context data",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Listing is newest first
    op.create_index(
        "idx_bugs_created_at",
        "bugs",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_bugs_created_at", table_name="bugs")
    op.drop_table("bugs")
