"""
Initial schema: interval_reads hypertable and user_profiles directory table.

Enables the TimescaleDB extension, creates interval_reads with composite
primary key (meter_id, read_ts, register_suffix) and converts it to a
hypertable partitioned on read_ts. Creates user_profiles with a nullable
text[] column listing the meters each user may query.

Revision ID: 001
Revises: None
Create Date: 2026-10-12

CHANGELOG:
- 2026-10-13: Add user_profiles table (STORY-004)
- 2026-10-12: Initial creation (STORY-001)

TODO:
- None
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# Revision identifiers used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the TimescaleDB extension, interval_reads and user_profiles."""
    op.execute("CREATE EXTENSION IF NOT EXISTS timescaledb")

    op.create_table(
        "interval_reads",
        sa.Column("meter_id", sa.Text(), nullable=False),
        sa.Column("read_ts", sa.DateTime(timezone=True), nullable=False),
        sa.Column("register_suffix", sa.Text(), nullable=False),
        sa.Column("read_value", sa.Double(), nullable=False),
        sa.PrimaryKeyConstraint("meter_id", "read_ts", "register_suffix"),
    )

    # 30-day chunks: queries always span the trailing year.
    op.execute(
        "SELECT create_hypertable("
        "'interval_reads', 'read_ts', "
        "chunk_time_interval => INTERVAL '30 days', "
        "if_not_exists => TRUE"
        ")"
    )

    op.create_table(
        "user_profiles",
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("meter_ids", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.PrimaryKeyConstraint("user_id"),
    )


def downgrade() -> None:
    """Drop user_profiles and interval_reads.

    Note: Does not drop the timescaledb extension as other tables may use it.
    """
    op.drop_table("user_profiles")
    op.drop_table("interval_reads")
