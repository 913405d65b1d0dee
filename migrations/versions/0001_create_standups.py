"""create standups

Revision ID: 0001
Revises:
Create Date: 2025-05-19 00:00:00.000000

Read model for the query engine. One row per (user_id, date).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "standups",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=True),
        sa.Column("yesterday", sa.Text(), nullable=False, server_default=""),
        sa.Column("today", sa.Text(), nullable=False, server_default=""),
        sa.Column("blockers", sa.Text(), nullable=False, server_default=""),
        sa.Column("is_blocker_resolved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("tags", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("mood", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("productivity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_highlight", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "date", name="uq_standup_user_date"),
    )
    op.create_index("ix_standups_id", "standups", ["id"])
    op.create_index("ix_standups_date", "standups", ["date"])
    op.create_index("ix_standups_user_id", "standups", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_standups_user_id", table_name="standups")
    op.drop_index("ix_standups_date", table_name="standups")
    op.drop_index("ix_standups_id", table_name="standups")
    op.drop_table("standups")
