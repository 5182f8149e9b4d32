"""Create user_metrics table.

Revision ID: 003
Revises: 002
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "user_metrics",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Text, nullable=False),
        sa.Column("weight", sa.Float),
        sa.Column("height", sa.Integer, nullable=False),
        sa.Column("bmi", sa.Float, nullable=False),
        sa.Column("weight_diff", sa.Float),
        sa.Column("body_metric", sa.Text),
        sa.Column("created_at", sa.Text),
    )
    op.create_index("idx_user_metrics_user", "user_metrics", ["user_id"])


def downgrade() -> None:
    op.drop_index("idx_user_metrics_user", table_name="user_metrics")
    op.drop_table("user_metrics")
