"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-09-28 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    urge_outcome_enum = sa.Enum(
        "pending", "resisted", "indulged", name="urge_outcome_enum"
    )
    urge_outcome_enum.create(op.get_bind(), checkfirst=True)

    # --- profiles ---
    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("goal_days", sa.Integer(), nullable=False, server_default="90"),
        sa.Column("motivation_statement", sa.Text(), nullable=True),
        sa.Column("notifications_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_profiles_id", "profiles", ["id"])
    op.create_index("ix_profiles_email", "profiles", ["email"], unique=True)

    # --- streaks ---
    op.create_table(
        "streaks",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("best_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_clean_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_check_in", sa.DateTime(timezone=True), nullable=True),
        sa.Column("relapse_count", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_streaks_id", "streaks", ["id"])
    op.create_index("ix_streaks_user_id", "streaks", ["user_id"], unique=True)

    # --- urges ---
    op.create_table(
        "urges",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("intensity", sa.Integer(), nullable=False),
        sa.Column("location", sa.String(128), nullable=False, server_default=""),
        sa.Column("trigger", sa.String(128), nullable=False, server_default=""),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("outcome", sa.Enum(
            "pending", "resisted", "indulged",
            name="urge_outcome_enum", create_type=False,
        ), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("intensity BETWEEN 1 AND 10", name="ck_urges_intensity"),
    )
    op.create_index("ix_urges_id", "urges", ["id"])
    op.create_index("ix_urges_user_id", "urges", ["user_id"])
    op.create_index("ix_urges_created_at", "urges", ["created_at"])


def downgrade() -> None:
    op.drop_table("urges")
    op.drop_table("streaks")
    op.drop_table("profiles")

    op.execute("DROP TYPE IF EXISTS urge_outcome_enum")
