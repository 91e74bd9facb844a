"""add journal_entries with structured columns

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-05 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_LIST_COLUMNS = (
    "emotions",
    "thoughts",
    "behaviors",
    "triggers",
    "coping_strategies",
    "gratitude_items",
    "goals",
    "physical_symptoms",
)


def upgrade() -> None:
    journal_entry_type_enum = sa.Enum(
        "daily", "cbt", "gratitude", "milestone", "relapse_prevention", "custom",
        name="journal_entry_type_enum",
    )
    journal_entry_type_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "journal_entries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("mood", sa.Integer(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False, server_default=""),
        sa.Column("entry_type", sa.Enum(
            "daily", "cbt", "gratitude", "milestone", "relapse_prevention", "custom",
            name="journal_entry_type_enum", create_type=False,
        ), nullable=False, server_default="daily"),
        *[
            sa.Column(name, sa.JSON(), nullable=False, server_default="[]")
            for name in _LIST_COLUMNS
        ],
        sa.Column("lessons_learned", sa.Text(), nullable=True),
        sa.Column("recovery_wins", sa.Text(), nullable=True),
        sa.Column("had_urge", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "date", name="uq_journal_user_date"),
        sa.CheckConstraint("mood BETWEEN 1 AND 5", name="ck_journal_entries_mood"),
    )
    op.create_index("ix_journal_entries_id", "journal_entries", ["id"])
    op.create_index("ix_journal_entries_user_id", "journal_entries", ["user_id"])
    op.create_index("ix_journal_entries_date", "journal_entries", ["date"])


def downgrade() -> None:
    op.drop_table("journal_entries")
    op.execute("DROP TYPE IF EXISTS journal_entry_type_enum")
