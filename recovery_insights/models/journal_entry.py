"""
JournalEntry — one reflective entry per profile per calendar day.

Extended attributes (emotions, coping strategies, gratitude items, ...)
are stored as their own columns; list-valued ones use JSON.
"""
import datetime as dt
from sqlalchemy import (
    Integer, Text, Boolean, DateTime, Date, Enum, JSON, ForeignKey,
    UniqueConstraint, func,
)
from sqlalchemy.orm import Mapped, mapped_column
import enum

from recovery_insights.db.base import Base


class JournalEntryType(str, enum.Enum):
    daily = "daily"
    cbt = "cbt"
    gratitude = "gratitude"
    milestone = "milestone"
    relapse_prevention = "relapse_prevention"
    custom = "custom"


class JournalEntry(Base):
    __tablename__ = "journal_entries"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_journal_user_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    mood: Mapped[int] = mapped_column(Integer, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    entry_type: Mapped[str] = mapped_column(
        Enum(JournalEntryType, name="journal_entry_type_enum"),
        nullable=False,
        default=JournalEntryType.daily,
    )

    emotions: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    thoughts: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    behaviors: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    triggers: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    coping_strategies: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    gratitude_items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    goals: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    physical_symptoms: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    lessons_learned: Mapped[str | None] = mapped_column(Text, nullable=True)
    recovery_wins: Mapped[str | None] = mapped_column(Text, nullable=True)
    had_urge: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
