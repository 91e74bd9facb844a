"""
Streak — running clean-day counters, one row per profile.

Written by the check-in / urge-resolution flow; the analytics layer only
reads it.
"""
from datetime import datetime
from sqlalchemy import Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from recovery_insights.db.base import Base


class Streak(Base):
    __tablename__ = "streaks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    best_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_clean_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_check_in: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    relapse_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
