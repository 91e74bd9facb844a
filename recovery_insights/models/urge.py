"""
Urge — a single tracked craving.

outcome is an explicit three-state value:
  "pending"   — not resolved yet
  "resisted"  — the user overcame the urge
  "indulged"  — the user relapsed
Once it leaves "pending" it never changes again.
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, Enum, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column
import enum

from recovery_insights.db.base import Base


class UrgeOutcome(str, enum.Enum):
    pending = "pending"
    resisted = "resisted"
    indulged = "indulged"


class Urge(Base):
    __tablename__ = "urges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    intensity: Mapped[int] = mapped_column(Integer, nullable=False)
    location: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    trigger: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    outcome: Mapped[str] = mapped_column(
        Enum(UrgeOutcome, name="urge_outcome_enum"),
        nullable=False,
        default=UrgeOutcome.pending,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )

    @property
    def overcome(self) -> bool:
        return self.outcome == UrgeOutcome.resisted

    @property
    def is_resolved(self) -> bool:
        return self.outcome != UrgeOutcome.pending
