"""
Journal schemas.

PUT /users/{user_id}/journal/{day}   → JournalUpsert → JournalEntryResponse
GET /users/{user_id}/journal         → JournalListResponse
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from recovery_insights.models.journal_entry import JournalEntryType


class JournalUpsert(BaseModel):
    """
    Create or update the entry for one day. Omitted fields keep their value.

    `content` accepts the legacy JSON payload ({"text", "additional"}) and is
    decoded into the structured fields; explicit fields win over it.
    """
    model_config = ConfigDict(use_enum_values=True)

    mood: Optional[int] = Field(default=None, ge=1, le=5, description="1 (very low) to 5 (excellent).")
    text: Optional[str] = Field(default=None, max_length=20_000)
    entry_type: Optional[JournalEntryType] = None
    emotions: Optional[list[str]] = None
    thoughts: Optional[list[str]] = None
    behaviors: Optional[list[str]] = None
    triggers: Optional[list[str]] = None
    coping_strategies: Optional[list[str]] = None
    gratitude_items: Optional[list[str]] = None
    goals: Optional[list[str]] = None
    physical_symptoms: Optional[list[str]] = None
    lessons_learned: Optional[str] = None
    recovery_wins: Optional[str] = None
    had_urge: Optional[bool] = None
    content: Optional[str] = Field(default=None, description="Legacy JSON-encoded payload.")


class JournalEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    date: str
    mood: int
    mood_label: str
    text: str
    entry_type: str
    emotions: list[str]
    thoughts: list[str]
    behaviors: list[str]
    triggers: list[str]
    coping_strategies: list[str]
    gratitude_items: list[str]
    goals: list[str]
    physical_symptoms: list[str]
    lessons_learned: Optional[str] = None
    recovery_wins: Optional[str] = None
    had_urge: bool


class JournalStatsResponse(BaseModel):
    total_entries: int
    average_mood: float
    most_common_mood: Optional[int] = None
    most_common_mood_label: Optional[str] = None
    entry_types_used: int
    urges_recorded: int
    top_emotions: list[str]


class JournalListResponse(BaseModel):
    stats: JournalStatsResponse
    items: list[JournalEntryResponse]
    failed_sources: list[str] = Field(
        default_factory=list,
        description="Record-store calls that failed; their data is shown as empty.",
    )
