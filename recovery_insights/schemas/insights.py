"""
Insights schemas.

GET /users/{user_id}/insights            → InsightsReportResponse
GET /users/{user_id}/insights/mood-week  → MoodWeekResponse
"""
from typing import Any, Optional
from pydantic import BaseModel, Field


class UrgeBucketResponse(BaseModel):
    key: str = Field(description="First day covered by the bucket (ISO date).")
    label: str = Field(examples=["Mon", "W2", "Mar"])
    count: int
    overcome_count: int
    average_intensity: float
    tier: str = Field(description='"high" (> 7), "medium" (> 5) or "low".')
    color: str


class MoodBucketResponse(BaseModel):
    key: str
    label: str
    count: int
    average_mood: float
    tier: Optional[str] = Field(
        default=None,
        description='"excellent", "good", "neutral", "difficult"; null for days without an entry.',
    )
    color: str
    placeholder: bool = False


class UrgeSummaryResponse(BaseModel):
    total: int
    overcome_count: int
    relapse_count: int
    pending_count: int
    overcome_percentage: int = Field(description="0–100, rounded half-up.")
    average_intensity: float
    most_common_trigger: Optional[str] = None
    peak_hour: Optional[int] = Field(default=None, description="0–23, local time.")
    peak_weekday: Optional[int] = Field(default=None, description="0 = Sunday.")


class JournalSummaryResponse(BaseModel):
    total_entries: int
    average_mood: float
    most_common_mood: Optional[int] = None
    most_common_mood_label: Optional[str] = None
    entry_types_used: int
    urges_recorded: int
    top_emotions: list[str]


class TriggerStatResponse(BaseModel):
    name: str
    count: int
    percentage: int


class InsightResponse(BaseModel):
    kind: str
    title: str
    description: str
    confidence: int = Field(description="0–90.")
    action: str
    details: dict[str, Any] = Field(default_factory=dict)


class InsightsReportResponse(BaseModel):
    """Everything the insights screen shows for one time range."""
    user_id: int
    time_range: str
    reference_date: str = Field(description="Last day (inclusive) of the window.")
    urge_buckets: list[UrgeBucketResponse]
    mood_buckets: list[MoodBucketResponse]
    urge_summary: UrgeSummaryResponse
    journal_summary: JournalSummaryResponse
    triggers: list[TriggerStatResponse]
    insights: list[InsightResponse]
    insufficient_data: bool = Field(
        description="True when a record-store fetch failed or too few urges exist for insights."
    )
    failed_sources: list[str] = Field(default_factory=list)


class MoodWeekResponse(BaseModel):
    end: str
    days: list[MoodBucketResponse] = Field(description="Exactly 7 items, oldest first.")
