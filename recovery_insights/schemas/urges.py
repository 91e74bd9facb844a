"""
Urge schemas.

POST  /users/{user_id}/urges             → UrgeCreate → UrgeResponse
PATCH /users/{user_id}/urges/{urge_id}   → UrgePatch  → UrgeResponse
GET   /users/{user_id}/urges             → UrgeHistoryResponse
"""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from recovery_insights.models.urge import UrgeOutcome


class UrgeCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    intensity: Annotated[int, Field(ge=1, le=10, description="1 (mild) to 10 (overwhelming).")]
    location: str = Field(default="", max_length=128, examples=["Home"])
    trigger: str = Field(default="", max_length=128, examples=["Stress"])
    notes: Optional[str] = Field(default=None, max_length=5_000)
    outcome: UrgeOutcome = Field(
        default=UrgeOutcome.pending,
        description='"pending" until the user reports how it ended.',
    )
    created_at: Optional[datetime] = Field(
        default=None,
        description="When the urge happened. Defaults to now.",
    )


class UrgePatch(BaseModel):
    """Partial update. `outcome` can leave "pending" once and is fixed afterwards."""
    model_config = ConfigDict(use_enum_values=True)

    intensity: Optional[int] = Field(default=None, ge=1, le=10)
    location: Optional[str] = Field(default=None, max_length=128)
    trigger: Optional[str] = Field(default=None, max_length=128)
    notes: Optional[str] = Field(default=None, max_length=5_000)
    outcome: Optional[UrgeOutcome] = None


class UrgeResponse(BaseModel):
    id: int
    user_id: int
    intensity: int
    intensity_color: str
    location: str
    trigger: str
    notes: Optional[str] = None
    outcome: str
    overcome: bool
    created_at: str


class UrgeHistoryResponse(BaseModel):
    total: int
    overcome_count: int
    success_rate: int = Field(description="Percentage of urges overcome (0–100).")
    average_intensity: float
    most_common_trigger: Optional[str] = None
    items: list[UrgeResponse]
    failed_sources: list[str] = Field(
        default_factory=list,
        description="Record-store calls that failed; their data is shown as empty.",
    )
