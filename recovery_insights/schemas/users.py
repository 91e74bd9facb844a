"""
Profile and streak schemas.

POST  /users                    → ProfileCreate  → ProfileResponse
GET   /users/{user_id}          → ProfileResponse
GET   /users/{user_id}/streak   → StreakResponse
PATCH /users/{user_id}/streak   → StreakUpdate   → StreakResponse
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProfileCreate(BaseModel):
    email: Annotated[str, Field(min_length=3, max_length=255, examples=["sam@example.com"])]
    name: Annotated[str, Field(min_length=1, max_length=128)]
    goal_days: int = Field(default=90, ge=1, le=3650)
    motivation_statement: Optional[str] = Field(default=None, max_length=2_000)
    notifications_enabled: bool = True
    start_date: Optional[date] = Field(
        default=None,
        description="First day of the recovery journey. Defaults to today.",
    )

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    goal_days: int
    motivation_statement: Optional[str] = None
    notifications_enabled: bool
    start_date: date


class StreakUpdate(BaseModel):
    """Counters written by the check-in flow. Omitted fields are left untouched."""
    current_streak: Optional[int] = Field(default=None, ge=0)
    best_streak: Optional[int] = Field(default=None, ge=0)
    total_clean_days: Optional[int] = Field(default=None, ge=0)
    last_check_in: Optional[datetime] = None
    relapse_count: Optional[int] = Field(default=None, ge=0)


class StreakResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    current_streak: int
    best_streak: int
    total_clean_days: int
    last_check_in: Optional[datetime] = None
    relapse_count: int
