"""
Achievement and motivation schemas.

GET /users/{user_id}/achievements → AchievementListResponse
GET /users/{user_id}/motivation   → MotivationResponse
"""
from pydantic import BaseModel, Field


class AchievementResponse(BaseModel):
    id: str
    title: str
    description: str
    metric: str = Field(description='"overcome_count" or "streak".')
    threshold: int
    progress: int = Field(description="min(value, threshold).")
    unlocked: bool


class AchievementListResponse(BaseModel):
    unlocked_count: int
    total: int
    items: list[AchievementResponse] = Field(
        description="Unlocked first, then by progress ratio descending."
    )


class ChallengeResponse(BaseModel):
    title: str
    description: str


class MotivationResponse(BaseModel):
    current_streak: int
    milestone_message: str
    celebrate: bool = Field(description="True on 1, 7, 30, 60, 90, 180 and 365 days.")
    challenge: ChallengeResponse
    quote_category: str
    quote: str
    reflection_prompt: str
