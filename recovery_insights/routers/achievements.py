"""
Achievements and motivation router.

GET /users/{user_id}/achievements
GET /users/{user_id}/motivation
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from recovery_insights.db.base import get_db
from recovery_insights.schemas.achievements import (
    AchievementListResponse,
    AchievementResponse,
    ChallengeResponse,
    MotivationResponse,
)
from recovery_insights.schemas.common import ERROR_RESPONSES
from recovery_insights.services.achievements import unlocked_count
from recovery_insights.services.report import get_achievements, get_motivation

router = APIRouter(prefix="/users/{user_id}", tags=["achievements"])


@router.get(
    "/achievements",
    response_model=AchievementListResponse,
    summary="Achievement catalog with progress",
    responses=ERROR_RESPONSES,
)
def achievements(user_id: int, db: Session = Depends(get_db)):
    """
    Re-evaluated on every call from the streak row and the count of urges
    resolved as resisted. Nothing is stored.
    """
    results = get_achievements(db, user_id)
    return AchievementListResponse(
        unlocked_count=unlocked_count(results),
        total=len(results),
        items=[
            AchievementResponse(
                id=a.id,
                title=a.title,
                description=a.description,
                metric=a.metric.value,
                threshold=a.threshold,
                progress=a.progress,
                unlocked=a.unlocked,
            )
            for a in results
        ],
    )


@router.get(
    "/motivation",
    response_model=MotivationResponse,
    summary="Streak message, daily challenge and a quote",
    responses=ERROR_RESPONSES,
)
def motivation(user_id: int, db: Session = Depends(get_db)):
    card = get_motivation(db, user_id)
    return MotivationResponse(
        current_streak=card.current_streak,
        milestone_message=card.milestone_message,
        celebrate=card.celebrate,
        challenge=ChallengeResponse(title=card.challenge.title, description=card.challenge.description),
        quote_category=card.quote_category,
        quote=card.quote,
        reflection_prompt=card.reflection_prompt,
    )
