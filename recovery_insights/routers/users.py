"""
Profiles router.

POST  /users
GET   /users/{user_id}
GET   /users/{user_id}/streak
PATCH /users/{user_id}/streak
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from recovery_insights.db.base import get_db
from recovery_insights.models.profile import Profile
from recovery_insights.models.streak import Streak
from recovery_insights.schemas.common import ERROR_RESPONSES, ErrorResponse
from recovery_insights.schemas.users import (
    ProfileCreate,
    ProfileResponse,
    StreakResponse,
    StreakUpdate,
)
from recovery_insights.services.bucketing import today as local_today
from recovery_insights.services.record_store import RecordStore

router = APIRouter(prefix="/users", tags=["users"])


def _streak_to_response(user_id: int, streak: Streak | None) -> StreakResponse:
    if streak is None:
        return StreakResponse(
            user_id=user_id, current_streak=0, best_streak=0,
            total_clean_days=0, last_check_in=None, relapse_count=0,
        )
    return StreakResponse.model_validate(streak)


@router.post(
    "",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a profile",
    responses={409: {"model": ErrorResponse, "description": "Email already registered."}},
)
def create_profile(payload: ProfileCreate, db: Session = Depends(get_db)):
    """Create a profile and its zeroed streak row. `start_date` defaults to today."""
    data = payload.model_dump()
    data["start_date"] = data["start_date"] or local_today()
    profile: Profile = RecordStore(db).create_profile(data)
    return ProfileResponse.model_validate(profile)


@router.get(
    "/{user_id}",
    response_model=ProfileResponse,
    summary="Get a profile",
    responses=ERROR_RESPONSES,
)
def get_profile(user_id: int, db: Session = Depends(get_db)):
    return ProfileResponse.model_validate(RecordStore(db).require_profile(user_id))


@router.get(
    "/{user_id}/streak",
    response_model=StreakResponse,
    summary="Current streak counters",
    responses=ERROR_RESPONSES,
)
def get_streak(user_id: int, db: Session = Depends(get_db)):
    store = RecordStore(db)
    store.require_profile(user_id)
    return _streak_to_response(user_id, store.fetch_streak(user_id))


@router.patch(
    "/{user_id}/streak",
    response_model=StreakResponse,
    summary="Update streak counters",
    responses=ERROR_RESPONSES,
)
def patch_streak(user_id: int, payload: StreakUpdate, db: Session = Depends(get_db)):
    """
    Overwrite the given counters. `best_streak` is raised automatically when
    `current_streak` goes past it.
    """
    store = RecordStore(db)
    store.require_profile(user_id)
    streak = store.update_streak(user_id, payload.model_dump(exclude_none=True))
    return _streak_to_response(user_id, streak)
