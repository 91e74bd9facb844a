"""
Urges router.

POST  /users/{user_id}/urges
GET   /users/{user_id}/urges
GET   /users/{user_id}/urges/today
PATCH /users/{user_id}/urges/{urge_id}
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from recovery_insights.db.base import get_db
from recovery_insights.models.urge import Urge
from recovery_insights.schemas.common import ERROR_RESPONSES, ErrorResponse
from recovery_insights.schemas.urges import (
    UrgeCreate,
    UrgeHistoryResponse,
    UrgePatch,
    UrgeResponse,
)
from recovery_insights.services.history import UrgeFilter, UrgeSort, intensity_color, urge_history
from recovery_insights.services.metrics import summarize_urges
from recovery_insights.services.record_checks import is_overcome, local_timestamp
from recovery_insights.services.record_store import RecordStore
from recovery_insights.services.report import RecordSnapshot, fetch_or_default

router = APIRouter(prefix="/users/{user_id}/urges", tags=["urges"])


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _urge_to_response(urge: Urge) -> UrgeResponse:
    outcome = urge.outcome
    return UrgeResponse(
        id=urge.id,
        user_id=urge.user_id,
        intensity=urge.intensity,
        intensity_color=intensity_color(urge.intensity),
        location=urge.location or "",
        trigger=urge.trigger or "",
        notes=urge.notes,
        outcome=getattr(outcome, "value", outcome),
        overcome=is_overcome(urge),
        created_at=local_timestamp(urge).isoformat(),
    )


def _history_response(
    all_urges: list[Urge], items: list[Urge], failed: list[str]
) -> UrgeHistoryResponse:
    summary = summarize_urges(all_urges)
    return UrgeHistoryResponse(
        total=summary.total,
        overcome_count=summary.overcome_count,
        success_rate=summary.overcome_percentage,
        average_intensity=summary.average_intensity,
        most_common_trigger=summary.most_common_trigger,
        items=[_urge_to_response(u) for u in items],
        failed_sources=failed,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=UrgeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record an urge",
    responses=ERROR_RESPONSES,
)
def create_urge(user_id: int, payload: UrgeCreate, db: Session = Depends(get_db)):
    store = RecordStore(db)
    store.require_profile(user_id)
    urge = store.create_urge(user_id, payload.model_dump())
    return _urge_to_response(urge)


@router.get(
    "",
    response_model=UrgeHistoryResponse,
    summary="Urge history with filter and sort",
    responses=ERROR_RESPONSES,
)
def list_urges(
    user_id: int,
    filter: UrgeFilter = Query(default=UrgeFilter.all, description='"all", "overcome" or "relapsed".'),
    sort: UrgeSort = Query(default=UrgeSort.newest, description='"newest", "oldest", "highest", "lowest".'),
    db: Session = Depends(get_db),
):
    """
    Header stats (total, success rate, average intensity, top trigger) are
    computed over the full history; only `items` is filtered.
    """
    store = RecordStore(db)
    store.require_profile(user_id)
    snapshot = RecordSnapshot(user_id=user_id)
    urges = fetch_or_default(snapshot, "fetch_urges", lambda: store.fetch_urges(user_id), [])
    return _history_response(urges, urge_history(urges, filter, sort), snapshot.failed)


@router.get(
    "/today",
    response_model=UrgeHistoryResponse,
    summary="Urges recorded today (local time)",
    responses=ERROR_RESPONSES,
)
def list_urges_today(
    user_id: int,
    day: Optional[date] = Query(
        default=None,
        description="ISO date (YYYY-MM-DD). Defaults to today in the configured timezone.",
        examples=["2026-03-14"],
    ),
    db: Session = Depends(get_db),
):
    store = RecordStore(db)
    store.require_profile(user_id)
    snapshot = RecordSnapshot(user_id=user_id)
    urges = fetch_or_default(
        snapshot, "fetch_urges_today", lambda: store.fetch_urges_today(user_id, day), []
    )
    return _history_response(urges, urges, snapshot.failed)


@router.patch(
    "/{urge_id}",
    response_model=UrgeResponse,
    summary="Update an urge or resolve its outcome",
    responses={
        **ERROR_RESPONSES,
        409: {"model": ErrorResponse, "description": "Outcome already resolved."},
    },
)
def patch_urge(user_id: int, urge_id: int, payload: UrgePatch, db: Session = Depends(get_db)):
    """
    Partial update. `outcome` moves from "pending" to "resisted" or
    "indulged" once; changing it afterwards returns **409**.
    """
    store = RecordStore(db)
    store.require_profile(user_id)
    urge = store.update_urge(urge_id, payload.model_dump(exclude_unset=True), user_id=user_id)
    return _urge_to_response(urge)
