"""
Journal router.

GET /users/{user_id}/journal
GET /users/{user_id}/journal/{day}
PUT /users/{user_id}/journal/{day}
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from recovery_insights.core.errors import JournalEntryNotFoundError
from recovery_insights.db.base import get_db
from recovery_insights.models.journal_entry import JournalEntry
from recovery_insights.schemas.common import ERROR_RESPONSES
from recovery_insights.schemas.journal import (
    JournalEntryResponse,
    JournalListResponse,
    JournalStatsResponse,
    JournalUpsert,
)
from recovery_insights.services.history import JournalSort, journal_list
from recovery_insights.services.metrics import mood_label, summarize_journal
from recovery_insights.services.record_checks import entry_type_of
from recovery_insights.services.record_store import RecordStore
from recovery_insights.services.report import RecordSnapshot, fetch_or_default

router = APIRouter(prefix="/users/{user_id}/journal", tags=["journal"])


def _entry_to_response(entry: JournalEntry) -> JournalEntryResponse:
    return JournalEntryResponse(
        id=entry.id,
        user_id=entry.user_id,
        date=str(entry.date),
        mood=entry.mood,
        mood_label=mood_label(entry.mood) or "",
        text=entry.text or "",
        entry_type=entry_type_of(entry),
        emotions=entry.emotions or [],
        thoughts=entry.thoughts or [],
        behaviors=entry.behaviors or [],
        triggers=entry.triggers or [],
        coping_strategies=entry.coping_strategies or [],
        gratitude_items=entry.gratitude_items or [],
        goals=entry.goals or [],
        physical_symptoms=entry.physical_symptoms or [],
        lessons_learned=entry.lessons_learned,
        recovery_wins=entry.recovery_wins,
        had_urge=bool(entry.had_urge),
    )


@router.get(
    "",
    response_model=JournalListResponse,
    summary="Journal entries with type filter and sort",
    responses=ERROR_RESPONSES,
)
def list_entries(
    user_id: int,
    entry_type: Optional[str] = Query(
        default=None,
        description='Filter by type ("daily", "cbt", "gratitude", ...). Omit or "all" for every type.',
        examples=["gratitude"],
    ),
    sort: JournalSort = Query(default=JournalSort.date_desc),
    db: Session = Depends(get_db),
):
    """`stats` covers every entry of the profile; `items` honours the filter."""
    store = RecordStore(db)
    store.require_profile(user_id)
    snapshot = RecordSnapshot(user_id=user_id)
    entries = fetch_or_default(
        snapshot, "fetch_journal_entries", lambda: store.fetch_journal_entries(user_id), []
    )
    stats = summarize_journal(entries)
    return JournalListResponse(
        stats=JournalStatsResponse(**vars(stats)),
        items=[_entry_to_response(e) for e in journal_list(entries, entry_type, sort)],
        failed_sources=snapshot.failed,
    )


@router.get(
    "/{day}",
    response_model=JournalEntryResponse,
    summary="Journal entry for one day",
    responses=ERROR_RESPONSES,
)
def get_entry(user_id: int, day: date, db: Session = Depends(get_db)):
    store = RecordStore(db)
    store.require_profile(user_id)
    entry = store.fetch_journal_entry(user_id, day)
    if entry is None:
        raise JournalEntryNotFoundError(day)
    return _entry_to_response(entry)


@router.put(
    "/{day}",
    response_model=JournalEntryResponse,
    summary="Create or update the entry for one day",
    responses=ERROR_RESPONSES,
)
def put_entry(user_id: int, day: date, payload: JournalUpsert, db: Session = Depends(get_db)):
    """
    At most one entry exists per day: a second PUT updates the first.

    `mood` is required when the day has no entry yet (**422** otherwise).
    A legacy `content` payload is decoded into the structured fields.
    """
    store = RecordStore(db)
    store.require_profile(user_id)
    entry = store.upsert_journal_entry(user_id, day, payload.model_dump(exclude_unset=True))
    return _entry_to_response(entry)
