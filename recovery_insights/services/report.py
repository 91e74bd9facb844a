"""
Insights report — join the record-store fetches, then run every aggregation.

Flow
----
  load_snapshot(store, user_id)     urges + journal entries + streak, all three
                                    fetched before anything is computed
  build_report(snapshot, range)     bucketing → metrics → heuristics
  build_achievements(snapshot)      catalog evaluation, independent of the range
  build_motivation(snapshot, now)   streak message, challenge, quote

A failed fetch never aborts the report: the failing call contributes an
empty result, is listed in `snapshot.failed`, and the report is flagged
`insufficient_data`. Every call starts from a fresh snapshot; nothing is
cached between requests.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Optional, TypeVar

from sqlalchemy.orm import Session

from recovery_insights.core.errors import UpstreamFetchError
from recovery_insights.services import achievements as achievements_svc
from recovery_insights.services import motivation
from recovery_insights.services.bucketing import (
    TimeRange,
    journal_day,
    today as local_today,
    urge_day,
    within_range,
)
from recovery_insights.services.insights import Insight, derive_insights
from recovery_insights.services.metrics import (
    JournalSummary,
    MoodBucket,
    TriggerStat,
    UrgeBucket,
    UrgeSummary,
    mood_buckets,
    summarize_journal,
    summarize_urges,
    trigger_frequencies,
    urge_buckets,
    weekly_mood_chart,
)
from recovery_insights.services.record_checks import is_overcome, local_zone, valid_urges
from recovery_insights.services.record_store import RecordStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class RecordSnapshot:
    user_id: int
    urges: list[Any] = field(default_factory=list)
    journal_entries: list[Any] = field(default_factory=list)
    streak: Any = None
    failed: list[str] = field(default_factory=list)   # record-store operations that errored


@dataclass
class InsightsReport:
    user_id: int
    time_range: TimeRange
    reference_date: date
    urge_buckets: list[UrgeBucket]
    mood_buckets: list[MoodBucket]
    urge_summary: UrgeSummary
    journal_summary: JournalSummary
    triggers: list[TriggerStat]
    insights: list[Insight]
    insufficient_data: bool
    failed_sources: list[str]


@dataclass
class MotivationCard:
    current_streak: int
    milestone_message: str
    celebrate: bool
    challenge: motivation.Challenge
    quote_category: str
    quote: str
    reflection_prompt: str


# ---------------------------------------------------------------------------
# Snapshot loading
# ---------------------------------------------------------------------------

def fetch_or_default(
    snapshot: RecordSnapshot,
    operation: str,
    fetch: Callable[[], T],
    default: T,
) -> T:
    """Run one record-store call; on failure record it in `snapshot.failed` and return `default`."""
    try:
        return fetch()
    except UpstreamFetchError as exc:
        # RecordStore already logged the failure at ERROR.
        logger.debug("Using empty result for %s (user %s): %s", operation, snapshot.user_id, exc.message)
        snapshot.failed.append(operation)
        return default


def load_snapshot(store: RecordStore, user_id: int) -> RecordSnapshot:
    snapshot = RecordSnapshot(user_id=user_id)
    snapshot.urges = fetch_or_default(snapshot, "fetch_urges", lambda: store.fetch_urges(user_id), [])
    snapshot.journal_entries = fetch_or_default(
        snapshot, "fetch_journal_entries", lambda: store.fetch_journal_entries(user_id), []
    )
    snapshot.streak = fetch_or_default(snapshot, "fetch_streak", lambda: store.fetch_streak(user_id), None)
    return snapshot


# ---------------------------------------------------------------------------
# Pure builders
# ---------------------------------------------------------------------------

def build_report(
    snapshot: RecordSnapshot,
    time_range: TimeRange = TimeRange.week,
    reference_date: Optional[date] = None,
) -> InsightsReport:
    end = reference_date or local_today()
    urges = within_range(valid_urges(snapshot.urges), time_range, end, day_of=urge_day)
    entries = within_range(snapshot.journal_entries, time_range, end, day_of=journal_day)
    insights = derive_insights(urges)

    return InsightsReport(
        user_id=snapshot.user_id,
        time_range=TimeRange(time_range),
        reference_date=end,
        urge_buckets=urge_buckets(urges, time_range),
        mood_buckets=mood_buckets(entries, time_range),
        urge_summary=summarize_urges(urges),
        journal_summary=summarize_journal(entries),
        triggers=trigger_frequencies(urges),
        insights=insights,
        insufficient_data=bool(snapshot.failed) or not insights,
        failed_sources=list(snapshot.failed),
    )


def build_achievements(snapshot: RecordSnapshot) -> list[achievements_svc.AchievementProgress]:
    overcome = sum(1 for u in valid_urges(snapshot.urges) if is_overcome(u))
    return achievements_svc.display_order(
        achievements_svc.evaluate_achievements(snapshot.streak, overcome)
    )


def build_motivation(
    snapshot: RecordSnapshot,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> MotivationCard:
    now = now or datetime.now(tz=local_zone())
    current = getattr(snapshot.streak, "current_streak", 0) or 0
    urges_today = sum(1 for u in valid_urges(snapshot.urges) if urge_day(u) == now.date())
    category = motivation.quote_category(now.hour, urges_today, current)
    return MotivationCard(
        current_streak=current,
        milestone_message=motivation.milestone_message(current, now.date()),
        celebrate=motivation.is_celebration_day(current),
        challenge=motivation.daily_challenge(now.date()),
        quote_category=category,
        quote=motivation.pick_quote(category, rng),
        reflection_prompt=motivation.pick_reflection_prompt(rng),
    )


# ---------------------------------------------------------------------------
# Public — endpoint helpers
# ---------------------------------------------------------------------------

def get_insights_report(
    db: Session,
    user_id: int,
    time_range: TimeRange = TimeRange.week,
    reference_date: Optional[date] = None,
) -> InsightsReport:
    store = RecordStore(db)
    store.require_profile(user_id)
    return build_report(load_snapshot(store, user_id), time_range, reference_date)


def get_weekly_mood(db: Session, user_id: int, end: Optional[date] = None) -> list[MoodBucket]:
    store = RecordStore(db)
    store.require_profile(user_id)
    snapshot = RecordSnapshot(user_id=user_id)
    entries = fetch_or_default(
        snapshot, "fetch_journal_entries", lambda: store.fetch_journal_entries(user_id), []
    )
    return weekly_mood_chart(entries, end)


def get_achievements(db: Session, user_id: int) -> list[achievements_svc.AchievementProgress]:
    store = RecordStore(db)
    store.require_profile(user_id)
    return build_achievements(load_snapshot(store, user_id))


def get_motivation(db: Session, user_id: int, now: Optional[datetime] = None) -> MotivationCard:
    store = RecordStore(db)
    store.require_profile(user_id)
    return build_motivation(load_snapshot(store, user_id), now)
