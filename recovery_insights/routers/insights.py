"""
Insights router.

GET /users/{user_id}/insights             — chart buckets, summaries, triggers, heuristics
GET /users/{user_id}/insights/mood-week   — 7-day mood chart with placeholders
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from recovery_insights.db.base import get_db
from recovery_insights.schemas.common import ERROR_RESPONSES
from recovery_insights.schemas.insights import (
    InsightResponse,
    InsightsReportResponse,
    JournalSummaryResponse,
    MoodBucketResponse,
    MoodWeekResponse,
    TriggerStatResponse,
    UrgeBucketResponse,
    UrgeSummaryResponse,
)
from recovery_insights.services.bucketing import TimeRange, today as local_today
from recovery_insights.services.metrics import MoodBucket, UrgeBucket
from recovery_insights.services.report import get_insights_report, get_weekly_mood

router = APIRouter(prefix="/users/{user_id}/insights", tags=["insights"])


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _urge_bucket(b: UrgeBucket) -> UrgeBucketResponse:
    return UrgeBucketResponse(
        key=b.key.isoformat(),
        label=b.label,
        count=b.count,
        overcome_count=b.overcome_count,
        average_intensity=b.average_intensity,
        tier=b.tier.value,
        color=b.color,
    )


def _mood_bucket(b: MoodBucket) -> MoodBucketResponse:
    return MoodBucketResponse(
        key=b.key.isoformat(),
        label=b.label,
        count=b.count,
        average_mood=b.average_mood,
        tier=b.tier.value if b.tier is not None else None,
        color=b.color,
        placeholder=b.placeholder,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=InsightsReportResponse,
    summary="Recovery insights for a time range",
    responses=ERROR_RESPONSES,
)
def insights(
    user_id: int,
    time_range: TimeRange = Query(
        default=TimeRange.week,
        description='"week" (7 days), "month" (30), "quarter" (90) or "year" (365).',
    ),
    reference_date: Optional[date] = Query(
        default=None,
        description="Last day of the window (YYYY-MM-DD). Defaults to today.",
        examples=["2026-03-14"],
    ),
    db: Session = Depends(get_db),
):
    """
    Build the full insights report.

    ### Buckets
    `week` and `month` produce one bucket per day, `quarter` and `year` one per
    week (weeks start on Sunday). Only days or weeks with records appear.

    ### Heuristics
    With fewer than 3 urges in the window `insights` is empty and
    `insufficient_data` is true. A record-store failure also sets the flag and
    lists the failing call in `failed_sources`; the rest of the report is still
    computed from whatever could be fetched.
    """
    report = get_insights_report(db, user_id, time_range, reference_date)
    return InsightsReportResponse(
        user_id=report.user_id,
        time_range=report.time_range.value,
        reference_date=report.reference_date.isoformat(),
        urge_buckets=[_urge_bucket(b) for b in report.urge_buckets],
        mood_buckets=[_mood_bucket(b) for b in report.mood_buckets],
        urge_summary=UrgeSummaryResponse(**vars(report.urge_summary)),
        journal_summary=JournalSummaryResponse(**vars(report.journal_summary)),
        triggers=[TriggerStatResponse(**vars(t)) for t in report.triggers],
        insights=[InsightResponse(**vars(i)) for i in report.insights],
        insufficient_data=report.insufficient_data,
        failed_sources=report.failed_sources,
    )


@router.get(
    "/mood-week",
    response_model=MoodWeekResponse,
    summary="Mood for each of the last 7 days",
    responses=ERROR_RESPONSES,
)
def mood_week(
    user_id: int,
    end: Optional[date] = Query(default=None, description="Last day shown. Defaults to today."),
    db: Session = Depends(get_db),
):
    """Always 7 items ending on `end`; days without an entry are grey placeholders."""
    end = end or local_today()
    days = get_weekly_mood(db, user_id, end)
    return MoodWeekResponse(end=end.isoformat(), days=[_mood_bucket(b) for b in days])
