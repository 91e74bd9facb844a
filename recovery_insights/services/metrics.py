"""
Metric derivation over urge and journal records.

Public API
----------
urge_buckets(urges, time_range)          -> list[UrgeBucket]
mood_buckets(entries, time_range)        -> list[MoodBucket]
weekly_mood_chart(entries, end)          -> list[MoodBucket]   (always 7, back-filled)
summarize_urges(urges)                   -> UrgeSummary
summarize_journal(entries)               -> JournalSummary
trigger_frequencies(urges, limit)        -> list[TriggerStat]

Classification boundaries
-------------------------
  intensity tier : avg > 7 → high, avg > 5 → medium, else low
  mood tier      : avg ≥ 4 → excellent, ≥ 3 → good, ≥ 2 → neutral, else difficult

Percentages and one-decimal averages round half-up.
Every function is pure: malformed records are dropped, empty input gives
zeros / empty lists, nothing raises.
"""
from __future__ import annotations

import enum
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Hashable, Iterable, Optional

from recovery_insights.core.config import settings
from recovery_insights.services.bucketing import (
    Bucket,
    Granularity,
    TimeRange,
    bucket_label,
    bucket_records,
    journal_day,
    last_n_days,
    urge_day,
)
from recovery_insights.services.record_checks import (
    entry_type_of,
    is_overcome,
    is_relapse,
    local_timestamp,
    valid_journal_entries,
    valid_urges,
)


# ---------------------------------------------------------------------------
# Tiers
# ---------------------------------------------------------------------------

class IntensityTier(str, enum.Enum):
    high = "high"
    medium = "medium"
    low = "low"


class MoodTier(str, enum.Enum):
    excellent = "excellent"
    good = "good"
    neutral = "neutral"
    difficult = "difficult"


INTENSITY_COLORS = {
    IntensityTier.high: "#EF4444",
    IntensityTier.medium: "#F59E0B",
    IntensityTier.low: "#10B981",
}

MOOD_COLORS = {
    MoodTier.excellent: "#10B981",
    MoodTier.good: "#3B82F6",
    MoodTier.neutral: "#F59E0B",
    MoodTier.difficult: "#EF4444",
}

PLACEHOLDER_COLOR = "#E5E7EB"

MOOD_LABELS = {1: "Very Low", 2: "Low", 3: "Neutral", 4: "Good", 5: "Excellent"}


def intensity_tier(average: float) -> IntensityTier:
    if average > 7:
        return IntensityTier.high
    if average > 5:
        return IntensityTier.medium
    return IntensityTier.low


def mood_tier(average: float) -> MoodTier:
    if average >= 4:
        return MoodTier.excellent
    if average >= 3:
        return MoodTier.good
    if average >= 2:
        return MoodTier.neutral
    return MoodTier.difficult


def mood_label(mood: Optional[int]) -> Optional[str]:
    return MOOD_LABELS.get(mood) if mood is not None else None


# ---------------------------------------------------------------------------
# Numeric helpers
# ---------------------------------------------------------------------------

def percentage(part: int, whole: int) -> int:
    """round(part / whole * 100), half-up; 0 when whole is 0."""
    if not whole:
        return 0
    raw = Decimal(part) * 100 / Decimal(whole)
    return int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def round_half_up(value: float, places: int = 1) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def most_frequent(values: Iterable[Hashable]) -> Any:
    """Most common value; ties go to the one seen first. None for no values."""
    counts = Counter(values)
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def weekday_index(day_or_dt) -> int:
    """0 = Sunday … 6 = Saturday."""
    return (day_or_dt.weekday() + 1) % 7


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UrgeBucket:
    key: date
    label: str
    count: int
    overcome_count: int
    average_intensity: float
    tier: IntensityTier
    color: str


@dataclass(frozen=True)
class MoodBucket:
    key: date
    label: str
    count: int
    average_mood: float
    tier: Optional[MoodTier]     # None for back-filled placeholders
    color: str
    placeholder: bool = False


@dataclass(frozen=True)
class UrgeSummary:
    total: int
    overcome_count: int
    relapse_count: int
    pending_count: int
    overcome_percentage: int              # 0..100
    average_intensity: float              # one decimal, 0.0 when empty
    most_common_trigger: Optional[str]
    peak_hour: Optional[int]              # 0..23, local time
    peak_weekday: Optional[int]           # 0 = Sunday


@dataclass(frozen=True)
class JournalSummary:
    total_entries: int
    average_mood: float                   # one decimal, 0.0 when empty
    most_common_mood: Optional[int]
    most_common_mood_label: Optional[str]
    entry_types_used: int
    urges_recorded: int
    top_emotions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TriggerStat:
    name: str
    count: int
    percentage: int


# ---------------------------------------------------------------------------
# Per-bucket metrics
# ---------------------------------------------------------------------------

def _urge_bucket(bucket: Bucket) -> UrgeBucket:
    count = bucket.count
    avg = sum(u.intensity for u in bucket.records) / count
    tier = intensity_tier(avg)
    return UrgeBucket(
        key=bucket.key,
        label=bucket.label,
        count=count,
        overcome_count=sum(1 for u in bucket.records if is_overcome(u)),
        average_intensity=avg,
        tier=tier,
        color=INTENSITY_COLORS[tier],
    )


def _mood_bucket(bucket: Bucket) -> MoodBucket:
    avg = sum(e.mood for e in bucket.records) / bucket.count
    tier = mood_tier(avg)
    return MoodBucket(
        key=bucket.key,
        label=bucket.label,
        count=bucket.count,
        average_mood=avg,
        tier=tier,
        color=MOOD_COLORS[tier],
    )


def urge_buckets(
    urges: Iterable[Any],
    time_range: TimeRange = TimeRange.week,
    granularity: Optional[Granularity] = None,
) -> list[UrgeBucket]:
    buckets = bucket_records(valid_urges(urges), time_range, granularity, day_of=urge_day)
    return [_urge_bucket(b) for b in buckets]


def mood_buckets(
    entries: Iterable[Any],
    time_range: TimeRange = TimeRange.week,
    granularity: Optional[Granularity] = None,
) -> list[MoodBucket]:
    buckets = bucket_records(valid_journal_entries(entries), time_range, granularity, day_of=journal_day)
    return [_mood_bucket(b) for b in buckets]


def weekly_mood_chart(entries: Iterable[Any], end: Optional[date] = None) -> list[MoodBucket]:
    """
    Mood for each of the 7 calendar days ending on `end` (today by default).
    Days without an entry become zero-value placeholders, so the result
    always has exactly 7 items, oldest first.
    """
    days = last_n_days(7, end)
    by_day: dict[date, list[Any]] = {}
    for entry in valid_journal_entries(entries):
        by_day.setdefault(journal_day(entry), []).append(entry)

    chart = []
    for day in days:
        found = by_day.get(day)
        if found:
            chart.append(_mood_bucket(Bucket(
                key=day, label=bucket_label(day, Granularity.day),
                granularity=Granularity.day, records=found,
            )))
        else:
            chart.append(MoodBucket(
                key=day,
                label=bucket_label(day, Granularity.day),
                count=0,
                average_mood=0.0,
                tier=None,
                color=PLACEHOLDER_COLOR,
                placeholder=True,
            ))
    return chart


# ---------------------------------------------------------------------------
# Whole-set metrics
# ---------------------------------------------------------------------------

def summarize_urges(urges: Iterable[Any]) -> UrgeSummary:
    kept = valid_urges(urges)
    total = len(kept)
    overcome = sum(1 for u in kept if is_overcome(u))
    relapsed = sum(1 for u in kept if is_relapse(u))
    stamps = [local_timestamp(u) for u in kept]

    return UrgeSummary(
        total=total,
        overcome_count=overcome,
        relapse_count=relapsed,
        pending_count=total - overcome - relapsed,
        overcome_percentage=percentage(overcome, total),
        average_intensity=round_half_up(sum(u.intensity for u in kept) / total) if total else 0.0,
        most_common_trigger=most_frequent(u.trigger for u in kept if u.trigger),
        peak_hour=most_frequent(ts.hour for ts in stamps),
        peak_weekday=most_frequent(weekday_index(ts) for ts in stamps),
    )


def summarize_journal(entries: Iterable[Any], top_emotions: int = 3) -> JournalSummary:
    kept = valid_journal_entries(entries)
    total = len(kept)
    common = most_frequent(e.mood for e in kept)
    emotions = Counter(
        emotion for e in kept for emotion in (getattr(e, "emotions", None) or [])
    )
    return JournalSummary(
        total_entries=total,
        average_mood=round_half_up(sum(e.mood for e in kept) / total) if total else 0.0,
        most_common_mood=common,
        most_common_mood_label=mood_label(common),
        entry_types_used=len({entry_type_of(e) for e in kept}),
        urges_recorded=sum(1 for e in kept if getattr(e, "had_urge", False)),
        top_emotions=[name for name, _ in emotions.most_common(top_emotions)],
    )


def trigger_frequencies(urges: Iterable[Any], limit: Optional[int] = None) -> list[TriggerStat]:
    """
    Urge counts grouped by exact trigger text (case-sensitive), largest first.
    Percentages are relative to all urges, including those without a trigger.
    """
    kept = valid_urges(urges)
    total = len(kept)
    counts = Counter(u.trigger for u in kept if u.trigger)
    size = settings.TRIGGER_TABLE_SIZE if limit is None else limit
    return [
        TriggerStat(name=name, count=count, percentage=percentage(count, total))
        for name, count in counts.most_common(size)
    ]
