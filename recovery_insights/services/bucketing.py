"""
Temporal bucketing — partition timestamped records into day / week / month buckets.

Granularity policy
------------------
  time range "week" or "month"     → one bucket per calendar day
  time range "quarter" or "year"   → one bucket per week (weeks start on Sunday)
  month buckets                    → only when asked for explicitly

Only keys that actually occur in the input produce a bucket; nothing is
back-filled here (see metrics.weekly_mood_chart for the one view that does).
Buckets come back in chronological order.

Labels
------
  day    → "Mon", "Tue", ...
  week   → "W<n>", n = ordinal of the week inside the month of its Sunday
  month  → "Jan", "Feb", ...

Records whose day cannot be derived are skipped one by one (logged), never
the whole batch.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Callable, Iterable, Optional

from recovery_insights.core.errors import MalformedRecordError
from recovery_insights.services.record_checks import calendar_day, local_timestamp, local_zone

logger = logging.getLogger(__name__)


class TimeRange(str, enum.Enum):
    week = "week"
    month = "month"
    quarter = "quarter"
    year = "year"


class Granularity(str, enum.Enum):
    day = "day"
    week = "week"
    month = "month"


# Window length of each range, "today" included.
RANGE_DAYS: dict[TimeRange, int] = {
    TimeRange.week: 7,
    TimeRange.month: 30,
    TimeRange.quarter: 90,
    TimeRange.year: 365,
}

_WEEKDAY_ABBR = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass
class Bucket:
    key: date            # first day covered by the bucket
    label: str
    granularity: Granularity
    records: list[Any] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.records)


# ---------------------------------------------------------------------------
# Day extraction
# ---------------------------------------------------------------------------

def today() -> date:
    return datetime.now(tz=local_zone()).date()


def urge_day(urge: Any) -> date:
    """Local calendar day of an urge's creation timestamp."""
    return local_timestamp(urge).date()


def journal_day(entry: Any) -> date:
    return calendar_day(entry)


# ---------------------------------------------------------------------------
# Keys and labels
# ---------------------------------------------------------------------------

def granularity_for(time_range: TimeRange) -> Granularity:
    if TimeRange(time_range) in (TimeRange.week, TimeRange.month):
        return Granularity.day
    return Granularity.week


def week_start(day: date) -> date:
    """Sunday on or before `day`."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def truncate(day: date, granularity: Granularity) -> date:
    if granularity == Granularity.day:
        return day
    if granularity == Granularity.week:
        return week_start(day)
    return day.replace(day=1)


def bucket_label(key: date, granularity: Granularity) -> str:
    if granularity == Granularity.day:
        return _WEEKDAY_ABBR[key.weekday()]
    if granularity == Granularity.week:
        return f"W{(key.day - 1) // 7 + 1}"
    return _MONTH_ABBR[key.month - 1]


# ---------------------------------------------------------------------------
# Range filtering
# ---------------------------------------------------------------------------

def range_start(time_range: TimeRange, end: Optional[date] = None) -> date:
    end = end or today()
    return end - timedelta(days=RANGE_DAYS[TimeRange(time_range)] - 1)


def last_n_days(n: int = 7, end: Optional[date] = None) -> list[date]:
    """The n calendar days ending on `end`, oldest first."""
    end = end or today()
    return [end - timedelta(days=i) for i in range(n - 1, -1, -1)]


def within_range(
    records: Iterable[Any],
    time_range: TimeRange,
    end: Optional[date] = None,
    day_of: Callable[[Any], date] = urge_day,
) -> list[Any]:
    """Keep records whose day falls in [range_start, end]. Malformed ones are dropped."""
    end = end or today()
    start = range_start(time_range, end)
    kept = []
    for record in records:
        try:
            day = day_of(record)
        except MalformedRecordError as exc:
            logger.warning("Skipping record %s: %s", exc.details.get("record_id"), exc.details["reason"])
            continue
        if start <= day <= end:
            kept.append(record)
    return kept


# ---------------------------------------------------------------------------
# Public — partition
# ---------------------------------------------------------------------------

def bucket_records(
    records: Iterable[Any],
    time_range: TimeRange = TimeRange.week,
    granularity: Optional[Granularity] = None,
    day_of: Callable[[Any], date] = urge_day,
) -> list[Bucket]:
    """
    Partition records into buckets, ascending by key.

    Every well-formed record lands in exactly one bucket, so the bucket
    counts always add up to the number of well-formed input records.
    """
    gran = Granularity(granularity) if granularity else granularity_for(time_range)
    buckets: dict[date, Bucket] = {}
    for record in records:
        try:
            day = day_of(record)
        except MalformedRecordError as exc:
            logger.warning("Skipping record %s: %s", exc.details.get("record_id"), exc.details["reason"])
            continue
        key = truncate(day, gran)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = Bucket(key=key, label=bucket_label(key, gran), granularity=gran)
        bucket.records.append(record)
    return [buckets[k] for k in sorted(buckets)]
