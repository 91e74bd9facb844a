"""
Pattern heuristics — turn urge history into human-readable insights.

Rules (evaluated in order on every call)
----------------------------------------
  1. TIME_OF_DAY
     Trigger : at least INSIGHT_MIN_URGES (3) well-formed urges
     Output  : the hour with the most urges, the named window it falls in,
               and the share of all urges logged in that single hour.

The share is computed for the peak hour only, not the whole window, so
it under-reports how much of the day part is affected. That is the
established behaviour of the insight card and is kept as is.

Confidence = min(urge_count * 5, INSIGHT_CONFIDENCE_CAP). It never reaches 100.
Fewer than the minimum number of urges produces no insights at all.

Nothing here stores state: identical input gives identical output.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from recovery_insights.core.config import settings
from recovery_insights.services.metrics import most_frequent, percentage
from recovery_insights.services.record_checks import local_timestamp, valid_urges

logger = logging.getLogger(__name__)

CONFIDENCE_PER_URGE = 5


# ---------------------------------------------------------------------------
# Insight kinds and windows
# ---------------------------------------------------------------------------

class InsightKind:
    TIME_OF_DAY = "time_of_day"


@dataclass(frozen=True)
class DayWindow:
    name: str
    label: str
    hours: frozenset[int]
    title: str
    action: str


WINDOWS: tuple[DayWindow, ...] = (
    DayWindow(
        name="morning",
        label="morning (5am-12pm)",
        hours=frozenset(range(5, 12)),
        title="Morning Vulnerability",
        action="Create a solid morning routine",
    ),
    DayWindow(
        name="afternoon",
        label="afternoon (12pm-5pm)",
        hours=frozenset(range(12, 17)),
        title="Afternoon Vulnerability",
        action="Plan an energizing break for the early afternoon",
    ),
    DayWindow(
        name="evening",
        label="evening (5pm-9pm)",
        hours=frozenset(range(17, 21)),
        title="Evening Vulnerability",
        action="Schedule a calming wind-down activity for your evenings",
    ),
    DayWindow(
        name="night",
        label="night (9pm-5am)",
        hours=frozenset(list(range(21, 24)) + list(range(0, 5))),
        title="Late Night Vulnerability",
        action="Set a consistent bedtime and keep devices out of reach",
    ),
)


def window_for_hour(hour: int) -> DayWindow:
    for window in WINDOWS:
        if hour in window.hours:
            return window
    raise ValueError(f"hour out of range: {hour}")


def hour_label(hour: int) -> str:
    suffix = "am" if hour < 12 else "pm"
    return f"{hour % 12 or 12}{suffix}"


def confidence_for(urge_count: int, cap: Optional[int] = None) -> int:
    ceiling = settings.INSIGHT_CONFIDENCE_CAP if cap is None else cap
    return min(urge_count * CONFIDENCE_PER_URGE, ceiling)


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Insight:
    kind: str
    title: str
    description: str
    confidence: int              # 0..90
    action: str
    details: dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Individual rules
# ---------------------------------------------------------------------------

def _rule_time_of_day(urges: list[Any]) -> Optional[Insight]:
    hours = [local_timestamp(u).hour for u in urges]
    peak = most_frequent(hours)
    if peak is None:
        return None
    window = window_for_hour(peak)
    share = percentage(hours.count(peak), len(urges))
    return Insight(
        kind=InsightKind.TIME_OF_DAY,
        title=window.title,
        description=(
            f"{share}% of your urges happen around {hour_label(peak)}, "
            f"in the {window.label}"
        ),
        confidence=confidence_for(len(urges)),
        action=window.action,
        details={
            "peak_hour": peak,
            "window": window.label,
            "percentage": share,
            "sample_size": len(urges),
        },
    )


_RULES: tuple[Callable[[list[Any]], Optional[Insight]], ...] = (
    _rule_time_of_day,
)


# ---------------------------------------------------------------------------
# Public — main entry point
# ---------------------------------------------------------------------------

def derive_insights(urges: Iterable[Any], min_urges: Optional[int] = None) -> list[Insight]:
    """Evaluate every rule against the urge list. Returns [] below the minimum sample."""
    kept = valid_urges(urges)
    threshold = settings.INSIGHT_MIN_URGES if min_urges is None else min_urges
    if len(kept) < threshold:
        logger.debug("Not enough urges for insights (%d < %d)", len(kept), threshold)
        return []

    insights = []
    for rule in _RULES:
        insight = rule(kept)
        if insight is not None:
            insights.append(insight)
    return insights
