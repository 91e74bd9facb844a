"""
Urge history and journal list views: filtering and ordering.
"""
from __future__ import annotations

import enum
from typing import Any, Iterable, Optional

from recovery_insights.services.bucketing import journal_day
from recovery_insights.services.record_checks import (
    entry_type_of,
    is_overcome,
    is_relapse,
    local_timestamp,
    valid_journal_entries,
    valid_urges,
)


class UrgeFilter(str, enum.Enum):
    all = "all"
    overcome = "overcome"
    relapsed = "relapsed"


class UrgeSort(str, enum.Enum):
    newest = "newest"
    oldest = "oldest"
    highest = "highest"
    lowest = "lowest"


class JournalSort(str, enum.Enum):
    date_desc = "date_desc"
    date_asc = "date_asc"
    mood_high = "mood_high"
    mood_low = "mood_low"


def intensity_color(intensity: int) -> str:
    if intensity <= 3:
        return "#10B981"
    if intensity <= 7:
        return "#F59E0B"
    return "#EF4444"


def urge_history(
    urges: Iterable[Any],
    filter_by: UrgeFilter = UrgeFilter.all,
    sort_by: UrgeSort = UrgeSort.newest,
) -> list[Any]:
    kept = valid_urges(urges)
    if filter_by == UrgeFilter.overcome:
        kept = [u for u in kept if is_overcome(u)]
    elif filter_by == UrgeFilter.relapsed:
        kept = [u for u in kept if is_relapse(u)]

    if sort_by == UrgeSort.oldest:
        return sorted(kept, key=local_timestamp)
    if sort_by == UrgeSort.highest:
        return sorted(kept, key=lambda u: u.intensity, reverse=True)
    if sort_by == UrgeSort.lowest:
        return sorted(kept, key=lambda u: u.intensity)
    return sorted(kept, key=local_timestamp, reverse=True)


def journal_list(
    entries: Iterable[Any],
    entry_type: Optional[str] = None,
    sort_by: JournalSort = JournalSort.date_desc,
) -> list[Any]:
    kept = valid_journal_entries(entries)
    if entry_type and entry_type != "all":
        kept = [e for e in kept if entry_type_of(e) == entry_type]

    if sort_by == JournalSort.date_asc:
        return sorted(kept, key=journal_day)
    if sort_by == JournalSort.mood_high:
        return sorted(kept, key=lambda e: e.mood, reverse=True)
    if sort_by == JournalSort.mood_low:
        return sorted(kept, key=lambda e: e.mood)
    return sorted(kept, key=journal_day, reverse=True)
