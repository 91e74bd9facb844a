"""
Per-record checks shared by every aggregation pass.

A record that fails a check raises MalformedRecordError. Aggregations call
`valid_urges` / `valid_journal_entries`, which drop the offending record,
log it, and keep going with the rest of the batch.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timezone, tzinfo
from functools import lru_cache
from numbers import Real
from typing import Any, Iterable
from zoneinfo import ZoneInfo

from recovery_insights.core.config import settings
from recovery_insights.core.errors import MalformedRecordError

logger = logging.getLogger(__name__)

MIN_INTENSITY, MAX_INTENSITY = 1, 10
MIN_MOOD, MAX_MOOD = 1, 5


@lru_cache(maxsize=8)
def _zone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def local_zone() -> tzinfo:
    return _zone(settings.TIMEZONE)


def _record_id(record: Any) -> Any:
    return getattr(record, "id", None)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def local_timestamp(record: Any) -> datetime:
    """Return record.created_at in the configured zone. Naive values are UTC."""
    raw = getattr(record, "created_at", None)
    if isinstance(raw, str):
        try:
            raw = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            raise MalformedRecordError("unparseable timestamp", _record_id(record))
    if not isinstance(raw, datetime):
        raise MalformedRecordError("missing timestamp", _record_id(record))
    if raw.tzinfo is None:
        raw = raw.replace(tzinfo=timezone.utc)
    return raw.astimezone(local_zone())


def calendar_day(record: Any) -> date:
    """Return record.date as a date (journal entries are keyed by calendar day)."""
    raw = getattr(record, "date", None)
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str):
        try:
            return date.fromisoformat(raw[:10])
        except ValueError:
            raise MalformedRecordError("unparseable date", _record_id(record))
    raise MalformedRecordError("missing date", _record_id(record))


def check_urge(urge: Any) -> None:
    local_timestamp(urge)
    intensity = getattr(urge, "intensity", None)
    if not _is_number(intensity):
        raise MalformedRecordError("non-numeric intensity", _record_id(urge))
    if not MIN_INTENSITY <= intensity <= MAX_INTENSITY:
        raise MalformedRecordError(
            f"intensity {intensity} outside {MIN_INTENSITY}..{MAX_INTENSITY}", _record_id(urge)
        )


def check_journal_entry(entry: Any) -> None:
    calendar_day(entry)
    mood = getattr(entry, "mood", None)
    if not _is_number(mood):
        raise MalformedRecordError("non-numeric mood", _record_id(entry))
    if not MIN_MOOD <= mood <= MAX_MOOD:
        raise MalformedRecordError(f"mood {mood} outside {MIN_MOOD}..{MAX_MOOD}", _record_id(entry))


def _keep_valid(records: Iterable[Any], check) -> list[Any]:
    kept = []
    for record in records:
        try:
            check(record)
        except MalformedRecordError as exc:
            logger.warning("Skipping record %s: %s", exc.details.get("record_id"), exc.details["reason"])
            continue
        kept.append(record)
    return kept


def valid_urges(urges: Iterable[Any]) -> list[Any]:
    return _keep_valid(urges, check_urge)


def valid_journal_entries(entries: Iterable[Any]) -> list[Any]:
    return _keep_valid(entries, check_journal_entry)


def is_overcome(urge: Any) -> bool:
    """True only for urges resolved as resisted. Pending urges are not overcome."""
    outcome = getattr(urge, "outcome", None)
    if outcome is not None:
        return getattr(outcome, "value", outcome) == "resisted"
    return getattr(urge, "overcome", None) is True


def is_relapse(urge: Any) -> bool:
    outcome = getattr(urge, "outcome", None)
    if outcome is not None:
        return getattr(outcome, "value", outcome) == "indulged"
    return getattr(urge, "overcome", None) is False


def entry_type_of(entry: Any) -> str:
    value = getattr(entry, "entry_type", None) or "daily"
    return getattr(value, "value", value)
