"""
Record store — CRUD over profiles, streaks, urges and journal entries.

Public API (RecordStore methods)
--------------------------------
fetch_urges(user_id)                       -> list[Urge]          newest first
fetch_urges_today(user_id, today)          -> list[Urge]          newest first
fetch_journal_entries(user_id)             -> list[JournalEntry]  newest date first
fetch_journal_entry(user_id, day)          -> JournalEntry | None
fetch_streak(user_id)                      -> Streak | None
create_urge(user_id, data)                 -> Urge
update_urge(urge_id, patch, user_id)       -> Urge
upsert_journal_entry(user_id, day, patch)  -> JournalEntry
create_profile(data) / fetch_profile(user_id) / require_profile(user_id)
update_streak(user_id, patch)              -> Streak

Any SQLAlchemy failure surfaces as UpstreamFetchError after a rollback.
Callers that aggregate are expected to treat that as "no data".
Inputs are plain dicts so this layer stays schema-agnostic.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from recovery_insights.core.errors import (
    MalformedRecordError,
    ProfileAlreadyExistsError,
    ProfileNotFoundError,
    UpstreamFetchError,
    UrgeAlreadyResolvedError,
    UrgeNotFoundError,
)
from recovery_insights.models.journal_entry import JournalEntry
from recovery_insights.models.profile import Profile
from recovery_insights.models.streak import Streak
from recovery_insights.models.urge import Urge, UrgeOutcome
from recovery_insights.services.bucketing import today as local_today, urge_day
from recovery_insights.services.journal_content import legacy_content_patch

logger = logging.getLogger(__name__)

_URGE_FIELDS = ("intensity", "location", "trigger", "notes", "outcome", "created_at")
_STREAK_FIELDS = ("current_streak", "best_streak", "total_clean_days", "last_check_in", "relapse_count")
_JOURNAL_FIELDS = (
    "mood", "text", "entry_type", "emotions", "thoughts", "behaviors", "triggers",
    "coping_strategies", "gratitude_items", "goals", "physical_symptoms",
    "lessons_learned", "recovery_wins", "had_urge",
)


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def _as_utc(ts: Optional[datetime]) -> Optional[datetime]:
    if ts is None or ts.tzinfo is None:
        return ts
    return ts.astimezone(timezone.utc)


class RecordStore:
    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Failure wrapping
    # ------------------------------------------------------------------

    def _failed(self, operation: str, exc: SQLAlchemyError) -> UpstreamFetchError:
        self.db.rollback()
        logger.error("Record store call %s failed: %s", operation, exc)
        return UpstreamFetchError(operation, reason=exc.__class__.__name__)

    # ------------------------------------------------------------------
    # Profiles and streaks
    # ------------------------------------------------------------------

    def create_profile(self, data: dict[str, Any]) -> Profile:
        profile = Profile(**data)
        try:
            self.db.add(profile)
            self.db.flush()
            self.db.add(Streak(user_id=profile.id))
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ProfileAlreadyExistsError(data.get("email", ""))
        except SQLAlchemyError as exc:
            raise self._failed("create_profile", exc)
        self.db.refresh(profile)
        logger.info("Created profile %s", profile.id)
        return profile

    def fetch_profile(self, user_id: int) -> Optional[Profile]:
        try:
            return self.db.get(Profile, user_id)
        except SQLAlchemyError as exc:
            raise self._failed("fetch_profile", exc)

    def require_profile(self, user_id: int) -> Profile:
        profile = self.fetch_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)
        return profile

    def fetch_streak(self, user_id: int) -> Optional[Streak]:
        try:
            return self.db.query(Streak).filter(Streak.user_id == user_id).first()
        except SQLAlchemyError as exc:
            raise self._failed("fetch_streak", exc)

    def update_streak(self, user_id: int, patch: dict[str, Any]) -> Streak:
        streak = self.fetch_streak(user_id)
        try:
            if streak is None:
                self.require_profile(user_id)
                streak = Streak(user_id=user_id)
                self.db.add(streak)
            for name in _STREAK_FIELDS:
                if name in patch:
                    setattr(streak, name, patch[name])
            if streak.current_streak is not None and streak.current_streak > (streak.best_streak or 0):
                streak.best_streak = streak.current_streak
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._failed("update_streak", exc)
        self.db.refresh(streak)
        return streak

    # ------------------------------------------------------------------
    # Urges
    # ------------------------------------------------------------------

    def fetch_urges(self, user_id: int) -> list[Urge]:
        try:
            return (
                self.db.query(Urge)
                .filter(Urge.user_id == user_id)
                .order_by(Urge.created_at.desc(), Urge.id.desc())
                .all()
            )
        except SQLAlchemyError as exc:
            raise self._failed("fetch_urges", exc)

    def fetch_urges_today(self, user_id: int, today: Optional[date] = None) -> list[Urge]:
        """Urges whose local creation day is `today`."""
        target = today or local_today()
        todays = []
        for urge in self.fetch_urges(user_id):
            try:
                if urge_day(urge) == target:
                    todays.append(urge)
            except MalformedRecordError:
                continue
        return todays

    def create_urge(self, user_id: int, data: dict[str, Any]) -> Urge:
        fields = {k: v for k, v in data.items() if k in _URGE_FIELDS and v is not None}
        if "created_at" in fields:
            fields["created_at"] = _as_utc(fields["created_at"])
        urge = Urge(user_id=user_id, **fields)
        try:
            self.db.add(urge)
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._failed("create_urge", exc)
        self.db.refresh(urge)
        logger.info("Recorded urge %s for profile %s (intensity=%s)", urge.id, user_id, urge.intensity)
        return urge

    def update_urge(self, urge_id: int, patch: dict[str, Any], user_id: Optional[int] = None) -> Urge:
        """
        Apply a partial update. The outcome may move out of "pending" once;
        after that any attempt to change it raises UrgeAlreadyResolvedError.
        """
        try:
            query = self.db.query(Urge).filter(Urge.id == urge_id)
            if user_id is not None:
                query = query.filter(Urge.user_id == user_id)
            urge = query.first()
        except SQLAlchemyError as exc:
            raise self._failed("update_urge", exc)
        if urge is None:
            raise UrgeNotFoundError(urge_id)

        new_outcome = patch.get("outcome")
        if new_outcome is not None and urge.is_resolved and _ev(new_outcome) != _ev(urge.outcome):
            raise UrgeAlreadyResolvedError(urge_id, _ev(urge.outcome))

        for name in ("intensity", "location", "trigger", "notes", "outcome"):
            if name in patch and patch[name] is not None:
                setattr(urge, name, patch[name])
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._failed("update_urge", exc)
        self.db.refresh(urge)
        if new_outcome is not None:
            logger.info("Urge %s resolved as %s", urge_id, _ev(urge.outcome))
        return urge

    # ------------------------------------------------------------------
    # Journal
    # ------------------------------------------------------------------

    def fetch_journal_entries(self, user_id: int) -> list[JournalEntry]:
        try:
            return (
                self.db.query(JournalEntry)
                .filter(JournalEntry.user_id == user_id)
                .order_by(JournalEntry.date.desc())
                .all()
            )
        except SQLAlchemyError as exc:
            raise self._failed("fetch_journal_entries", exc)

    def fetch_journal_entry(self, user_id: int, day: date) -> Optional[JournalEntry]:
        try:
            return (
                self.db.query(JournalEntry)
                .filter(JournalEntry.user_id == user_id, JournalEntry.date == day)
                .first()
            )
        except SQLAlchemyError as exc:
            raise self._failed("fetch_journal_entry", exc)

    def upsert_journal_entry(self, user_id: int, day: date, patch: dict[str, Any]) -> JournalEntry:
        """
        Insert or update the entry for (user_id, day).

        `content` sets only what it carries: plain text replaces `text`, a legacy
        payload also sets the keys present under "additional". Fields given
        explicitly in the patch take precedence over decoded ones.
        `had_urge` follows the trigger list unless it is set explicitly.
        """
        values = self._journal_values(patch)
        entry = self.fetch_journal_entry(user_id, day)
        if entry is None and values.get("mood") is None:
            raise MalformedRecordError("mood is required for a new journal entry")

        try:
            if entry is None:
                entry = JournalEntry(user_id=user_id, date=day, **values)
                self.db.add(entry)
                try:
                    self.db.commit()
                except IntegrityError:
                    # Another writer created the (user, date) row first.
                    self.db.rollback()
                    entry = self.fetch_journal_entry(user_id, day)
                    self._apply(entry, values)
                    self.db.commit()
            else:
                self._apply(entry, values)
                self.db.commit()
        except SQLAlchemyError as exc:
            raise self._failed("upsert_journal_entry", exc)
        self.db.refresh(entry)
        return entry

    @staticmethod
    def _apply(entry: JournalEntry, values: dict[str, Any]) -> None:
        for name, value in values.items():
            setattr(entry, name, value)

    @staticmethod
    def _journal_values(patch: dict[str, Any]) -> dict[str, Any]:
        values = legacy_content_patch(patch.get("content"))
        for name in _JOURNAL_FIELDS:
            if patch.get(name) is not None:
                values[name] = patch[name]
        if "triggers" in values and patch.get("had_urge") is None:
            values["had_urge"] = len(values["triggers"]) > 0
        return values
