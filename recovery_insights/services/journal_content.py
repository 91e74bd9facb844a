"""
Decode the legacy journal payload.

Older clients packed every extended attribute into the text field as
JSON: {"text": "...", "additional": {"entry_type": ..., "emotions": [...], ...}}.
`parse_legacy_content` turns that into a structured JournalContent so it
can be stored in real columns. Anything that is not such a payload is
kept verbatim as plain text.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from typing import Any, Optional

logger = logging.getLogger(__name__)

ENTRY_TYPES = ("daily", "cbt", "gratitude", "milestone", "relapse_prevention", "custom")

_LIST_FIELDS = (
    "emotions",
    "thoughts",
    "behaviors",
    "triggers",
    "coping_strategies",
    "gratitude_items",
    "goals",
    "physical_symptoms",
)
_TEXT_FIELDS = ("lessons_learned", "recovery_wins")


@dataclass
class JournalContent:
    text: str = ""
    entry_type: str = "daily"
    emotions: list[str] = field(default_factory=list)
    thoughts: list[str] = field(default_factory=list)
    behaviors: list[str] = field(default_factory=list)
    triggers: list[str] = field(default_factory=list)
    coping_strategies: list[str] = field(default_factory=list)
    gratitude_items: list[str] = field(default_factory=list)
    goals: list[str] = field(default_factory=list)
    physical_symptoms: list[str] = field(default_factory=list)
    lessons_learned: Optional[str] = None
    recovery_wins: Optional[str] = None

    def as_fields(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if isinstance(v, (str, int, float)) and str(v).strip()]


def parse_legacy_content(content: Optional[str]) -> JournalContent:
    if not content:
        return JournalContent()
    try:
        payload = json.loads(content)
    except (ValueError, TypeError):
        return JournalContent(text=content)
    if not isinstance(payload, dict) or "text" not in payload:
        return JournalContent(text=content)

    additional = payload.get("additional")
    if not isinstance(additional, dict):
        additional = {}

    entry_type = additional.get("entry_type") or "daily"
    if entry_type not in ENTRY_TYPES:
        logger.warning("Unknown legacy entry_type %r, storing as custom", entry_type)
        entry_type = "custom"

    result = JournalContent(text=str(payload.get("text") or ""), entry_type=entry_type)
    for name in _LIST_FIELDS:
        setattr(result, name, _string_list(additional.get(name)))
    for name in _TEXT_FIELDS:
        value = additional.get(name)
        setattr(result, name, str(value) if value else None)
    return result


def legacy_content_patch(content: Optional[str]) -> dict[str, Any]:
    """
    Column values carried by `content`, for patching an existing entry.

    Plain text sets only `text`. A legacy payload sets `text` plus the keys
    actually present under "additional"; everything else keeps its value.
    """
    if content is None:
        return {}
    try:
        payload = json.loads(content)
    except (ValueError, TypeError):
        return {"text": content}
    if not isinstance(payload, dict) or "text" not in payload:
        return {"text": content}

    additional = payload.get("additional")
    if not isinstance(additional, dict):
        additional = {}
    decoded = parse_legacy_content(content)
    present = {"text"} | {
        name for name in ("entry_type",) + _LIST_FIELDS + _TEXT_FIELDS if name in additional
    }
    return {name: value for name, value in decoded.as_fields().items() if name in present}
