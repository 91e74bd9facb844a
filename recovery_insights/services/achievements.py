"""
Achievement catalog and its evaluation.

Each definition tracks one number:
  "overcome_count" — urges resolved as resisted, all time
  "streak"         — max(current_streak, best_streak)

  progress = min(value, threshold)
  unlocked = value >= threshold

The whole catalog is re-evaluated on every call; there is no stored
per-user state, so the same input always yields the same list.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterable, Optional


class AchievementMetric(str, enum.Enum):
    overcome_count = "overcome_count"
    streak = "streak"


@dataclass(frozen=True)
class AchievementDefinition:
    id: str
    title: str
    description: str
    metric: AchievementMetric
    threshold: int


@dataclass(frozen=True)
class AchievementProgress:
    id: str
    title: str
    description: str
    metric: AchievementMetric
    threshold: int
    progress: int
    unlocked: bool

    @property
    def ratio(self) -> float:
        return self.progress / self.threshold


CATALOG: tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        id="first_overcome",
        title="First Victory",
        description="Successfully overcome your first urge",
        metric=AchievementMetric.overcome_count,
        threshold=1,
    ),
    AchievementDefinition(
        id="five_overcome",
        title="Rising Star",
        description="Successfully overcome 5 urges",
        metric=AchievementMetric.overcome_count,
        threshold=5,
    ),
    AchievementDefinition(
        id="twenty_overcome",
        title="Urge Master",
        description="Successfully overcome 20 urges",
        metric=AchievementMetric.overcome_count,
        threshold=20,
    ),
    AchievementDefinition(
        id="fifty_overcome",
        title="Willpower Champion",
        description="Successfully overcome 50 urges",
        metric=AchievementMetric.overcome_count,
        threshold=50,
    ),
    AchievementDefinition(
        id="three_day_streak",
        title="Three Day Streak",
        description="Maintain a clean streak for 3 days",
        metric=AchievementMetric.streak,
        threshold=3,
    ),
    AchievementDefinition(
        id="seven_day_streak",
        title="One Week Warrior",
        description="Maintain a clean streak for 7 days",
        metric=AchievementMetric.streak,
        threshold=7,
    ),
    AchievementDefinition(
        id="thirty_day_streak",
        title="Monthly Champion",
        description="Maintain a clean streak for 30 days",
        metric=AchievementMetric.streak,
        threshold=30,
    ),
)


def streak_value(streak: Any) -> int:
    if streak is None:
        return 0
    return max(getattr(streak, "current_streak", 0) or 0, getattr(streak, "best_streak", 0) or 0)


def metric_value(definition: AchievementDefinition, streak: Any, overcome_count: int) -> int:
    if definition.metric == AchievementMetric.streak:
        return streak_value(streak)
    return max(overcome_count, 0)


def evaluate_achievements(
    streak: Any,
    overcome_count: int,
    catalog: Iterable[AchievementDefinition] = CATALOG,
) -> list[AchievementProgress]:
    """Evaluate every definition, in catalog order. `streak` may be None."""
    results = []
    for definition in catalog:
        value = metric_value(definition, streak, overcome_count)
        results.append(AchievementProgress(
            id=definition.id,
            title=definition.title,
            description=definition.description,
            metric=definition.metric,
            threshold=definition.threshold,
            progress=min(value, definition.threshold),
            unlocked=value >= definition.threshold,
        ))
    return results


def display_order(results: Iterable[AchievementProgress]) -> list[AchievementProgress]:
    """Unlocked first, then by progress ratio descending; catalog order breaks ties."""
    return sorted(results, key=lambda a: (not a.unlocked, -a.ratio))


def unlocked_count(results: Iterable[AchievementProgress], metric: Optional[AchievementMetric] = None) -> int:
    return sum(1 for a in results if a.unlocked and (metric is None or a.metric == metric))
