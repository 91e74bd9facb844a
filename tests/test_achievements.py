"""
Tests for achievement evaluation and display order.
"""
from types import SimpleNamespace

from recovery_insights.services.achievements import (
    CATALOG,
    AchievementMetric,
    display_order,
    evaluate_achievements,
    streak_value,
    unlocked_count,
)


def _streak(current=0, best=0):
    return SimpleNamespace(current_streak=current, best_streak=best)


def _by_id(results):
    return {a.id: a for a in results}


class TestEvaluate:
    def test_nothing_unlocked_for_new_user(self):
        results = evaluate_achievements(None, 0)
        assert len(results) == len(CATALOG) == 7
        assert not any(a.unlocked for a in results)
        assert all(a.progress == 0 for a in results)

    def test_overcome_thresholds(self):
        results = _by_id(evaluate_achievements(_streak(), 5))
        assert results["first_overcome"].unlocked
        assert results["five_overcome"].unlocked
        assert not results["twenty_overcome"].unlocked
        assert results["twenty_overcome"].progress == 5
        assert results["first_overcome"].progress == 1

    def test_streak_uses_best_when_higher(self):
        assert streak_value(_streak(current=2, best=8)) == 8
        results = _by_id(evaluate_achievements(_streak(current=2, best=8), 0))
        assert results["seven_day_streak"].unlocked
        assert not results["thirty_day_streak"].unlocked
        assert results["thirty_day_streak"].progress == 8

    def test_evaluation_is_idempotent(self):
        streak = _streak(current=4, best=4)
        assert evaluate_achievements(streak, 3) == evaluate_achievements(streak, 3)

    def test_unlocked_count(self):
        results = evaluate_achievements(_streak(current=7), 1)
        assert unlocked_count(results) == 3
        assert unlocked_count(results, AchievementMetric.streak) == 2


class TestDisplayOrder:
    def test_unlocked_first_then_by_ratio(self):
        ordered = display_order(evaluate_achievements(_streak(current=3), 4))
        ids = [a.id for a in ordered]
        assert ids[:2] == ["first_overcome", "three_day_streak"]
        # five_overcome 4/5 ahead of seven_day_streak 3/7
        assert ids.index("five_overcome") < ids.index("seven_day_streak")
        assert ids[-1] == "fifty_overcome"

    def test_ties_keep_catalog_order(self):
        ordered = display_order(evaluate_achievements(None, 0))
        assert [a.id for a in ordered] == [d.id for d in CATALOG]
