"""
Tests for metric derivation: tiers, rounding, summaries, trigger table and
the back-filled weekly mood chart.
"""
from __future__ import annotations

from datetime import date, datetime
from types import SimpleNamespace

import pytest

from recovery_insights.services.metrics import (
    INTENSITY_COLORS,
    IntensityTier,
    MoodTier,
    PLACEHOLDER_COLOR,
    intensity_tier,
    mood_buckets,
    mood_label,
    mood_tier,
    most_frequent,
    percentage,
    round_half_up,
    summarize_journal,
    summarize_urges,
    trigger_frequencies,
    urge_buckets,
    weekday_index,
    weekly_mood_chart,
)

END = date(2026, 10, 19)


def _urge(hour=9, day=19, intensity=5, trigger="", outcome="pending", id=None):
    return SimpleNamespace(
        id=id,
        created_at=datetime(2026, 10, day, hour),
        intensity=intensity,
        trigger=trigger,
        outcome=outcome,
    )


def _entry(day, mood, entry_type="daily", emotions=None, had_urge=False, id=None):
    return SimpleNamespace(
        id=id,
        date=day,
        mood=mood,
        entry_type=entry_type,
        emotions=emotions or [],
        had_urge=had_urge,
    )


class TestNumericHelpers:
    def test_percentage_of_nothing_is_zero(self):
        assert percentage(0, 0) == 0
        assert percentage(5, 0) == 0

    def test_percentage_rounds_half_up(self):
        assert percentage(2, 3) == 67
        assert percentage(1, 8) == 13      # 12.5
        assert percentage(1, 3) == 33

    def test_round_half_up(self):
        assert round_half_up(7.25) == 7.3
        assert round_half_up(2.45) == 2.5
        assert round_half_up(4.0) == 4.0

    def test_most_frequent_tie_goes_to_first_seen(self):
        assert most_frequent(["Stress", "Boredom", "Boredom", "Stress"]) == "Stress"
        assert most_frequent([]) is None

    def test_weekday_index_sunday_is_zero(self):
        assert weekday_index(date(2026, 10, 18)) == 0
        assert weekday_index(END) == 1


class TestTiers:
    @pytest.mark.parametrize("avg,tier", [
        (8, IntensityTier.high),
        (7.01, IntensityTier.high),
        (7, IntensityTier.medium),
        (5.5, IntensityTier.medium),
        (5, IntensityTier.low),
        (1, IntensityTier.low),
    ])
    def test_intensity_boundaries(self, avg, tier):
        assert intensity_tier(avg) == tier

    @pytest.mark.parametrize("avg,tier", [
        (5, MoodTier.excellent),
        (4, MoodTier.excellent),
        (3.99, MoodTier.good),
        (3, MoodTier.good),
        (2, MoodTier.neutral),
        (1.99, MoodTier.difficult),
    ])
    def test_mood_boundaries(self, avg, tier):
        assert mood_tier(avg) == tier

    def test_mood_labels(self):
        assert mood_label(1) == "Very Low"
        assert mood_label(5) == "Excellent"
        assert mood_label(None) is None


class TestUrgeSummary:
    def test_average_intensity_one_decimal(self):
        summary = summarize_urges([_urge(intensity=5), _urge(intensity=3), _urge(intensity=4)])
        assert summary.average_intensity == 4.0

    def test_empty_input(self):
        summary = summarize_urges([])
        assert summary.total == 0
        assert summary.overcome_percentage == 0
        assert summary.average_intensity == 0.0
        assert summary.most_common_trigger is None
        assert summary.peak_hour is None

    def test_pending_counts_in_total_but_not_overcome(self):
        summary = summarize_urges([
            _urge(outcome="resisted"),
            _urge(outcome="indulged"),
            _urge(outcome="pending"),
            _urge(outcome="resisted"),
        ])
        assert summary.total == 4
        assert summary.overcome_count == 2
        assert summary.relapse_count == 1
        assert summary.pending_count == 1
        assert summary.overcome_percentage == 50

    def test_legacy_overcome_flag(self):
        urge = SimpleNamespace(id=1, created_at=datetime(2026, 10, 19, 9), intensity=4, trigger="", overcome=True)
        assert summarize_urges([urge]).overcome_count == 1

    def test_peak_hour_and_weekday(self):
        summary = summarize_urges([_urge(hour=8), _urge(hour=8), _urge(hour=14, day=18)])
        assert summary.peak_hour == 8
        assert summary.peak_weekday == 1

    def test_malformed_urges_are_skipped(self):
        summary = summarize_urges([_urge(intensity=4), _urge(intensity=11, id=2), _urge(intensity="high", id=3)])
        assert summary.total == 1
        assert summary.average_intensity == 4.0


class TestUrgeBuckets:
    def test_bucket_metrics(self):
        buckets = urge_buckets([
            _urge(day=19, intensity=8, outcome="resisted"),
            _urge(day=19, intensity=9),
            _urge(day=18, intensity=2, outcome="resisted"),
        ])
        assert [b.key for b in buckets] == [date(2026, 10, 18), END]
        monday = buckets[1]
        assert monday.count == 2
        assert monday.overcome_count == 1
        assert monday.average_intensity == 8.5
        assert monday.tier == IntensityTier.high
        assert monday.color == INTENSITY_COLORS[IntensityTier.high]
        assert buckets[0].tier == IntensityTier.low


class TestTriggers:
    def test_denominator_includes_urges_without_trigger(self):
        stats = trigger_frequencies([
            _urge(trigger="Stress"),
            _urge(trigger="Stress"),
            _urge(trigger="Boredom"),
            _urge(trigger=""),
        ])
        assert [(s.name, s.count, s.percentage) for s in stats] == [
            ("Stress", 2, 50),
            ("Boredom", 1, 25),
        ]

    def test_case_sensitive_and_limited(self):
        urges = [_urge(trigger=t) for t in ["a", "A", "b", "c", "d", "e", "f"]]
        stats = trigger_frequencies(urges)
        assert len(stats) == 5
        assert stats[0].name == "a"
        assert trigger_frequencies(urges, limit=2)[1].name == "A"


class TestJournal:
    def test_mood_buckets(self):
        buckets = mood_buckets([_entry(END, 4), _entry(END, 5), _entry(date(2026, 10, 17), 1)])
        assert [b.tier for b in buckets] == [MoodTier.difficult, MoodTier.excellent]
        assert buckets[1].average_mood == 4.5

    def test_weekly_chart_backfills_placeholders(self):
        chart = weekly_mood_chart([_entry(END, 4), _entry(date(2026, 10, 16), 2)], END)
        assert len(chart) == 7
        assert chart[-1].key == END
        assert chart[0].key == date(2026, 10, 13)
        placeholders = [b for b in chart if b.placeholder]
        assert len(placeholders) == 5
        assert all(b.tier is None and b.color == PLACEHOLDER_COLOR for b in placeholders)
        assert chart[-1].tier == MoodTier.excellent

    def test_weekly_chart_ignores_entries_outside_week(self):
        chart = weekly_mood_chart([_entry(date(2026, 10, 1), 4)], END)
        assert all(b.placeholder for b in chart)

    def test_summary(self):
        summary = summarize_journal([
            _entry(END, 4, "daily", ["calm", "hopeful"]),
            _entry(date(2026, 10, 18), 4, "gratitude", ["calm"], had_urge=True),
            _entry(date(2026, 10, 17), 2, "cbt", ["anxious"]),
            _entry(date(2026, 10, 16), 9, id=5),
        ])
        assert summary.total_entries == 3
        assert summary.average_mood == 3.3
        assert summary.most_common_mood == 4
        assert summary.most_common_mood_label == "Good"
        assert summary.entry_types_used == 3
        assert summary.urges_recorded == 1
        assert summary.top_emotions == ["calm", "hopeful", "anxious"]

    def test_average_mood_is_exact(self):
        entries = [_entry(END, 5), _entry(date(2026, 10, 18), 3), _entry(date(2026, 10, 17), 4)]
        assert summarize_journal(entries).average_mood == 4.0

    def test_empty_summary(self):
        summary = summarize_journal([])
        assert summary.total_entries == 0
        assert summary.average_mood == 0.0
        assert summary.most_common_mood_label is None
