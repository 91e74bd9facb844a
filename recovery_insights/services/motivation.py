"""
Streak messages, celebration days, the daily challenge and motivational quotes.

milestone_message(streak, today)
    Fixed text for streaks of exactly 1, 7, 30, 90 and 365 days. Any other
    value picks from a generic pool at index (streak + today.day) % len(pool),
    so the wording rotates from one day to the next.

daily_challenge(today)
    Deterministic per date: (year + month + day) % len(CHALLENGES).

quote_category(hour, urges_today, current_streak)
    Morning and evening win outright; afternoons fall back to urge quotes
    when urges were logged today, then milestone quotes on milestone days.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date
from typing import Optional

MILESTONE_MESSAGES: dict[int, str] = {
    1: "Day 1! The journey of a thousand miles begins with a single step.",
    7: "One week! Your body is already thanking you for this positive change.",
    30: "One month clean! You've proven your commitment to yourself.",
    90: "90 days! This is a major milestone in recovery. Be incredibly proud.",
    365: "ONE YEAR SOBER! This is an extraordinary achievement. You're an inspiration.",
}

CELEBRATION_DAYS = frozenset({1, 7, 30, 60, 90, 180, 365})
MILESTONE_QUOTE_DAYS = frozenset({1, 7, 30, 90, 180, 365})


def _days(n: int) -> str:
    return "day" if n == 1 else "days"


def generic_messages(streak: int) -> list[str]:
    d = _days(streak)
    return [
        f"You've been sober for {streak} {d}. That's incredible progress!",
        f"{streak} {d} clean! Your brain is healing more each day.",
        f"{streak} {d} of freedom. You're building a new life.",
        f"Each of your {streak} {d} represents a choice toward health.",
    ]


def milestone_message(current_streak: int, today: date) -> str:
    if current_streak in MILESTONE_MESSAGES:
        return MILESTONE_MESSAGES[current_streak]
    pool = generic_messages(current_streak)
    return pool[(current_streak + today.day) % len(pool)]


def is_celebration_day(current_streak: int) -> bool:
    return current_streak in CELEBRATION_DAYS


# ---------------------------------------------------------------------------
# Daily challenge
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Challenge:
    title: str
    description: str


CHALLENGES: tuple[Challenge, ...] = (
    Challenge("Mindful Breathing", "Take 5 minutes to practice deep breathing exercises."),
    Challenge("Gratitude Practice", "Write down 3 things you're grateful for today."),
    Challenge("Physical Activity", "Go for a 15-minute walk outdoors."),
    Challenge("Reach Out", "Connect with a supportive friend or family member."),
    Challenge("Self-Care", "Do something kind for yourself today."),
    Challenge("Digital Detox", "Take a 2-hour break from all screens."),
    Challenge("Hydration", "Drink at least 8 glasses of water today."),
)


def daily_challenge(today: date) -> Challenge:
    seed = today.year + today.month + today.day
    return CHALLENGES[seed % len(CHALLENGES)]


# ---------------------------------------------------------------------------
# Quotes
# ---------------------------------------------------------------------------

class QuoteCategory:
    MORNING = "morning"
    EVENING = "evening"
    URGE = "urge"
    MILESTONE = "milestone"
    GENERAL = "general"


QUOTES: dict[str, tuple[str, ...]] = {
    QuoteCategory.MORNING: (
        "Today is a new opportunity to strengthen your resolve.",
        "Each morning offers a fresh start. Embrace it with courage.",
        "Morning by morning, building a better you.",
    ),
    QuoteCategory.EVENING: (
        "You've made it through another day. Be proud of yourself.",
        "Reflect on your victories today, no matter how small.",
        "Rest well tonight. Tomorrow brings new strength.",
    ),
    QuoteCategory.URGE: (
        "Urges are temporary, but freedom is permanent.",
        "Every urge resisted is a victory gained.",
        "The strongest among us are those who can sit with discomfort.",
    ),
    QuoteCategory.MILESTONE: (
        "Look how far you've come! Your journey inspires others.",
        "Milestones aren't the end, they're proof you can go further.",
        "Celebrate your progress. You've earned this moment.",
    ),
    QuoteCategory.GENERAL: (
        "Progress, not perfection.",
        "You are stronger than you know.",
        "One day at a time.",
        "The struggle you feel today develops the strength you need tomorrow.",
    ),
}

REFLECTION_PROMPTS: tuple[str, ...] = (
    "What's one thing you're grateful for today?",
    "What triggered you today, and how did you respond?",
    "What's one small victory you had today?",
    "What's something kind you can do for yourself right now?",
    "Who can you reach out to for support if needed?",
    "What's a healthy activity you can plan for tomorrow?",
    "What's a skill you've improved since starting recovery?",
)


def time_of_day(hour: int) -> str:
    if hour < 12:
        return "morning"
    if hour < 18:
        return "afternoon"
    return "evening"


def quote_category(hour: int, urges_today: int, current_streak: int) -> str:
    part = time_of_day(hour)
    if part == "morning":
        return QuoteCategory.MORNING
    if part == "evening":
        return QuoteCategory.EVENING
    if urges_today > 0:
        return QuoteCategory.URGE
    if current_streak in MILESTONE_QUOTE_DAYS:
        return QuoteCategory.MILESTONE
    return QuoteCategory.GENERAL


def pick_quote(category: str, rng: Optional[random.Random] = None) -> str:
    pool = QUOTES.get(category) or tuple(q for quotes in QUOTES.values() for q in quotes)
    return (rng or random).choice(pool)


def pick_reflection_prompt(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(REFLECTION_PROMPTS)
