"""
Insight Text Assembly
=====================
Turns computed statistics into the recommendation and narrative strings of
an InsightsReport. Pure string building: nothing here computes a statistic.

Recommendations are assembled in priority order (trend, stability, energy,
detected patterns, negative triggers) and capped at 5. Insights are
narrative sentences capped at 6.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from app.models.insights import CheckInRecord, InsightsSummary, Pattern, TriggerImpact

MAX_RECOMMENDATIONS = 5
MAX_INSIGHTS = 6

STABLE_THRESHOLD = 70
VOLATILE_THRESHOLD = 50
LOW_ENERGY_THRESHOLD = 5

EMPTY_RECOMMENDATION = "Start tracking your mood regularly to generate personalized insights"
EMPTY_INSIGHT = "No data available yet. Begin your wellness journey by logging your first check-in!"


def round_half_up(value: float, places: int = 0) -> float:
    """Round like a display would: 2.25 -> 2.3, 12.5 -> 13."""
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP))


def _number(value: float) -> str:
    # 7.0 -> "7", 6.5 -> "6.5"
    return f"{value:g}"


def build_recommendations(
    summary: InsightsSummary,
    patterns: Sequence[Pattern],
    triggers: Sequence[TriggerImpact],
) -> list[str]:
    lines: list[str] = []

    if summary.trend == "declining":
        lines.append(
            "Your mood has been declining recently. Consider reaching out to a "
            "mental health professional for support."
        )
        lines.append(
            "Increase self-care activities and ensure you're getting adequate "
            "sleep, nutrition, and social connection."
        )
    elif summary.trend == "improving":
        lines.append("Your mood is improving! Keep up the practices that are working for you.")

    if summary.mood_stability < VOLATILE_THRESHOLD:
        lines.append(
            "Your mood varies significantly. Establishing daily routines can help "
            "create more stability."
        )

    if summary.average_energy < LOW_ENERGY_THRESHOLD:
        lines.append(
            "Your energy levels are low. Prioritize sleep, regular movement, and "
            "balanced nutrition."
        )

    for pattern in patterns:
        if len(lines) < MAX_RECOMMENDATIONS:
            lines.append(pattern.recommendation)

    negative = [t.trigger for t in triggers if t.impact == "negative"]
    if negative and len(lines) < MAX_RECOMMENDATIONS:
        lines.append(f"Develop coping strategies for recurring stressors: {', '.join(negative)}")

    return lines[:MAX_RECOMMENDATIONS]


def build_insights(
    summary: InsightsSummary,
    patterns: Sequence[Pattern],
    triggers: Sequence[TriggerImpact],
    history: Sequence[CheckInRecord],
) -> list[str]:
    lines = [
        f"Over the analyzed period, your average mood was {_number(summary.average_mood)}/10 "
        f"with an average energy level of {_number(summary.average_energy)}/10.",
        f'Your most common emotional state has been "{summary.most_common_mood}".',
    ]

    if summary.mood_stability >= STABLE_THRESHOLD:
        lines.append(
            "Your mood has been relatively stable, which is a positive indicator "
            "of emotional regulation."
        )
    elif summary.mood_stability < VOLATILE_THRESHOLD:
        lines.append(
            "Your mood fluctuates significantly, which may indicate external "
            "stressors or need for more stability practices."
        )

    if patterns:
        lines.append(f"Key pattern identified: {patterns[0].description.lower()}")

    if triggers:
        top = triggers[0]
        lines.append(
            f'Your most frequent trigger is "{top.trigger}" '
            f"({round_half_up(top.frequency_pct):.0f}% of entries)."
        )

    if len(history) >= 2:
        # First entry with the highest score wins
        best = max(history, key=lambda record: record.mood_score)
        day = best.date
        lines.append(
            f"Your best day was {day:%B} {day.day}, {day.year} "
            f"with a mood score of {best.mood_score}/10."
        )

    return lines[:MAX_INSIGHTS]
