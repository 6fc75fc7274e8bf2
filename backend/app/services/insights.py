"""
Insights Engine
===============
Mines a user's check-in history for summary statistics, behavioural
patterns, trigger impact and a mood trend.

Input is a list of labelled CheckInRecords that the caller has sorted
ascending by date. Day-of-week bucketing is date-intrinsic and does not
care about order; the half-split trend and the adjacent-pair checks do.

Pattern detectors (each returns at most one pattern, all of them run):
    temporal  weekdays whose average trails the cross-day average by > 1.0
    mood      swing volatility (> 30% of adjacent pairs differ by >= 3),
              else runs of >= 3 consecutive scores <= 4
    energy    mean energy < 4, else |energy - mood| <= 2 on > 70% of entries
    trigger   recurring trigger with the largest |average mood delta| > 1.0

The engine performs no I/O and never raises for an empty history: that
returns the fixed empty-state report.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import timedelta
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from app.models.insights import (
    CheckInRecord,
    InsightsReport,
    InsightsSummary,
    Pattern,
    TriggerImpact,
)
from app.services.insight_text import (
    EMPTY_INSIGHT,
    EMPTY_RECOMMENDATION,
    build_insights,
    build_recommendations,
    round_half_up,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TIMEFRAME_DAYS: dict[str, int] = {"week": 7, "month": 30, "quarter": 90, "year": 365}

TREND_THRESHOLD = 0.5
LOW_DAY_MARGIN = 1.0
SWING_SIZE = 3
SWING_FREQUENCY_THRESHOLD = 30.0
LOW_MOOD_SCORE = 4
LOW_RUN_LENGTH = 3
LOW_ENERGY_MEAN = 4
ENERGY_TRACKING_GAP = 2
ENERGY_TRACKING_THRESHOLD = 70.0
MIN_TRIGGER_OCCURRENCES = 2
TRIGGER_IMPACT_THRESHOLD = 1.0
POSITIVE_IMPACT_MOOD = 7
NEGATIVE_IMPACT_MOOD = 4
MAX_TRIGGERS = 5

# pandas dayofweek: Monday=0 .. Sunday=6. Reports list days Sunday first.
WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
WEEKDAY_REPORT_ORDER = (6, 0, 1, 2, 3, 4, 5)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def empty_report() -> InsightsReport:
    """The fixed report for a user with no check-ins."""
    return InsightsReport(
        summary=InsightsSummary(
            average_mood=0,
            average_energy=0,
            most_common_mood="neutral",
            mood_stability=0,
            trend="stable",
        ),
        patterns=[],
        triggers=[],
        recommendations=[EMPTY_RECOMMENDATION],
        insights=[EMPTY_INSIGHT],
    )


def apply_timeframe(
    history: Sequence[CheckInRecord], timeframe: Optional[str]
) -> list[CheckInRecord]:
    """Keep entries within the timeframe window ending at the latest entry.

    An unknown timeframe keeps the whole history.
    """
    days = TIMEFRAME_DAYS.get(timeframe) if timeframe else None
    if days is None or not history:
        return list(history)
    latest = max(record.date for record in history)
    cutoff = latest - timedelta(days=days)
    return [record for record in history if record.date > cutoff]


def _to_frame(history: Sequence[CheckInRecord]) -> pd.DataFrame:
    frame = pd.DataFrame(
        {
            "date": pd.to_datetime([record.date for record in history]),
            "mood": [record.mood for record in history],
            "mood_score": [record.mood_score for record in history],
            "energy_level": [record.energy_level for record in history],
        }
    )
    frame["weekday"] = frame["date"].dt.dayofweek
    return frame


# ---------------------------------------------------------------------------
# Summary statistics
# ---------------------------------------------------------------------------

def classify_trend(scores: np.ndarray) -> str:
    """Compare the mean of the first and second halves (split by index)."""
    midpoint = len(scores) // 2
    if midpoint == 0:
        return "stable"
    first_avg = float(scores[:midpoint].mean())
    second_avg = float(scores[midpoint:].mean())
    if second_avg - first_avg > TREND_THRESHOLD:
        return "improving"
    if first_avg - second_avg > TREND_THRESHOLD:
        return "declining"
    return "stable"


def mood_stability(scores: np.ndarray) -> int:
    """100 - 10 * population variance, clamped to [0, 100]."""
    variance = float(np.var(scores))
    return int(round_half_up(max(0.0, min(100.0, 100 - variance * 10))))


def most_common_mood(moods: Sequence[str]) -> str:
    counts = Counter(moods)
    # max() keeps the first-encountered label on ties
    return max(counts, key=counts.__getitem__)


def summarize(frame: pd.DataFrame) -> InsightsSummary:
    scores = frame["mood_score"].to_numpy(dtype=float)
    energy = frame["energy_level"].to_numpy(dtype=float)
    return InsightsSummary(
        average_mood=round_half_up(float(scores.mean()), 1),
        average_energy=round_half_up(float(energy.mean()), 1),
        most_common_mood=most_common_mood(frame["mood"].tolist()),
        mood_stability=mood_stability(scores),
        trend=classify_trend(scores),
    )


# ---------------------------------------------------------------------------
# Pattern detection
# ---------------------------------------------------------------------------

def detect_temporal_pattern(frame: pd.DataFrame) -> Optional[Pattern]:
    day_averages = frame.groupby("weekday")["mood_score"].mean()
    overall = float(day_averages.mean())

    low_days = [
        WEEKDAY_NAMES[day]
        for day in WEEKDAY_REPORT_ORDER
        if day in day_averages.index and day_averages.loc[day] < overall - LOW_DAY_MARGIN
    ]
    if not low_days:
        return None

    days = ", ".join(low_days)
    return Pattern(
        kind="temporal",
        description=f"Your mood tends to be lower on {days}",
        frequency_pct=len(low_days) / 7 * 100,
        confidence=75,
        recommendation=f"Plan self-care activities or lighter schedules on {days} to support yourself",
    )


def detect_mood_cycle_pattern(scores: np.ndarray) -> Optional[Pattern]:
    """Swing volatility first; extended low runs only if volatility is quiet."""
    if len(scores) >= 2:
        swings = int((np.abs(np.diff(scores)) >= SWING_SIZE).sum())
        swing_frequency = swings / (len(scores) - 1) * 100
        if swing_frequency > SWING_FREQUENCY_THRESHOLD:
            return Pattern(
                kind="mood",
                description="You experience frequent mood fluctuations",
                frequency_pct=swing_frequency,
                confidence=80,
                recommendation=(
                    "Consider establishing daily routines and stability practices "
                    "like regular sleep schedules and meditation"
                ),
            )

    # Counts every entry that sits at position >= 3 of a low run
    low_periods = 0
    consecutive_low = 0
    for score in scores:
        if score <= LOW_MOOD_SCORE:
            consecutive_low += 1
            if consecutive_low >= LOW_RUN_LENGTH:
                low_periods += 1
        else:
            consecutive_low = 0

    if low_periods == 0:
        return None
    return Pattern(
        kind="mood",
        description="You've experienced extended periods of low mood",
        frequency_pct=low_periods / len(scores) * 100,
        confidence=85,
        recommendation=(
            "Consider reaching out to a mental health professional for additional "
            "support during these periods"
        ),
    )


def detect_energy_pattern(frame: pd.DataFrame) -> Optional[Pattern]:
    energy = frame["energy_level"].to_numpy(dtype=float)
    scores = frame["mood_score"].to_numpy(dtype=float)

    if energy.mean() < LOW_ENERGY_MEAN:
        return Pattern(
            kind="energy",
            description="Your energy levels have been consistently low",
            frequency_pct=100,
            confidence=90,
            recommendation=(
                "Focus on sleep quality, nutrition, hydration, and consider checking "
                "in with a doctor about persistent fatigue"
            ),
        )

    tracking = float((np.abs(energy - scores) <= ENERGY_TRACKING_GAP).mean() * 100)
    if tracking > ENERGY_TRACKING_THRESHOLD:
        return Pattern(
            kind="energy",
            description="Your mood closely tracks your energy levels",
            frequency_pct=tracking,
            confidence=85,
            recommendation=(
                "Focus on energy management: regular exercise, consistent sleep, "
                "and balanced nutrition will help improve mood"
            ),
        )
    return None


def detect_trigger_pattern(history: Sequence[CheckInRecord]) -> Optional[Pattern]:
    # trigger -> [occurrences, summed delta from the previous entry]
    stats: dict[str, list[float]] = {}
    for index, record in enumerate(history):
        for trigger in record.triggers:
            entry = stats.setdefault(trigger, [0, 0.0])
            entry[0] += 1
            if index > 0:
                entry[1] += record.mood_score - history[index - 1].mood_score

    top_trigger: Optional[str] = None
    max_impact = 0.0
    for trigger, (count, delta_sum) in stats.items():
        if count >= MIN_TRIGGER_OCCURRENCES:
            impact = abs(delta_sum / count)
            if impact > max_impact:
                max_impact = impact
                top_trigger = trigger

    if top_trigger is None or max_impact <= TRIGGER_IMPACT_THRESHOLD:
        return None
    return Pattern(
        kind="trigger",
        description=f'"{top_trigger}" appears as a recurring trigger',
        frequency_pct=stats[top_trigger][0] / len(history) * 100,
        confidence=80,
        recommendation=f"Develop coping strategies specifically for {top_trigger}-related stress",
    )


def detect_patterns(history: Sequence[CheckInRecord], frame: pd.DataFrame) -> list[Pattern]:
    scores = frame["mood_score"].to_numpy(dtype=float)
    candidates = (
        detect_temporal_pattern(frame),
        detect_mood_cycle_pattern(scores),
        detect_energy_pattern(frame),
        detect_trigger_pattern(history),
    )
    return [pattern for pattern in candidates if pattern is not None]


# ---------------------------------------------------------------------------
# Trigger ranking
# ---------------------------------------------------------------------------

def rank_triggers(history: Sequence[CheckInRecord]) -> list[TriggerImpact]:
    """Top 5 triggers by frequency with their mood impact."""
    # trigger -> [occurrences, summed mood score]
    stats: dict[str, list[int]] = {}
    for record in history:
        for trigger in record.triggers:
            entry = stats.setdefault(trigger, [0, 0])
            entry[0] += 1
            entry[1] += record.mood_score

    ranked: list[TriggerImpact] = []
    for trigger, (count, score_sum) in stats.items():
        avg_mood = score_sum / count
        if avg_mood >= POSITIVE_IMPACT_MOOD:
            impact = "positive"
        elif avg_mood <= NEGATIVE_IMPACT_MOOD:
            impact = "negative"
        else:
            impact = "neutral"
        ranked.append(
            TriggerImpact(
                trigger=trigger,
                frequency_pct=round_half_up(count / len(history) * 100, 1),
                impact=impact,
            )
        )

    # sorted() is stable, so equal frequencies keep first-seen order
    ranked = sorted(ranked, key=lambda t: t.frequency_pct, reverse=True)
    return ranked[:MAX_TRIGGERS]


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def analyze(
    history: Sequence[CheckInRecord], timeframe: Optional[str] = None
) -> InsightsReport:
    """Build the full InsightsReport for *history*."""
    records = apply_timeframe(history, timeframe)
    if not records:
        return empty_report()

    frame = _to_frame(records)
    summary = summarize(frame)
    patterns = detect_patterns(records, frame)
    triggers = rank_triggers(records)

    logger.debug(
        "Analysed %d check-ins: trend=%s stability=%d patterns=%d triggers=%d",
        len(records), summary.trend, summary.mood_stability, len(patterns), len(triggers),
    )
    return InsightsReport(
        summary=summary,
        patterns=patterns,
        triggers=triggers,
        recommendations=build_recommendations(summary, patterns, triggers),
        insights=build_insights(summary, patterns, triggers, records),
    )
