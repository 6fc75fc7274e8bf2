"""
Tests for the insights engine
=============================
Covers:
- Empty history → fixed empty-state report (idempotent)
- Summary: averages rounded half-up, stability, trend, most common mood
- Timeframe window ending at the latest entry; unknown values keep all
- Pattern detectors: temporal, mood swings / low runs, energy, trigger
  (strict 1.0 delta threshold, largest delta wins, first-entry occurrences)
- Trigger ranking: frequency, impact bands, top 5
- Recommendation and insight text: rule order, thresholds, pattern
  budget, stability sentences, key pattern sentence, caps 5 / 6

Run: pytest tests/test_insights_engine.py -v
"""

from __future__ import annotations

from datetime import date, timedelta

import numpy as np
import pytest

from app.models.insights import CheckInRecord, InsightsSummary, Pattern, TriggerImpact
from app.services.insight_text import build_insights, build_recommendations, round_half_up
from app.services.insights import (
    analyze,
    apply_timeframe,
    detect_mood_cycle_pattern,
    detect_trigger_pattern,
    empty_report,
    rank_triggers,
)

# 2024-01-01 is a Monday
_START = date(2024, 1, 1)


def _record(
    offset: int,
    score: int,
    energy: int = 5,
    mood: str = "happy",
    triggers: tuple[str, ...] = (),
) -> CheckInRecord:
    return CheckInRecord(
        date=_START + timedelta(days=offset),
        mood=mood,
        mood_score=score,
        energy_level=energy,
        triggers=list(triggers),
    )


def _history(scores: list[int], **kwargs) -> list[CheckInRecord]:
    return [_record(i, score, **kwargs) for i, score in enumerate(scores)]


def _summary(**overrides) -> InsightsSummary:
    fields = {
        "average_mood": 6.0,
        "average_energy": 6.0,
        "most_common_mood": "happy",
        "mood_stability": 60,
        "trend": "stable",
    }
    fields.update(overrides)
    return InsightsSummary(**fields)


def _pattern(kind: str, description: str, recommendation: str) -> Pattern:
    return Pattern(
        kind=kind,
        description=description,
        frequency_pct=50,
        confidence=80,
        recommendation=recommendation,
    )


_STABLE_SENTENCE = (
    "Your mood has been relatively stable, which is a positive indicator "
    "of emotional regulation."
)
_VOLATILE_SENTENCE = (
    "Your mood fluctuates significantly, which may indicate external "
    "stressors or need for more stability practices."
)


class TestEmptyHistory:

    def test_empty_report(self):
        report = analyze([])

        assert report.summary.average_mood == 0
        assert report.summary.average_energy == 0
        assert report.summary.most_common_mood == "neutral"
        assert report.summary.mood_stability == 0
        assert report.summary.trend == "stable"
        assert report.patterns == []
        assert report.triggers == []
        assert report.recommendations == [
            "Start tracking your mood regularly to generate personalized insights"
        ]
        assert report.insights == [
            "No data available yet. Begin your wellness journey by logging your first check-in!"
        ]

    def test_idempotent(self):
        assert analyze([]) == analyze([]) == empty_report()


class TestSummary:

    def test_average_rounds_half_up(self):
        report = analyze(_history([1, 2, 2, 4]))
        assert report.summary.average_mood == 2.3
        assert report.summary.average_energy == 5.0

    def test_stability_from_population_variance(self):
        # variance 1.1875 → 100 - 11.875 → 88
        assert analyze(_history([1, 2, 2, 4])).summary.mood_stability == 88

    def test_identical_scores_are_perfectly_stable(self):
        report = analyze(_history([6, 6, 6, 6, 6], energy=6))
        assert report.summary.mood_stability == 100
        assert report.summary.trend == "stable"

    def test_stability_clamped_at_zero(self):
        # variance 20.25 → 100 - 202.5 → 0
        assert analyze(_history([1, 10, 1, 10])).summary.mood_stability == 0

    def test_improving_trend(self):
        report = analyze(_history([3] * 5 + [8] * 5))
        assert report.summary.trend == "improving"
        assert report.summary.average_mood == 5.5

    def test_declining_trend(self):
        assert analyze(_history([8, 8, 3, 3])).summary.trend == "declining"

    def test_single_entry_is_stable(self):
        assert analyze(_history([2])).summary.trend == "stable"

    def test_most_common_mood_tie_keeps_first_seen(self):
        history = [
            _record(0, 3, mood="sad"),
            _record(1, 8, mood="happy"),
            _record(2, 8, mood="happy"),
            _record(3, 3, mood="sad"),
        ]
        assert analyze(history).summary.most_common_mood == "sad"

    def test_round_half_up(self):
        assert round_half_up(2.25, 1) == 2.3
        assert round_half_up(12.5) == 13
        assert round_half_up(33.333, 1) == 33.3


class TestTimeframe:

    def test_window_ends_at_latest_entry(self):
        history = [_record(0, 2), _record(60, 8)]

        assert [r.mood_score for r in apply_timeframe(history, "week")] == [8]
        assert [r.mood_score for r in apply_timeframe(history, "month")] == [8]
        assert [r.mood_score for r in apply_timeframe(history, "quarter")] == [2, 8]

    def test_no_timeframe_keeps_everything(self):
        history = _history([5, 6, 7])
        assert apply_timeframe(history, None) == history

    def test_unknown_timeframe_keeps_everything(self):
        history = [_record(0, 2), _record(60, 8)]

        assert apply_timeframe(history, "day") == history
        assert analyze(history, "day").summary.average_mood == 5.0

    def test_report_uses_filtered_entries(self):
        history = [_record(0, 2), _record(60, 8)]
        assert analyze(history, "week").summary.average_mood == 8.0
        assert analyze(history, "year").summary.average_mood == 5.0


class TestPatterns:

    def test_four_entry_swings(self):
        # Mon..Thu
        report = analyze(_history([8, 2, 9, 1]))
        mood_patterns = [p for p in report.patterns if p.kind == "mood"]

        assert len(mood_patterns) == 1
        assert mood_patterns[0].description == "You experience frequent mood fluctuations"
        assert mood_patterns[0].frequency_pct == 100
        assert mood_patterns[0].confidence == 80

    def test_temporal_low_days_listed_sunday_first(self):
        report = analyze(_history([8, 2, 9, 1]))
        temporal = [p for p in report.patterns if p.kind == "temporal"]

        assert temporal[0].description == "Your mood tends to be lower on Tue, Thu"
        assert temporal[0].frequency_pct == pytest.approx(2 / 7 * 100)
        assert temporal[0].confidence == 75

    def test_patterns_in_detector_order(self):
        report = analyze(_history([8, 2, 9, 1]))
        assert [p.kind for p in report.patterns] == ["temporal", "mood"]

    def test_low_runs_count_entries_past_the_second(self):
        pattern = detect_mood_cycle_pattern(np.array([5, 4, 3, 3, 4, 5, 5], dtype=float))

        assert pattern.description == "You've experienced extended periods of low mood"
        assert pattern.frequency_pct == pytest.approx(2 / 7 * 100)
        assert pattern.confidence == 85

    def test_swings_take_precedence_over_low_runs(self):
        pattern = detect_mood_cycle_pattern(np.array([1, 4, 1, 4, 1], dtype=float))
        assert pattern.description == "You experience frequent mood fluctuations"

    def test_calm_history_has_no_mood_pattern(self):
        assert detect_mood_cycle_pattern(np.array([6, 7, 6, 7], dtype=float)) is None

    def test_low_energy(self):
        report = analyze(_history([6, 6, 6], energy=2))
        energy = [p for p in report.patterns if p.kind == "energy"]

        assert energy[0].description == "Your energy levels have been consistently low"
        assert energy[0].frequency_pct == 100
        assert energy[0].confidence == 90

    def test_mood_tracks_energy(self):
        report = analyze(_history([6, 6, 6, 6, 6], energy=6))
        energy = [p for p in report.patterns if p.kind == "energy"]

        assert energy[0].description == "Your mood closely tracks your energy levels"
        assert energy[0].frequency_pct == 100

    def test_recurring_trigger(self):
        history = [
            _record(0, 7),
            _record(1, 3, triggers=("work",)),
            _record(2, 7),
            _record(3, 3, triggers=("work",)),
        ]
        trigger = [p for p in analyze(history).patterns if p.kind == "trigger"]

        assert trigger[0].description == '"work" appears as a recurring trigger'
        assert trigger[0].frequency_pct == 50
        assert trigger[0].recommendation == "Develop coping strategies specifically for work-related stress"

    def test_single_occurrence_trigger_ignored(self):
        history = [_record(0, 8), _record(1, 2, triggers=("family",))]
        assert not [p for p in analyze(history).patterns if p.kind == "trigger"]

    def test_average_delta_of_exactly_one_is_ignored(self):
        history = [
            _record(0, 5),
            _record(1, 6, triggers=("work",)),
            _record(2, 5),
            _record(3, 6, triggers=("work",)),
        ]
        assert detect_trigger_pattern(history) is None

    def test_largest_average_delta_wins(self):
        # a: (0 + -1) / 2 = -0.5, b: (0 + 6) / 2 = 3.0
        history = [
            _record(0, 8, triggers=("a", "b")),
            _record(1, 2),
            _record(2, 8, triggers=("b",)),
            _record(3, 7, triggers=("a",)),
        ]
        pattern = detect_trigger_pattern(history)

        assert pattern.description == '"b" appears as a recurring trigger'
        assert pattern.frequency_pct == 50
        assert pattern.confidence == 80

    def test_first_entry_counts_as_occurrence_without_delta(self):
        # occurrences 2, summed delta +3 → average 1.5
        history = [
            _record(0, 5, triggers=("sleep",)),
            _record(1, 2),
            _record(2, 5, triggers=("sleep",)),
        ]
        pattern = detect_trigger_pattern(history)

        assert pattern.description == '"sleep" appears as a recurring trigger'
        assert pattern.frequency_pct == pytest.approx(2 / 3 * 100)

    def test_first_entry_occurrence_halves_the_delta(self):
        # occurrences 2, summed delta +2 → average 1.0, not above the threshold
        history = [
            _record(0, 5, triggers=("sleep",)),
            _record(1, 4),
            _record(2, 6, triggers=("sleep",)),
        ]
        assert detect_trigger_pattern(history) is None


class TestTriggerRanking:

    def test_positive_trigger(self):
        history = [
            _record(0, 8, triggers=("exercise",)),
            _record(1, 9, triggers=("exercise",)),
            _record(2, 5),
        ]
        ranked = rank_triggers(history)

        assert ranked == [TriggerImpact(trigger="exercise", frequency_pct=66.7, impact="positive")]

    def test_impact_bands(self):
        history = [
            _record(0, 3, triggers=("work",)),
            _record(1, 4, triggers=("work", "family")),
            _record(2, 7, triggers=("family",)),
        ]
        impacts = {t.trigger: t.impact for t in rank_triggers(history)}
        assert impacts == {"work": "negative", "family": "neutral"}

    def test_ties_keep_first_seen_order_and_cap_at_five(self):
        names = ("a", "b", "c", "d", "e", "f")
        history = [_record(0, 5, triggers=names), _record(1, 5, triggers=("f",))]
        ranked = rank_triggers(history)

        assert [t.trigger for t in ranked] == ["f", "a", "b", "c", "d"]
        assert ranked[0].frequency_pct == 100
        assert ranked[1].frequency_pct == 50


class TestReportText:

    def test_declining_recommendations_first(self):
        lines = build_recommendations(_summary(trend="declining"), [], [])
        assert lines[0].startswith("Your mood has been declining recently.")
        assert len(lines) == 2

    def test_improving_reinforcement_line(self):
        lines = build_recommendations(_summary(trend="improving"), [], [])
        assert lines == ["Your mood is improving! Keep up the practices that are working for you."]

    def test_volatile_stability_routine_line(self):
        assert build_recommendations(_summary(mood_stability=49), [], []) == [
            "Your mood varies significantly. Establishing daily routines can help "
            "create more stability."
        ]
        assert build_recommendations(_summary(mood_stability=50), [], []) == []

    def test_low_energy_rest_line(self):
        assert build_recommendations(_summary(average_energy=4.9), [], []) == [
            "Your energy levels are low. Prioritize sleep, regular movement, and "
            "balanced nutrition."
        ]
        assert build_recommendations(_summary(average_energy=5.0), [], []) == []

    def test_pattern_lines_follow_detection_order(self):
        patterns = [
            _pattern("temporal", "Your mood tends to be lower on Mon", "first"),
            _pattern("mood", "You experience frequent mood fluctuations", "second"),
            _pattern("energy", "Your energy levels have been consistently low", "third"),
        ]
        lines = build_recommendations(_summary(trend="improving"), patterns, [])

        assert lines[0].startswith("Your mood is improving!")
        assert lines[1:] == ["first", "second", "third"]

    def test_rule_order_and_pattern_budget(self):
        summary = _summary(trend="declining", mood_stability=40, average_energy=3.0)
        patterns = [
            _pattern("temporal", "Your mood tends to be lower on Mon", "first"),
            _pattern("mood", "You experience frequent mood fluctuations", "second"),
        ]
        triggers = [TriggerImpact(trigger="work", frequency_pct=50, impact="negative")]

        lines = build_recommendations(summary, patterns, triggers)

        assert len(lines) == 5
        assert lines[0].startswith("Your mood has been declining recently.")
        assert lines[1].startswith("Increase self-care activities")
        assert lines[2].startswith("Your mood varies significantly.")
        assert lines[3].startswith("Your energy levels are low.")
        assert lines[4] == "first"

    def test_stable_sentence_at_seventy(self):
        insights = build_insights(_summary(mood_stability=70), [], [], [])
        assert insights[2] == _STABLE_SENTENCE
        assert len(insights) == 3

    def test_volatile_sentence_below_fifty(self):
        insights = build_insights(_summary(mood_stability=49), [], [], [])
        assert insights[2] == _VOLATILE_SENTENCE

    @pytest.mark.parametrize("stability", [50, 69])
    def test_stability_sentence_omitted_in_between(self, stability: int):
        insights = build_insights(_summary(mood_stability=stability), [], [], [])
        assert _STABLE_SENTENCE not in insights
        assert _VOLATILE_SENTENCE not in insights
        assert len(insights) == 2

    def test_key_pattern_sentence_uses_first_pattern(self):
        patterns = [
            _pattern("temporal", "Your mood tends to be lower on Mon", "first"),
            _pattern("mood", "You experience frequent mood fluctuations", "second"),
        ]
        insights = build_insights(_summary(mood_stability=80), patterns, [], [])

        assert insights[2] == _STABLE_SENTENCE
        assert insights[3] == "Key pattern identified: your mood tends to be lower on mon"
        assert len(insights) == 4

    def test_negative_triggers_listed(self):
        triggers = [
            TriggerImpact(trigger="work", frequency_pct=50, impact="negative"),
            TriggerImpact(trigger="family", frequency_pct=25, impact="negative"),
        ]
        lines = build_recommendations(_summary(), [], triggers)
        assert lines == ["Develop coping strategies for recurring stressors: work, family"]

    def test_recommendations_capped_at_five(self):
        report = analyze(_history([8, 2, 9, 1], energy=2, triggers=("work",)))
        assert len(report.recommendations) <= 5
        assert len(report.insights) <= 6

    def test_insight_sentences(self):
        history = [
            _record(0, 7, energy=6, triggers=("work",)),
            _record(1, 9, energy=6),
            _record(2, 7, energy=6),
        ]
        insights = analyze(history).insights

        assert insights[0] == (
            "Over the analyzed period, your average mood was 7.7/10 "
            "with an average energy level of 6/10."
        )
        assert insights[1] == 'Your most common emotional state has been "happy".'
        assert 'Your most frequent trigger is "work" (33% of entries).' in insights
        assert insights[-1] == "Your best day was January 2, 2024 with a mood score of 9/10."
