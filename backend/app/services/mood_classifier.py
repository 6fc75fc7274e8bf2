"""
Mood Classifier Service
=======================
Deterministic, rule-based mood classification for free text and voice
transcripts.

Pipeline:
    1. Lower-case the text and count keyword hits per mood label
    2. Pick the label with the most hits (ties: first in MOOD_LABELS;
       no hits at all: "tired" baseline)
    3. Collect emotions (caller hints first, then matched keywords), cap at 5
    4. Detect life-domain triggers with case-insensitive patterns
    5. Score confidence and severity from the hints that were supplied
    6. Render the summary sentence and up to 5 recommendation lines

Scoring (steps 1-5) and templating (step 6) are separate functions so
each can be tested on its own. Nothing here raises for empty or odd
input; no hits simply falls through to the baseline.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from app.models.mood import MOOD_LABELS, MoodAnalysis, MoodHints

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_MOOD = "tired"
BASE_CONFIDENCE = 60
MAX_CONFIDENCE = 95
MAX_EMOTIONS = 5
MAX_RECOMMENDATIONS = 5

SEVERITY_SENSITIVE_MOODS = frozenset({"anxious", "sad", "stressed"})

# ---------------------------------------------------------------------------
# Keyword and pattern tables
# ---------------------------------------------------------------------------

MOOD_KEYWORDS: dict[str, tuple[str, ...]] = {
    "anxious": ("anxious", "worried", "nervous", "uneasy", "panic", "overwhelmed", "scared", "afraid"),
    "happy": ("happy", "grateful", "calm", "content", "peaceful", "joyful", "good", "great"),
    "sad": ("sad", "down", "depressed", "lonely", "upset", "heartbroken", "miserable", "hopeless"),
    "tired": ("tired", "exhausted", "fatigued", "drained", "sleepy", "worn out", "burned out"),
    "stressed": ("stressed", "pressure", "tense", "frustrated", "irritated", "rushed", "overwhelmed"),
    "excited": ("excited", "energized", "pumped", "thrilled", "motivated", "inspired", "enthusiastic"),
}

# Ordered; a category is reported at most once.
TRIGGER_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"work|job|boss|colleague", re.IGNORECASE), "work"),
    (re.compile(r"family|parent|sibling|relative", re.IGNORECASE), "family"),
    (re.compile(r"relationship|partner|spouse|dating", re.IGNORECASE), "relationships"),
    (re.compile(r"money|financial|debt|bills", re.IGNORECASE), "finances"),
    (re.compile(r"health|sick|pain|illness", re.IGNORECASE), "health"),
    (re.compile(r"sleep|insomnia|rest", re.IGNORECASE), "sleep"),
    (re.compile(r"friend|social|lonely|alone", re.IGNORECASE), "social"),
)

MOOD_RECOMMENDATIONS: dict[str, tuple[str, ...]] = {
    "anxious": (
        "Try the 4-7-8 breathing technique: inhale for 4s, hold for 7s, exhale for 8s",
        "Consider a 10-minute guided meditation session",
        "Take a short walk outside if possible",
    ),
    "sad": (
        "Reach out to a trusted friend or family member",
        "Write down three things you're grateful for today",
        "Engage in a gentle physical activity like stretching",
    ),
    "stressed": (
        "Take a 5-minute break from current tasks",
        "Practice progressive muscle relaxation",
        "Prioritize your tasks and delegate if possible",
    ),
    "tired": (
        "Consider a 15-20 minute power nap",
        "Step outside for fresh air and sunlight",
        "Ensure you're staying hydrated throughout the day",
    ),
    "happy": (
        "Journal about what's making you feel good",
        "Share your positive energy with others",
        "Set an intention to maintain this momentum",
    ),
    "excited": (
        "Channel this energy into a creative project",
        "Physical activity can amplify positive feelings",
        "Document this moment for future reflection",
    ),
}

HIGH_SEVERITY_RECOMMENDATIONS: tuple[str, ...] = (
    "Consider reaching out to a mental health professional",
    "Use crisis resources if you're in immediate distress",
)

# Priority order matters: work, then sleep, then social.
TRIGGER_RECOMMENDATIONS: tuple[tuple[str, str], ...] = (
    ("work", "Set clear boundaries between work and personal time"),
    ("sleep", "Establish a consistent bedtime routine"),
    ("social", "Reach out to supportive friends or join a community group"),
)


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def score_moods(text: str) -> tuple[dict[str, int], list[str]]:
    """Count keyword substring hits per mood.

    Returns ``(matches_per_mood, matched_keywords)``; keywords are listed in
    table order and may repeat across moods ("overwhelmed").
    """
    lowered = text.lower()
    counts: dict[str, int] = {}
    matched: list[str] = []
    for mood in MOOD_LABELS:
        hits = [kw for kw in MOOD_KEYWORDS[mood] if kw in lowered]
        counts[mood] = len(hits)
        matched.extend(hits)
    return counts, matched


def select_mood(counts: dict[str, int]) -> tuple[str, int]:
    """Return ``(mood, matches)`` for the strictly greatest count."""
    best_mood, best_matches = DEFAULT_MOOD, 0
    for mood in MOOD_LABELS:
        if counts.get(mood, 0) > best_matches:
            best_mood, best_matches = mood, counts[mood]
    return best_mood, best_matches


def collect_emotions(hint_emotions: Optional[list[str]], matched_keywords: list[str]) -> list[str]:
    """Deduplicate hint emotions then matched keywords, first-seen order."""
    seen: dict[str, None] = {}
    for emotion in [*(hint_emotions or []), *matched_keywords]:
        cleaned = emotion.strip().lower()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


def detect_triggers(text: str) -> list[str]:
    """Run the ordered trigger patterns against the original-case text."""
    return [category for pattern, category in TRIGGER_PATTERNS if pattern.search(text)]


def compute_confidence(matches: int, hints: MoodHints) -> int:
    confidence = BASE_CONFIDENCE
    if matches > 0:
        confidence += min(20, matches * 5)
    if hints.mood_score:
        confidence += 10
    if hints.energy_level:
        confidence += 5
    if hints.context:
        confidence += 5
    return min(MAX_CONFIDENCE, confidence)


def compute_severity(mood: str, mood_score: Optional[int]) -> str:
    """Severity only escalates for anxious/sad/stressed with a low score."""
    if not mood_score:
        return "moderate"
    if mood not in SEVERITY_SENSITIVE_MOODS:
        return "low"
    if mood_score <= 3:
        return "high"
    if mood_score <= 5:
        return "moderate"
    return "low"


# ---------------------------------------------------------------------------
# Templating
# ---------------------------------------------------------------------------

def compose_analysis(mood: str, emotions: list[str], triggers: list[str], hints: MoodHints) -> str:
    analysis = f"Based on your input, I'm detecting a {mood} emotional state"
    if hints.mood_score:
        analysis += f" with a mood score of {hints.mood_score}/10"
    if emotions:
        analysis += f". Key emotions identified: {', '.join(emotions[:3])}"
    if triggers:
        analysis += f". Main triggers appear to be related to: {', '.join(triggers)}"
    if hints.energy_level:
        analysis += f". Your energy level is at {hints.energy_level}/10"
    return analysis + "."


def compose_recommendations(mood: str, severity: str, triggers: list[str]) -> list[str]:
    lines = list(MOOD_RECOMMENDATIONS.get(mood, MOOD_RECOMMENDATIONS[DEFAULT_MOOD])[:3])
    if severity == "high":
        lines.extend(HIGH_SEVERITY_RECOMMENDATIONS)
    for category, line in TRIGGER_RECOMMENDATIONS:
        if category in triggers:
            lines.append(line)
    return lines[:MAX_RECOMMENDATIONS]


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def build_analysis(
    mood: str,
    matches: int,
    emotions: list[str],
    triggers: list[str],
    hints: MoodHints,
    confidence: Optional[int] = None,
) -> MoodAnalysis:
    """Assemble a MoodAnalysis for an already chosen mood.

    ``confidence`` overrides the computed score; the enrichment blend uses
    this when an external classifier supplied its own.
    """
    severity = compute_severity(mood, hints.mood_score)
    return MoodAnalysis(
        detected_mood=mood,
        confidence=compute_confidence(matches, hints) if confidence is None else confidence,
        emotions=emotions[:MAX_EMOTIONS],
        triggers=triggers,
        severity=severity,
        analysis=compose_analysis(mood, emotions, triggers, hints),
        recommendations=compose_recommendations(mood, severity, triggers),
    )


def classify(text: str, hints: Optional[MoodHints] = None) -> MoodAnalysis:
    """Classify *text* into the mood taxonomy.

    Never raises for empty or unmatched text: the result is the ``tired``
    baseline with confidence 60 (plus any hint bonuses).
    """
    hints = hints or MoodHints()
    text = text or ""

    counts, matched_keywords = score_moods(text)
    mood, matches = select_mood(counts)
    emotions = collect_emotions(hints.emotions, matched_keywords)
    triggers = detect_triggers(text)

    logger.debug(
        "Classified text as %s (matches=%d, triggers=%s)", mood, matches, triggers
    )
    return build_analysis(mood, matches, emotions, triggers, hints)
