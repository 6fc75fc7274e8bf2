"""
Mood Analysis Schemas
=====================
Pydantic models for mood classification. These are the contract between
the web app and the backend.

Key design decisions:
- The mood taxonomy is closed. Anything an upstream collaborator sends
  (LLM labels, legacy tags) is normalised into ``MOOD_LABELS`` before it
  reaches the engine.
- Hints are optional. A bare text check-in still gets a full analysis.
- Output models are frozen: a new classification is always a new value.
- Wire names are camelCase (``detectedMood``, ``moodScore``); Python
  attributes stay snake_case. Requests accept either.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Taxonomy
# ---------------------------------------------------------------------------

MoodLabel = Literal["anxious", "happy", "sad", "tired", "stressed", "excited"]

# Fixed iteration order. Keyword tie-breaks depend on it.
MOOD_LABELS: tuple[str, ...] = ("anxious", "happy", "sad", "tired", "stressed", "excited")

Severity = Literal["low", "moderate", "high"]

TRIGGER_CATEGORIES: tuple[str, ...] = (
    "work",
    "family",
    "relationships",
    "finances",
    "health",
    "sleep",
    "social",
)


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

class MoodHints(BaseModel):
    """Optional numeric and contextual hints that sharpen a classification."""

    emotions: Optional[list[str]] = Field(
        default=None,
        description="Emotions the user picked themselves, e.g. from an emoji check-in.",
    )
    mood_score: Optional[int] = Field(
        default=None,
        ge=1,
        le=10,
        alias="moodScore",
        description="Self-reported mood score. 1 = very low, 10 = excellent.",
    )
    energy_level: Optional[int] = Field(
        default=None,
        ge=1,
        le=10,
        alias="energyLevel",
        description="Self-reported energy level, 1-10.",
    )
    context: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Free-form situation context, e.g. 'exam week'.",
    )

    model_config = {"populate_by_name": True}


class MoodAnalysisRequest(MoodHints):
    """Payload for POST /api/v1/mood/analyze.

    ``text`` is the journal entry or a voice transcript. Audio and photo
    check-ins are turned into text upstream before they reach this endpoint.
    """

    text: str = Field(..., min_length=1, max_length=4000)


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------

class MoodAnalysis(BaseModel):
    """Structured output of the mood classifier."""

    detected_mood: MoodLabel = Field(..., alias="detectedMood")
    confidence: int = Field(..., ge=0, le=100)
    emotions: list[str] = Field(
        default_factory=list,
        description="Up to 5 lowercase emotion words, first-seen order.",
    )
    triggers: list[str] = Field(
        default_factory=list,
        description="Life-domain tags drawn from TRIGGER_CATEGORIES.",
    )
    severity: Severity
    analysis: str = Field(..., description="Human-readable summary sentence.")
    recommendations: list[str] = Field(default_factory=list, max_length=5)

    model_config = {"populate_by_name": True, "frozen": True}


class MoodAnalysisResponse(BaseModel):
    """Envelope returned by POST /api/v1/mood/analyze."""

    result: MoodAnalysis
    source: Literal["rules", "blended"] = Field(
        ...,
        description="'blended' when a well-formed LLM classification overrode rule fields.",
    )
    disclaimer: str = Field(
        default="Mindful AI is a wellness support tool, not a diagnostic service.",
    )
