"""
Insights Schemas
================
Input records and the report produced by the insights engine.
"""

from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.models.mood import MoodLabel

Timeframe = Literal["week", "month", "quarter", "year"]
Trend = Literal["improving", "declining", "stable"]
PatternKind = Literal["temporal", "mood", "energy", "trigger"]
Impact = Literal["positive", "negative", "neutral"]


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

class CheckInRecord(BaseModel):
    """One labelled historical check-in. Callers supply these sorted by date."""

    date: date
    mood: MoodLabel
    mood_score: int = Field(..., ge=1, le=10, alias="moodScore")
    energy_level: int = Field(..., ge=1, le=10, alias="energyLevel")
    triggers: list[str] = Field(default_factory=list)
    emotions: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True, "frozen": True}


class InsightsRequest(BaseModel):
    """Payload for POST /api/v1/insights."""

    history: list[CheckInRecord] = Field(default_factory=list)
    timeframe: Optional[Timeframe] = None


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

class Pattern(BaseModel):
    kind: PatternKind
    description: str
    frequency_pct: float = Field(..., alias="frequencyPct")
    confidence: int = Field(..., ge=0, le=100)
    recommendation: str

    model_config = {"populate_by_name": True, "frozen": True}


class TriggerImpact(BaseModel):
    trigger: str
    frequency_pct: float = Field(..., alias="frequencyPct")
    impact: Impact

    model_config = {"populate_by_name": True, "frozen": True}


class InsightsSummary(BaseModel):
    average_mood: float = Field(..., alias="averageMood")
    average_energy: float = Field(..., alias="averageEnergy")
    most_common_mood: str = Field(
        ...,
        alias="mostCommonMood",
        description="A MoodLabel, or 'neutral' in the empty-state report.",
    )
    mood_stability: int = Field(..., ge=0, le=100, alias="moodStability")
    trend: Trend

    model_config = {"populate_by_name": True, "frozen": True}


class InsightsReport(BaseModel):
    """Full insights payload returned to the web app."""

    summary: InsightsSummary
    patterns: list[Pattern] = Field(default_factory=list)
    triggers: list[TriggerImpact] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list, max_length=5)
    insights: list[str] = Field(default_factory=list, max_length=6)

    model_config = {"frozen": True}
