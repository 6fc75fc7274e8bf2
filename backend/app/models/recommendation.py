"""
Wellness Recommendation Schemas
===============================
Pydantic models for tiered wellness recommendations returned to the web app.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.models.mood import MoodLabel

RecommendationType = Literal[
    "breathing",
    "meditation",
    "exercise",
    "social",
    "creative",
    "rest",
    "nutrition",
    "grounding",
]

Difficulty = Literal["easy", "moderate", "challenging"]


class WellnessRecommendation(BaseModel):
    """A single concrete wellness action."""

    type: RecommendationType
    title: str
    description: str
    duration_minutes: int = Field(..., gt=0, alias="durationMinutes")
    difficulty: Difficulty
    benefits: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True, "frozen": True}


class RecommendationPreferences(BaseModel):
    """Situational preferences. Missing values fall back to moderate / any."""

    activity_level: Optional[Literal["low", "moderate", "high"]] = Field(
        default=None,
        alias="activityLevel",
    )
    time_available_minutes: Optional[int] = Field(
        default=None,
        ge=0,
        alias="timeAvailableMinutes",
        description="Minutes the user can spare right now.",
    )
    environment: Optional[Literal["home", "work", "outdoor", "any"]] = None

    model_config = {"populate_by_name": True}


class RecommendationRequest(BaseModel):
    """Payload for POST /api/v1/recommendations."""

    mood: MoodLabel
    mood_score: int = Field(..., ge=1, le=10, alias="moodScore")
    energy_level: int = Field(..., ge=1, le=10, alias="energyLevel")
    triggers: Optional[list[str]] = None
    preferences: Optional[RecommendationPreferences] = None

    model_config = {"populate_by_name": True}


class TieredRecommendations(BaseModel):
    """Immediate (≤2), short-term (≤3) and long-term (≤2) actions."""

    immediate: list[WellnessRecommendation] = Field(default_factory=list, max_length=2)
    short_term: list[WellnessRecommendation] = Field(
        default_factory=list, max_length=3, alias="shortTerm"
    )
    long_term: list[WellnessRecommendation] = Field(
        default_factory=list, max_length=2, alias="longTerm"
    )

    model_config = {"populate_by_name": True, "frozen": True}


class RecommendationResponse(BaseModel):
    """Response envelope returned by POST /api/v1/recommendations."""

    recommendations: TieredRecommendations
    disclaimer: str = Field(
        default="Mindful AI is a wellness support tool, not a diagnostic service.",
        description="Must always be shown alongside recommendations.",
    )
