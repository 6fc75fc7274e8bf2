"""
Wellness Recommendation Service
===============================
Turns a mood state plus situational preferences into three tiers of
concrete wellness actions.

Decision logic:
    1. Resolve preferences (activity level defaults to "moderate", time
       available to 30 minutes, environment to "any").
    2. Immediate tier (0-5 minutes): per-mood quick resets.
    3. Short-term tier (5-30 minutes): per-mood practices, gated by activity
       level, environment and time available.
    4. Long-term tier (ongoing): universal mindfulness habit, mood-specific
       habits, universal sleep hygiene.
    5. Truncate tiers to 2 / 3 / 2 items.

Every item comes from the fixed TEMPLATES table and is built fresh per
call. No randomness, no I/O, no error conditions.
"""

from __future__ import annotations

import logging
from typing import Optional

from app.models.recommendation import (
    RecommendationPreferences,
    TieredRecommendations,
    WellnessRecommendation,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_TIME_AVAILABLE_MINUTES = 30
DEFAULT_ACTIVITY_LEVEL = "moderate"
DEFAULT_ENVIRONMENT = "any"

MAX_IMMEDIATE = 2
MAX_SHORT_TERM = 3
MAX_LONG_TERM = 2

POWER_NAP_MINUTES = 20

# ---------------------------------------------------------------------------
# Templates keyed by slug
# ---------------------------------------------------------------------------

TEMPLATES: dict[str, dict] = {
    # --- immediate ---
    "box_breathing": {
        "type": "breathing",
        "title": "Box Breathing Technique",
        "description": "A quick breathing exercise to calm your nervous system immediately",
        "duration_minutes": 3,
        "difficulty": "easy",
        "benefits": ("Reduces anxiety", "Lowers heart rate", "Clears mind"),
        "instructions": (
            "Inhale through your nose for 4 counts",
            "Hold your breath for 4 counts",
            "Exhale through your mouth for 4 counts",
            "Hold empty lungs for 4 counts",
            "Repeat 4 times",
        ),
    },
    "grounding_54321": {
        "type": "grounding",
        "title": "5-4-3-2-1 Grounding Exercise",
        "description": "Use your senses to anchor yourself in the present moment",
        "duration_minutes": 5,
        "difficulty": "easy",
        "benefits": ("Reduces anxiety", "Increases present-moment awareness", "Stops panic spirals"),
        "instructions": (
            "Name 5 things you can see around you",
            "Name 4 things you can touch",
            "Name 3 things you can hear",
            "Name 2 things you can smell",
            "Name 1 thing you can taste",
        ),
    },
    "relaxation_breath_478": {
        "type": "breathing",
        "title": "4-7-8 Relaxation Breath",
        "description": "Activates your body's relaxation response",
        "duration_minutes": 4,
        "difficulty": "easy",
        "benefits": ("Reduces stress hormones", "Promotes relaxation", "Improves focus"),
        "instructions": (
            "Exhale completely through your mouth",
            "Inhale quietly through your nose for 4 counts",
            "Hold your breath for 7 counts",
            "Exhale forcefully through your mouth for 8 counts",
            "Repeat 3-4 times",
        ),
    },
    "micro_break": {
        "type": "rest",
        "title": "Micro-Break Reset",
        "description": "Quick mental reset to break stress cycle",
        "duration_minutes": 2,
        "difficulty": "easy",
        "benefits": ("Breaks stress cycle", "Refreshes mind", "Improves productivity"),
        "instructions": (
            "Close your eyes",
            "Take three deep breaths",
            "Roll your shoulders back",
            "Stretch your neck gently",
            "Open your eyes and refocus",
        ),
    },
    "reach_out": {
        "type": "social",
        "title": "Reach Out to Someone",
        "description": "Connect with a trusted friend or family member",
        "duration_minutes": 5,
        "difficulty": "easy",
        "benefits": ("Reduces isolation", "Provides emotional support", "Improves mood"),
        "instructions": (
            "Choose someone you trust",
            "Send a text or make a call",
            "Share how you're feeling (if comfortable)",
            "Or simply have a friendly chat",
        ),
    },
    "posture_break": {
        "type": "rest",
        "title": "Power Posture Break",
        "description": "Quick postural reset to boost energy",
        "duration_minutes": 3,
        "difficulty": "easy",
        "benefits": ("Increases energy", "Improves circulation", "Reduces fatigue"),
        "instructions": (
            "Stand up and stretch your arms overhead",
            "Take 5 deep breaths",
            "Do 10 shoulder rolls (5 forward, 5 back)",
            "Shake out your hands and feet",
            "Splash cold water on your face if possible",
        ),
    },
    # --- short term ---
    "body_scan": {
        "type": "meditation",
        "title": "Guided Body Scan Meditation",
        "description": "Progressive relaxation through body awareness",
        "duration_minutes": 15,
        "difficulty": "easy",
        "benefits": ("Releases physical tension", "Calms mind", "Improves body awareness"),
        "instructions": (
            "Find a comfortable seated or lying position",
            "Close your eyes and take deep breaths",
            "Systematically focus on each body part from toes to head",
            "Notice sensations without judgment",
            "Release tension as you exhale",
        ),
    },
    "nature_walk": {
        "type": "exercise",
        "title": "Gentle Walk in Nature",
        "description": "Light physical activity with mindful awareness",
        "duration_minutes": 20,
        "difficulty": "easy",
        "benefits": ("Reduces cortisol", "Improves mood", "Provides fresh perspective"),
        "instructions": (
            "Put on comfortable shoes",
            "Find a park or quiet street",
            "Walk at a comfortable pace",
            "Focus on your breath and surroundings",
            "Notice nature elements around you",
        ),
    },
    "expressive_journaling": {
        "type": "creative",
        "title": "Expressive Journaling",
        "description": "Write freely about your thoughts and feelings",
        "duration_minutes": 15,
        "difficulty": "easy",
        "benefits": ("Emotional release", "Clarity", "Self-understanding"),
        "instructions": (
            "Find a quiet space with paper or digital device",
            "Set a timer for 15 minutes",
            "Write continuously without editing",
            "Express whatever comes to mind",
            "Don't worry about grammar or structure",
        ),
    },
    "meaningful_connection": {
        "type": "social",
        "title": "Meaningful Connection",
        "description": "Have a genuine conversation with someone supportive",
        "duration_minutes": 20,
        "difficulty": "moderate",
        "benefits": ("Reduces loneliness", "Provides support", "Improves perspective"),
        "instructions": (
            "Call a trusted friend or family member",
            "Share authentically if you feel safe",
            "Practice active listening",
            "Allow yourself to be vulnerable",
            "Express gratitude for their time",
        ),
    },
    "power_nap": {
        "type": "rest",
        "title": "Power Nap",
        "description": "Brief sleep to restore energy and alertness",
        "duration_minutes": POWER_NAP_MINUTES,
        "difficulty": "easy",
        "benefits": ("Restores energy", "Improves cognition", "Enhances mood"),
        "instructions": (
            "Find a quiet, dark space",
            "Set alarm for exactly 20 minutes",
            "Lie down in comfortable position",
            "Close eyes and relax body",
            "Don't worry if you don't fully sleep",
        ),
    },
    "energizing_snack": {
        "type": "nutrition",
        "title": "Energizing Snack Break",
        "description": "Nourish your body with healthy fuel",
        "duration_minutes": 10,
        "difficulty": "easy",
        "benefits": ("Stabilizes blood sugar", "Increases energy", "Improves focus"),
        "instructions": (
            "Choose protein and complex carbs",
            "Options: nuts, fruit, yogurt, whole grain",
            "Drink a full glass of water",
            "Eat mindfully and slowly",
            "Avoid high-sugar options",
        ),
    },
    "gratitude_practice": {
        "type": "creative",
        "title": "Gratitude Practice",
        "description": "Capture and amplify positive moments",
        "duration_minutes": 10,
        "difficulty": "easy",
        "benefits": ("Enhances happiness", "Builds resilience", "Creates positive memories"),
        "instructions": (
            "Write down 3-5 things you're grateful for today",
            "Be specific about why each matters",
            "Notice how your body feels as you write",
            "Take a photo of something beautiful",
            "Share gratitude with someone who helped you",
        ),
    },
    "energetic_movement": {
        "type": "exercise",
        "title": "Energetic Movement",
        "description": "Channel positive energy into physical activity",
        "duration_minutes": 25,
        "difficulty": "moderate",
        "benefits": ("Amplifies positive energy", "Releases endorphins", "Improves fitness"),
        "instructions": (
            "Choose an activity you enjoy",
            "Options: dancing, jogging, sports, cycling",
            "Move at an intensity that feels good",
            "Focus on the joy of movement",
            "Cool down with gentle stretching",
        ),
    },
    # --- long term ---
    "mindfulness_habit": {
        "type": "meditation",
        "title": "Daily Mindfulness Practice",
        "description": "Build a consistent meditation habit",
        "duration_minutes": 10,
        "difficulty": "moderate",
        "benefits": (
            "Reduces baseline anxiety",
            "Improves emotional regulation",
            "Enhances self-awareness",
            "Builds resilience",
        ),
        "instructions": (
            "Choose same time each day (morning ideal)",
            "Start with 5-10 minutes",
            "Use a meditation app if helpful",
            "Focus on breath or body sensations",
            "Be patient and consistent",
        ),
    },
    "exercise_routine": {
        "type": "exercise",
        "title": "Regular Physical Exercise Routine",
        "description": "Build sustainable exercise habit",
        "duration_minutes": 30,
        "difficulty": "challenging",  # "moderate" for high activity levels
        "benefits": (
            "Reduces stress hormones long-term",
            "Improves sleep quality",
            "Boosts mood naturally",
            "Increases resilience",
        ),
        "instructions": (
            "Aim for 3-4 sessions per week",
            "Mix cardio and strength training",
            "Choose activities you enjoy",
            "Start small and build gradually",
            "Consider joining a class or finding a workout buddy",
        ),
    },
    "support_network": {
        "type": "social",
        "title": "Build Support Network",
        "description": "Cultivate meaningful relationships",
        "duration_minutes": 60,
        "difficulty": "challenging",
        "benefits": (
            "Reduces isolation",
            "Provides emotional support",
            "Improves overall wellbeing",
            "Creates sense of belonging",
        ),
        "instructions": (
            "Schedule regular check-ins with friends/family",
            "Join a support group or community",
            "Consider therapy or counseling",
            "Volunteer for causes you care about",
            "Be intentional about quality time with loved ones",
        ),
    },
    "sleep_hygiene": {
        "type": "rest",
        "title": "Sleep Hygiene Optimization",
        "description": "Establish healthy sleep patterns",
        "duration_minutes": 480,
        "difficulty": "moderate",
        "benefits": (
            "Improves mood regulation",
            "Increases energy levels",
            "Enhances cognitive function",
            "Supports overall health",
        ),
        "instructions": (
            "Maintain consistent sleep schedule",
            "Create calming bedtime routine",
            "Limit screen time before bed",
            "Keep bedroom cool and dark",
            "Avoid caffeine after 2pm",
        ),
    },
}

# Immediate tier depends on mood alone.
IMMEDIATE_BY_MOOD: dict[str, tuple[str, ...]] = {
    "anxious": ("box_breathing", "grounding_54321"),
    "stressed": ("relaxation_breath_478", "micro_break"),
    "sad": ("reach_out",),
    "tired": ("posture_break",),
    "happy": (),
    "excited": (),
}


def _build(slug: str, **overrides) -> WellnessRecommendation:
    """Materialise a fresh recommendation from its template."""
    template = TEMPLATES[slug]
    fields = {
        **template,
        "benefits": list(template["benefits"]),
        "instructions": list(template["instructions"]),
        **overrides,
    }
    return WellnessRecommendation(**fields)


# ---------------------------------------------------------------------------
# Tier rules
# ---------------------------------------------------------------------------

def _immediate(mood: str) -> list[WellnessRecommendation]:
    return [_build(slug) for slug in IMMEDIATE_BY_MOOD.get(mood, ())]


def _short_term(
    mood: str,
    time_available: int,
    activity_level: str,
    environment: str,
) -> list[WellnessRecommendation]:
    items: list[WellnessRecommendation] = []

    if mood in {"anxious", "stressed"}:
        items.append(_build("body_scan"))
        if activity_level != "low" and environment != "work":
            items.append(_build("nature_walk"))

    if mood == "sad":
        items.append(_build("expressive_journaling"))
        items.append(_build("meaningful_connection"))

    if mood == "tired":
        if time_available >= POWER_NAP_MINUTES:
            items.append(_build("power_nap"))
        items.append(_build("energizing_snack"))

    if mood in {"excited", "happy"}:
        items.append(_build("gratitude_practice"))
        if activity_level == "high":
            items.append(_build("energetic_movement"))

    return items


def _long_term(mood: str, activity_level: str) -> list[WellnessRecommendation]:
    items = [_build("mindfulness_habit")]

    if mood in {"anxious", "stressed"}:
        difficulty = "moderate" if activity_level == "high" else "challenging"
        items.append(_build("exercise_routine", difficulty=difficulty))

    if mood == "sad":
        items.append(_build("support_network"))

    items.append(_build("sleep_hygiene"))
    return items


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def recommend(
    mood: str,
    mood_score: int,
    energy_level: int,
    triggers: Optional[list[str]] = None,
    preferences: Optional[RecommendationPreferences] = None,
) -> TieredRecommendations:
    """Build immediate / short-term / long-term recommendations.

    ``mood_score``, ``energy_level`` and ``triggers`` are part of the
    contract so callers can pass a full check-in; the current rule tables
    select on mood and preferences only.
    """
    prefs = preferences or RecommendationPreferences()
    time_available = prefs.time_available_minutes or DEFAULT_TIME_AVAILABLE_MINUTES
    activity_level = prefs.activity_level or DEFAULT_ACTIVITY_LEVEL
    environment = prefs.environment or DEFAULT_ENVIRONMENT

    immediate = _immediate(mood)
    short_term = _short_term(mood, time_available, activity_level, environment)
    long_term = _long_term(mood, activity_level)

    logger.debug(
        "Recommendations for mood=%s score=%s energy=%s: %d/%d/%d before caps",
        mood, mood_score, energy_level, len(immediate), len(short_term), len(long_term),
    )
    return TieredRecommendations(
        immediate=immediate[:MAX_IMMEDIATE],
        short_term=short_term[:MAX_SHORT_TERM],
        long_term=long_term[:MAX_LONG_TERM],
    )
