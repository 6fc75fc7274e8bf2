"""
Mood Enrichment Service
=======================
Optionally blends a Claude classification into the rule-based analysis.

BLEND FLOW:
    1. The rule-based classifier always runs first. Its result is the
       fallback for every field.
    2. If enrichment is enabled and an API key is configured, the text is
       sent to Claude, which returns JSON: moodLabel, emotions, summary,
       confidence.
    3. Each external field overrides the rule field ONLY when it is
       well-formed. The label must normalise into the closed taxonomy.
    4. Severity, triggers and recommendations are always recomputed by the
       engine for whichever mood won.

Any failure (network, HTTP status, bad JSON) is logged and the pure
rule-based result is returned. Enrichment never blocks an analysis.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from app.config import Settings, get_settings
from app.models.mood import MOOD_LABELS, MoodAnalysis, MoodHints
from app.services import mood_classifier

logger = logging.getLogger(__name__)

MIN_ENRICHABLE_LENGTH = 3
MIN_EXTERNAL_CONFIDENCE = 40
MAX_EXTERNAL_CONFIDENCE = 95

# Upstream vocabulary mapped onto the closed taxonomy.
MOOD_ALIASES: dict[str, str] = {
    "anxiety": "anxious",
    "worried": "anxious",
    "nervous": "anxious",
    "scared": "anxious",
    "afraid": "anxious",
    "calm": "happy",
    "content": "happy",
    "grateful": "happy",
    "joyful": "happy",
    "hopeful": "happy",
    "low": "sad",
    "lonely": "sad",
    "down": "sad",
    "depressed": "sad",
    "exhausted": "tired",
    "fatigued": "tired",
    "low_energy": "tired",
    "sleepy": "tired",
    "stress": "stressed",
    "overwhelmed": "stressed",
    "frustrated": "stressed",
    "tense": "stressed",
    "energetic": "excited",
    "energized": "excited",
    "motivated": "excited",
    "thrilled": "excited",
}

_SYSTEM_PROMPT = """\
You analyze how someone is feeling from a short text reflection.

Rules:
- Return ONLY valid JSON with no markdown formatting, no backticks, no explanation.
- Ignore any names, places or organisations in the text.

Required JSON schema:
{
  "moodLabel": "<one of: anxious, happy, sad, tired, stressed, excited>",
  "emotions": [<up to 5 lowercase emotion descriptors>],
  "summary": "<at most 120 characters, empathetic tone>",
  "confidence": <0-100 integer>
}
"""


class EnrichmentError(Exception):
    """Claude call or response parsing failed."""


@dataclass
class ExternalClassification:
    """Normalised external output. ``None`` marks a malformed field."""

    mood_label: Optional[str] = None
    emotions: Optional[list[str]] = None
    summary: Optional[str] = None
    confidence: Optional[int] = None


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------

def normalise_label(raw: Any) -> Optional[str]:
    """Map an upstream label into MOOD_LABELS, or None if it cannot be."""
    if not isinstance(raw, str):
        return None
    label = raw.strip().lower()
    label = MOOD_ALIASES.get(label, label)
    return label if label in MOOD_LABELS else None


def normalise_external(parsed: dict) -> ExternalClassification:
    emotions = parsed.get("emotions")
    if isinstance(emotions, list) and emotions and all(isinstance(e, str) for e in emotions):
        normalised_emotions = mood_classifier.collect_emotions(emotions, [])[: mood_classifier.MAX_EMOTIONS]
    else:
        normalised_emotions = None

    summary = parsed.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        summary = None

    confidence = parsed.get("confidence")
    # bool is an int subclass; reject it explicitly
    if isinstance(confidence, (int, float)) and not isinstance(confidence, bool) and not math.isnan(confidence):
        normalised_confidence = max(
            MIN_EXTERNAL_CONFIDENCE, min(MAX_EXTERNAL_CONFIDENCE, round(confidence))
        )
    else:
        normalised_confidence = None

    return ExternalClassification(
        mood_label=normalise_label(parsed.get("moodLabel")),
        emotions=normalised_emotions or None,
        summary=summary.strip() if summary else None,
        confidence=normalised_confidence,
    )


def blend(base: MoodAnalysis, external: ExternalClassification, hints: MoodHints) -> tuple[MoodAnalysis, bool]:
    """Override *base* with the well-formed parts of *external*.

    Returns ``(analysis, overridden)``.
    """
    overridden = any(
        value is not None
        for value in (external.mood_label, external.emotions, external.summary, external.confidence)
    )
    if not overridden:
        return base, False

    mood = external.mood_label or base.detected_mood
    emotions = external.emotions or list(base.emotions)
    confidence = external.confidence if external.confidence is not None else base.confidence

    blended = mood_classifier.build_analysis(
        mood,
        matches=0,
        emotions=emotions,
        triggers=list(base.triggers),
        hints=hints,
        confidence=confidence,
    )
    if external.summary:
        blended = blended.model_copy(update={"analysis": external.summary})
    return blended, True


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class MoodEnrichmentService:
    """Rule-based analysis, optionally blended with a Claude classification."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._api_url = "https://api.anthropic.com/v1/messages"

    @property
    def enabled(self) -> bool:
        return bool(self._settings.enable_ai_enrichment and self._settings.anthropic_api_key)

    async def analyze(self, text: str, hints: MoodHints | None = None) -> tuple[MoodAnalysis, str]:
        """Return ``(analysis, source)`` where source is 'rules' or 'blended'."""
        hints = hints or MoodHints()
        base = mood_classifier.classify(text, hints)

        if not self.enabled:
            return base, "rules"
        if len((text or "").strip()) < MIN_ENRICHABLE_LENGTH:
            logger.debug("Text too short for enrichment, using rule-based analysis")
            return base, "rules"

        try:
            raw = await self._call_claude_api(text.strip())
            external = self._parse_response(raw)
        except Exception:
            logger.exception("Mood enrichment failed, falling back to rule-based analysis")
            return base, "rules"

        blended, overridden = blend(base, external, hints)
        if overridden:
            logger.info(
                "Blended external classification: %s -> %s (confidence=%d)",
                base.detected_mood,
                blended.detected_mood,
                blended.confidence,
            )
            return blended, "blended"
        return base, "rules"

    async def _call_claude_api(self, text: str) -> str:
        headers = {
            "x-api-key": self._settings.anthropic_api_key,
            "anthropic-version": "2023-06-01",
            "content-type": "application/json",
        }
        payload = {
            "model": self._settings.anthropic_model,
            "max_tokens": self._settings.anthropic_max_tokens,
            "system": _SYSTEM_PROMPT,
            "messages": [
                {
                    "role": "user",
                    "content": f'Reflect on this text and classify the emotional state:\n"""{text}"""',
                }
            ],
        }

        async with httpx.AsyncClient(timeout=15.0) as client:
            response = await client.post(self._api_url, headers=headers, json=payload)

        if response.status_code >= 400:
            raise EnrichmentError(f"Claude API error {response.status_code}: {response.text[:200]}")

        data = response.json()
        return "\n".join(
            block["text"]
            for block in data.get("content", [])
            if block.get("type") == "text"
        )

    def _parse_response(self, raw_response: str) -> ExternalClassification:
        """Parse Claude's reply, tolerating code fences and stray commentary."""
        text = (raw_response or "").strip()

        if text.startswith("```"):
            text = text.split("\n", 1)[-1]
        if text.endswith("```"):
            text = text.rsplit("```", 1)[0]
        text = text.strip()

        if not text.startswith("{"):
            start = text.find("{")
            end = text.rfind("}") + 1
            if start != -1 and end > start:
                text = text[start:end]

        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            raise EnrichmentError(f"Unparseable enrichment response: {text[:200]}") from exc
        if not isinstance(parsed, dict):
            raise EnrichmentError("Enrichment response is not a JSON object")
        return normalise_external(parsed)


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_default_service: MoodEnrichmentService | None = None


def get_mood_enrichment_service() -> MoodEnrichmentService:
    global _default_service
    if _default_service is None:
        _default_service = MoodEnrichmentService()
    return _default_service
