"""
Mood Analysis Router
====================
POST /api/v1/mood/analyze — Classify a text or voice-transcript check-in.

Flow:
    1. Verify the caller
    2. Run the rule-based classifier (always)
    3. IF enrichment is enabled and configured → blend in the Claude
       classification, field by field, only where it is well-formed
    4. Return the analysis and which path produced it

Enrichment failures never fail the request; the rule-based analysis is
returned instead. Persisting the check-in is the storage layer's job.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Header, status

from app.auth import get_authenticated_user
from app.models.mood import MoodAnalysisRequest, MoodAnalysisResponse
from app.services.mood_enrichment import get_mood_enrichment_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/mood", tags=["mood"])


@router.post(
    "/analyze",
    response_model=MoodAnalysisResponse,
    status_code=status.HTTP_200_OK,
    summary="Analyze a mood check-in",
    description=(
        "Classify free text (or a voice transcript) into the mood taxonomy with "
        "confidence, emotions, triggers, severity and recommendations."
    ),
    responses={
        200: {"description": "Analysis returned"},
        401: {"description": "Authentication required"},
        422: {"description": "Validation error (empty text, score out of range, etc.)"},
    },
)
async def analyze_mood(
    body: MoodAnalysisRequest,
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> MoodAnalysisResponse:
    user = get_authenticated_user(authorization)

    service = get_mood_enrichment_service()
    analysis, source = await service.analyze(body.text, body)

    logger.info(
        "Mood analysis for user %s: %s (confidence=%d, severity=%s, source=%s)",
        user["id"], analysis.detected_mood, analysis.confidence, analysis.severity, source,
    )
    return MoodAnalysisResponse(result=analysis, source=source)
