"""
Recommendations Router
======================
POST /api/v1/recommendations — Tiered wellness actions for a mood state.

The mood may come from a fresh classification or be picked by the user.
Selection is a pure function of the request; nothing is stored.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Header, status

from app.auth import get_authenticated_user
from app.models.recommendation import RecommendationRequest, RecommendationResponse
from app.services.wellness_recommendations import recommend

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/recommendations", tags=["recommendations"])


@router.post(
    "",
    response_model=RecommendationResponse,
    status_code=status.HTTP_200_OK,
    summary="Get wellness recommendations",
    description=(
        "Returns up to 2 immediate, 3 short-term and 2 long-term wellness actions "
        "for the given mood state and preferences."
    ),
    responses={
        200: {"description": "Recommendations returned"},
        401: {"description": "Authentication required"},
        422: {"description": "Validation error (unknown mood, score out of range, etc.)"},
    },
)
async def get_recommendations(
    body: RecommendationRequest,
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> RecommendationResponse:
    user = get_authenticated_user(authorization)

    tiers = recommend(
        body.mood,
        body.mood_score,
        body.energy_level,
        triggers=body.triggers,
        preferences=body.preferences,
    )
    logger.info(
        "Recommendations for user %s (mood=%s): %d immediate, %d short-term, %d long-term",
        user["id"], body.mood, len(tiers.immediate), len(tiers.short_term), len(tiers.long_term),
    )
    return RecommendationResponse(recommendations=tiers)
