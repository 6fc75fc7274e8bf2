"""
Insights Router
===============
POST /api/v1/insights     — Insights for a caller-supplied check-in history.
GET  /api/v1/insights/me  — Insights for the caller's stored check-ins.

Both return the same InsightsReport: summary statistics, detected
patterns, trigger impact ranking, recommendations and narrative insights.
A user with no check-ins gets the fixed empty-state report, still 200.

The POST body must be sorted ascending by date. The GET path loads the
most recent ``insights_history_limit`` rows from ``mood_entries`` and
sorts them before analysis.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Header, HTTPException, Query, status

from app.auth import get_authenticated_user
from app.config import get_settings
from app.models.insights import InsightsReport, InsightsRequest, Timeframe
from app.services.checkin_history import get_checkin_history_service
from app.services.insights import analyze

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/insights", tags=["insights"])


@router.post(
    "",
    response_model=InsightsReport,
    status_code=status.HTTP_200_OK,
    summary="Analyze a check-in history",
    description=(
        "Returns summary statistics, patterns, trigger impact, recommendations "
        "and insights for the supplied history (sorted ascending by date)."
    ),
    responses={
        200: {"description": "Insights returned (empty-state report for no history)"},
        401: {"description": "Authentication required"},
        422: {"description": "Validation error (unknown mood, score out of range, etc.)"},
    },
)
async def analyze_history(
    body: InsightsRequest,
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> InsightsReport:
    user = get_authenticated_user(authorization)

    report = analyze(body.history, body.timeframe)
    logger.info(
        "Insights for user %s from %d supplied check-ins: trend=%s, %d patterns",
        user["id"], len(body.history), report.summary.trend, len(report.patterns),
    )
    return report


@router.get(
    "/me",
    response_model=InsightsReport,
    status_code=status.HTTP_200_OK,
    summary="Get insights for my stored check-ins",
    description=(
        "Loads the caller's most recent check-ins from storage and analyzes them. "
        "New users receive the empty-state report."
    ),
    responses={
        200: {"description": "Insights returned"},
        401: {"description": "Authentication required"},
        500: {"description": "Stored history could not be loaded"},
    },
)
async def get_my_insights(
    timeframe: Optional[Timeframe] = Query(default=None),
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> InsightsReport:
    user = get_authenticated_user(authorization)
    user_id: str = user["id"]
    settings = get_settings()

    service = get_checkin_history_service()
    try:
        history = await service.load_for_user(user_id, settings.insights_history_limit)
    except Exception as exc:
        logger.exception("Failed to load mood history for user %s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to load mood history", "code": "db_error"},
        ) from exc

    report = analyze(history, timeframe)
    logger.info(
        "Insights for user %s from %d stored check-ins: trend=%s, %d patterns",
        user_id, len(history), report.summary.trend, len(report.patterns),
    )
    return report
