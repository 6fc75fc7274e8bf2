"""
Check-in History Service
========================
Loads a user's stored check-ins from the Supabase ``mood_entries`` table
and turns them into CheckInRecords for the insights engine.

Stored rows carry a score but no mood label, so one is derived from the
score. Rows are fetched newest first (to apply the limit) and returned
oldest first, which is the order the engine expects.
"""

from __future__ import annotations

import logging
from datetime import date

from app.db.supabase import get_supabase_client
from app.models.insights import CheckInRecord

logger = logging.getLogger(__name__)

DEFAULT_SCORE = 5

# (minimum score, label), checked top-down
SCORE_LABELS: tuple[tuple[int, str], ...] = (
    (8, "happy"),
    (6, "excited"),
    (5, "tired"),
    (3, "sad"),
    (2, "stressed"),
)


def label_from_score(score: int) -> str:
    for minimum, label in SCORE_LABELS:
        if score >= minimum:
            return label
    return "anxious"


def row_to_record(row: dict) -> CheckInRecord:
    score = row.get("mood_score") or DEFAULT_SCORE
    return CheckInRecord(
        date=date.fromisoformat(str(row["date"])[:10]),
        mood=label_from_score(score),
        mood_score=score,
        energy_level=row.get("energy_level") or DEFAULT_SCORE,
        triggers=row.get("triggers") or [],
        emotions=row.get("emotions") or [],
    )


class CheckInHistoryService:
    """Reads check-in history for the insights endpoints."""

    def __init__(self) -> None:
        self._db = get_supabase_client()

    async def load_for_user(self, user_id: str, limit: int) -> list[CheckInRecord]:
        """Return up to *limit* most recent check-ins, sorted ascending by date."""
        result = (
            self._db.table("mood_entries")
            .select("date, mood_score, energy_level, emotions, triggers")
            .eq("user_id", user_id)
            .order("date", desc=True)
            .limit(limit)
            .execute()
        )

        records: list[CheckInRecord] = []
        for row in result.data or []:
            if not row.get("date"):
                logger.debug("Skipping mood entry without a date for user %s", user_id)
                continue
            records.append(row_to_record(row))

        records.sort(key=lambda record: record.date)
        return records


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_default_service: CheckInHistoryService | None = None


def get_checkin_history_service() -> CheckInHistoryService:
    global _default_service
    if _default_service is None:
        _default_service = CheckInHistoryService()
    return _default_service
