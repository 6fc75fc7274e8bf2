"""
Authentication Helper
=====================
Every analysis endpoint acts on behalf of a signed-in Mindful AI user.

    1. Pull the Supabase access token out of ``Authorization: Bearer ...``
    2. Ask Supabase Auth who the token belongs to
    3. Load that user's profile row from ``users``

The engine itself never sees credentials; routers call
``get_authenticated_user`` first and only pass ``user["id"]`` onward
(for logging and the stored-history lookup).
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from app.db.supabase import get_supabase_client

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = "id, email"


def _unauthorized(message: str, code: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"message": message, "code": code},
    )


def _bearer_token(authorization: str) -> str:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme != "Bearer" or not token.strip():
        raise _unauthorized("Missing or invalid authorization header", "auth_required")
    return token.strip()


def get_authenticated_user(authorization: str) -> dict:
    """Return the caller's profile row.

    401 ``auth_required`` for a missing or malformed header, 401
    ``auth_invalid`` when Supabase rejects the token, 404 ``user_not_found``
    when the token is valid but the profile row is gone.
    """
    token = _bearer_token(authorization)
    db = get_supabase_client()

    try:
        auth_response = db.auth.get_user(token)
    except Exception as exc:
        logger.warning("Supabase rejected access token: %s", exc)
        raise _unauthorized("Invalid or expired token", "auth_invalid") from exc

    auth_user = auth_response.user if auth_response else None
    if auth_user is None:
        raise _unauthorized("Invalid or expired token", "auth_invalid")

    # maybe_single() yields None rather than an empty result when no row matches
    profile = (
        db.table("users")
        .select(PROFILE_COLUMNS)
        .eq("id", auth_user.id)
        .maybe_single()
        .execute()
    )
    if not (profile and profile.data):
        logger.info("No profile row for authenticated user %s", auth_user.id)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "User profile not found", "code": "user_not_found"},
        )
    return profile.data
