"""
Supabase Client
===============
Configured Supabase client shared by the auth helper and the stored
history loader.

Uses the service_role key because the backend reads ``mood_entries`` on
behalf of an already-verified user. Row level security still protects
direct client access from the web app.
"""

from functools import lru_cache

from supabase import Client, create_client

from app.config import get_settings


@lru_cache
def get_supabase_client() -> Client:
    settings = get_settings()
    return create_client(settings.supabase_url, settings.supabase_service_key)
