"""
Mindful AI Configuration
========================
All environment variables in one place. Pydantic Settings validates
types at startup so a bad value fails at boot, not on the first request.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Loaded from environment variables or a .env file."""

    # --- Supabase (auth delegation + check-in history) ---
    supabase_url: str = "http://localhost:54321"
    supabase_service_key: str = ""  # service_role key for backend operations

    # --- Anthropic / Claude API (optional mood enrichment) ---
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    # Enrichment JSON is tiny: label, emotions, one-line summary, confidence
    anthropic_max_tokens: int = 256

    # --- App settings ---
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000"]
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # --- Feature flags ---
    # Kill switch: if False, the rule-based classifier answers alone.
    enable_ai_enrichment: bool = True

    # --- Insights ---
    # Stored check-ins loaded for GET /api/v1/insights/me (~3 months of dailies)
    insights_history_limit: int = 90

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
