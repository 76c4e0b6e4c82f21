"""
Application configuration using Pydantic Settings.
All environment-specific values are centralized here.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── App ──────────────────────────────────────────────
    app_name: str = "SaaS Pricing Calculator"
    environment: str = "production"
    debug: bool = False
    mock_mode: bool = True  # When True, AI insights use the rule-based fallback
    public_url: str = "https://saas-pricing-calculator-2025.vercel.app"
    cors_origins: list[str] = ["*"]

    # ── LLM ──────────────────────────────────────────────
    groq_api_key: str = ""
    llm_model: str = "llama-3.3-70b-versatile"
    llm_temperature: float = 0.7
    llm_max_tokens: int = 1500
    insight_cache_ttl_seconds: int = 86400
    insight_cache_max_entries: int = 512

    # ── Admin ────────────────────────────────────────────
    admin_token: str = ""  # empty = admin routes disabled
    lead_store_max_entries: int = 10000  # oldest leads dropped beyond this

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
