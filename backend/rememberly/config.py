"""
Application configuration using Pydantic Settings.
All config is loaded from environment variables / .env file.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    # ── App ──────────────────────────────────────────────
    APP_NAME: str = "rememberly"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:8081,http://localhost:19006"  # comma-separated

    # ── Supabase ─────────────────────────────────────────
    SUPABASE_URL: str
    SUPABASE_KEY: str  # anon/public key, row-level security applies

    # ── Notifications ────────────────────────────────────
    NOTIFICATION_PLATFORM: str = "auto"  # auto | native | web
    NOTIFICATION_TIMEZONE: str = "UTC"
    EXPO_PUSH_URL: str = "https://exp.host/--/api/v2/push/send"
    EXPO_ACCESS_TOKEN: str = ""  # enables the native push scheduler under "auto"
    PUSH_TIMEOUT: int = 15  # HTTP timeout in seconds

    # ── LLM (Provider-Agnostic) ──────────────────────────
    LLM_PROVIDER: str = "gemini"  # gemini | openai | groq
    LLM_MODEL: str = "gemini-2.0-flash"
    LLM_API_KEY: str = ""  # empty = heuristic summarizer
    LLM_TEMPERATURE: float = 0.3
    LLM_TIMEOUT: int = 30  # seconds per summary request
    LLM_MAX_RETRIES: int = 1

    # ── URL capture ──────────────────────────────────────
    URL_FETCH_TIMEOUT: int = 20
    URL_CONTENT_MAX_CHARS: int = 20000

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance (singleton)."""
    return Settings()
