"""
Application configuration loaded from environment variables.

Uses pydantic-settings for type-safe env var parsing with automatic
.env file loading. The Gemini key is the only secret and is injected via
the environment — never hard-coded.

To extend: add new fields here and document them in .env.example.
See https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ─── Core ──────────────────────────────────────────────────────
    environment: str = "development"
    debug: bool = False

    # ─── CORS ──────────────────────────────────────────────────────
    # Comma-separated allowed origins for the scanner web app.
    cors_origins_str: str = "http://localhost:5173,http://localhost:3000"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins_str.split(",") if o.strip()]

    # ─── AI ────────────────────────────────────────────────────────
    # Get from https://aistudio.google.com/
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"

    # When True, all AI calls return canned mock responses.
    # Always True in tests; set False in production with a real key.
    ai_mock_mode: bool = True

    # ─── Scanning ──────────────────────────────────────────────────
    # Used only when the client reports no location at all (kiosk / dev).
    default_latitude: Optional[float] = None
    default_longitude: Optional[float] = None

    # Simulated community-database lookup latency.
    retrieval_delay_seconds: float = 2.0

    # Every scan costs one Gemini call.
    scan_rate_limit: str = "20/minute"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Don't fail on unknown env vars
    )


# Module-level singleton — import this everywhere instead of instantiating Settings()
settings = Settings()
