# app/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Hosted backend (PostgREST) ────────────────────────────────────────
    BACKEND_URL: str = "https://vospmdkmjoegttsuqjbp.supabase.co"
    BACKEND_ANON_KEY: str = "CHANGE_ME"
    BACKEND_SCHEMA: str = "public"

    # ── Network ───────────────────────────────────────────────────────────
    SERVICE_HOST: str = "0.0.0.0"
    SERVICE_PORT: int = 8080

    # ── Security ──────────────────────────────────────────────────────────
    API_KEY: Optional[str] = None   # Set in .env to enable auth on API endpoints

    @property
    def REST_URL(self) -> str:
        return f"{self.BACKEND_URL.rstrip('/')}/rest/v1"

    @property
    def BACKEND_HEADERS(self) -> dict:
        return {
            "apikey": self.BACKEND_ANON_KEY,
            "Authorization": f"Bearer {self.BACKEND_ANON_KEY}",
            "Accept-Profile": self.BACKEND_SCHEMA,
            "Content-Profile": self.BACKEND_SCHEMA,
        }

    # ── Table timers ──────────────────────────────────────────────────────
    TIMER_DEFAULT_DURATION_MIN: int = 120
    TIMER_REFRESH_SECONDS: int = 60
    TIMER_YELLOW_RATIO: float = 0.75    # Warn at 75% of the booked time
    TIMER_RED_RATIO: float = 1.0        # Overdue once the booked time is used

    # ── Queries ───────────────────────────────────────────────────────────
    CUSTOMERS_PAGE_LIMIT: int = 100
    TODAY_RESERVATIONS_LIMIT: int = 20

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
