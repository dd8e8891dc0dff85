import os
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """Application settings."""
    # Base settings
    DEBUG: bool = False
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS settings
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",  # Frontend development server
        "http://localhost:8000",  # Backend server
    ]

    # Database settings
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: str = os.getenv("DB_PORT", "5432")
    DB_USER: str = os.getenv("DB_USER", "postgres")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "postgres")
    DB_NAME: str = os.getenv("DB_NAME", "sadhana")
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    )

    # Rate limiting storage, e.g. redis://localhost:6379
    RATE_LIMIT_STORAGE_URI: str = os.getenv("RATE_LIMIT_STORAGE_URI", "memory://")

    # Streak settings
    # Every stream (sadhana, books, shlokas) uses this zone to decide where a day starts
    DAY_BOUNDARY_TZ: str = os.getenv("DAY_BOUNDARY_TZ", "UTC")
    # Display-only timezone for new users (sleep cycle charts)
    DEFAULT_USER_TIMEZONE: str = os.getenv("DEFAULT_USER_TIMEZONE", "Asia/Kolkata")
    # When false, progress logged for a past day only updates the metric
    STREAK_ALLOW_BACKFILL: bool = os.getenv("STREAK_ALLOW_BACKFILL", "false").lower() == "true"

    # Shared secret for the scheduled streak reset trigger
    CRON_SECRET: str = os.getenv("CRON_SECRET", "")
    CRON_SECRET_HEADER: str = os.getenv("CRON_SECRET_HEADER", "X-Cron-Secret")

    # Default goals for new users
    DEFAULT_ROUNDS_GOAL: int = 16
    DEFAULT_READING_GOAL: int = 30
    DEFAULT_HEARING_GOAL: int = 30
    DEFAULT_AARTIS_GOAL: int = 4

    class Config:
        env_file = ".env"
        case_sensitive = True

# Create settings instance
settings = Settings()

# Upper bounds for goal settings
MAX_ROUNDS_GOAL = 108
MAX_READING_GOAL = 1000
MAX_HEARING_GOAL = 1440  # minutes in a day
MAX_AARTIS_GOAL = 4  # mangal, darshan, bhoga, gaura
