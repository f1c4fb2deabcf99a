"""
backend/app/config.py

Purpose:
    Central settings loading for backend services.

Dependencies:
    - pydantic-settings
    - pathlib
"""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

# Prefer backend/.env, fallback to project-root .env.
_BACKEND_ENV_FILE = Path(__file__).resolve().parent.parent / ".env"
_ROOT_ENV_FILE = Path(__file__).resolve().parent.parent.parent / ".env"


class Settings(BaseSettings):
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "bibet"
    JWT_SECRET: str = "change-me"
    JWT_EXPIRES_MINUTES: int = 60 * 24 * 7
    ENVIRONMENT: str = "development"  # "production" redacts error details
    CLIENT_URL: str = "http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    # Starting balance for new accounts; unset means the balance is untracked
    INITIAL_BALANCE: Optional[float] = None

    # Seed admin user (leave empty to skip seeding)
    SEED_ADMIN_EMAIL: str = ""
    SEED_ADMIN_PASSWORD: str = ""

    # Wager limits
    MIN_STAKE: float = 1.0
    MAX_STAKE: float = 250_000.0
    MY_BETS_LIMIT: int = 50

    # Sports feed providers (all optional; demo data is served without them)
    CRICAPI_KEY: str = ""
    CRICAPI_BASE_URL: str = "https://api.cricapi.com/v1"
    RAPIDAPI_KEY: str = ""
    CRICKET_RAPIDAPI_HOST: str = ""
    TENNIS_RAPIDAPI_HOST: str = "tennisapi-tennis-live-data-v1.p.rapidapi.com"
    SPORTRADAR_TENNIS_KEY: str = ""
    SPORTRADAR_BASE_URL: str = "https://api.sportradar.com/tennis/trial/v3/en"
    FOOTBALL_DATA_API_KEY: str = ""
    FOOTBALL_DATA_BASE_URL: str = "https://api.football-data.org/v4"
    FEED_TIMEOUT_SECONDS: float = 8.0
    FEED_MAX_RETRIES: int = 1
    FEED_RETRY_BASE_DELAY: float = 1.0
    FEED_MAX_ITEMS: int = 12

    model_config = {
        "env_file": (str(_BACKEND_ENV_FILE), str(_ROOT_ENV_FILE)),
        "extra": "ignore",
    }

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"


settings = Settings()
