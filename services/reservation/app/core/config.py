"""Configuration settings for the reservation service."""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Reservation Service")
    API_PREFIX: str = os.getenv("API_PREFIX", "/api/meydancha/v1/reservation")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./meydancha.db")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    # Baku (UTC+4); all "now" comparisons use this clock.
    REFERENCE_UTC_OFFSET_HOURS: int = int(os.getenv("REFERENCE_UTC_OFFSET_HOURS", "4"))
    CANCELLATION_WINDOW_HOURS: int = int(os.getenv("CANCELLATION_WINDOW_HOURS", "4"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
