# app/core/config.py

import logging
import os
from typing import List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Project root (where main.py and .env live)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
ENV_PATH = os.path.join(BASE_DIR, ".env")

if os.path.exists(ENV_PATH):
    load_dotenv(ENV_PATH)


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, value)
        return None


def _float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %s", name, value, default)
        return default


class Settings:
    def __init__(self) -> None:
        self.DATABASE_URL: str = os.getenv(
            "DATABASE_URL",
            "sqlite:///./reddit_reviews.db",
        )

        # Reddit OAuth app (client credentials flow)
        self.REDDIT_CLIENT_ID: Optional[str] = os.getenv("REDDIT_CLIENT_ID") or None
        self.REDDIT_CLIENT_SECRET: Optional[str] = os.getenv("REDDIT_CLIENT_SECRET") or None
        self.REDDIT_USER_AGENT: Optional[str] = os.getenv("REDDIT_USER_AGENT") or None
        self.REDDIT_SAMPLE_SEED: Optional[int] = _optional_int("REDDIT_SAMPLE_SEED")

        self.OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY") or None
        self.OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

        # Unset = admin routes are open (local development only)
        self.ADMIN_API_TOKEN: Optional[str] = os.getenv("ADMIN_API_TOKEN") or None

        self.CORS_ORIGINS: List[str] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
            if origin.strip()
        ]

        self.HTTP_TIMEOUT: float = _float("HTTP_TIMEOUT", 10.0)
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def reddit_configured(self) -> bool:
        return bool(self.REDDIT_CLIENT_ID and self.REDDIT_CLIENT_SECRET and self.REDDIT_USER_AGENT)


settings = Settings()
