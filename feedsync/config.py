"""Centralized configuration loading.

Loads environment variables once and provides a typed Settings object
for the rest of the codebase. Entry points that want a local .env honoured
only need to import this module.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv


# Load .env once at import time
load_dotenv()


@dataclass
class Settings:
    # Remote API
    api_base_url: str = os.getenv("LEMMY_API_URL", "http://localhost:8536/api/v3")
    request_timeout: float = float(os.getenv("LEMMY_REQUEST_TIMEOUT", "30"))
    user_agent: str = os.getenv("LEMMY_USER_AGENT", "feedsync/0.1")

    # Listings
    fetch_limit: int = int(os.getenv("FEED_FETCH_LIMIT", "40"))
    fallback_sort: str = os.getenv("FEED_FALLBACK_SORT", "Active")

    # Logging
    log_level: str = os.getenv("FEED_LOG_LEVEL", "INFO")


def get_settings() -> Settings:
    """Return a new Settings instance (cheap dataclass construction)."""
    return Settings()
