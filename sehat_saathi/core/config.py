"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    google_maps_api_key: str
    gemini_api_key: str
    google_tts_api_key: str
    gemini_model: str = "gemini-1.5-flash"
    search_radius_meters: int = 5000
    port: int = 8080


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_maps_api_key = os.getenv("GOOGLE_MAPS_API_KEY", "")
    gemini_api_key = os.getenv("GEMINI_API_KEY", "")
    google_tts_api_key = os.getenv("GOOGLE_TTS_API_KEY", "")
    gemini_model = os.getenv("GEMINI_MODEL", "").strip() or "gemini-1.5-flash"
    search_radius_meters = int(os.getenv("SEARCH_RADIUS_METERS", "5000"))
    port = int(os.getenv("PORT", "8080"))

    if not google_maps_api_key:
        logger.warning("GOOGLE_MAPS_API_KEY is not configured; hospital search will fail.")
    if not gemini_api_key:
        logger.warning("GEMINI_API_KEY is not configured; triage and chat will use fallbacks.")
    if not google_tts_api_key:
        logger.warning("GOOGLE_TTS_API_KEY is not configured; speech falls back to the local engine.")

    return Settings(
        google_maps_api_key=google_maps_api_key,
        gemini_api_key=gemini_api_key,
        google_tts_api_key=google_tts_api_key,
        gemini_model=gemini_model,
        search_radius_meters=search_radius_meters,
        port=port,
    )
