"""Client utilities for the Google Cloud Text-to-Speech REST API."""

import logging
from typing import Any, Dict

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_URL = "https://texttospeech.googleapis.com/v1/text:synthesize"

MAX_TEXT_CHARS = 3000


class TextToSpeechError(RuntimeError):
    """Raised when the Text-to-Speech API does not return audio."""


def voice_language(language: str) -> str:
    return "hi-IN" if (language or "").lower().startswith("hi") else "en-IN"


def synthesize(text: str, language: str, api_key: str) -> str:
    """Return base64 encoded MP3 audio for ``text``."""
    if not api_key:
        raise TextToSpeechError("GOOGLE_TTS_API_KEY is not set")
    if not text or not text.strip():
        raise ValueError("text is required")

    body = {
        "input": {"text": text[:MAX_TEXT_CHARS]},
        "voice": {"languageCode": voice_language(language)},
        "audioConfig": {"audioEncoding": "MP3", "speakingRate": 0.9},
    }
    response = _SESSION.post(_URL, params={"key": api_key}, json=body, timeout=15)
    payload: Dict[str, Any] = response.json()
    if not response.ok:
        message = (payload.get("error") or {}).get("message")
        logger.error("synthesize failed: status=%s, error_message=%s", response.status_code, message)
        raise TextToSpeechError(message or "Failed to synthesize speech")

    audio_content = payload.get("audioContent")
    if not audio_content:
        raise TextToSpeechError("Text-to-Speech returned no audio")
    return audio_content
