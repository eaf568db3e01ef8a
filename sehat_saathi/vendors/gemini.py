"""Client utilities for the Gemini generative-language API."""

import logging
from typing import Any, Dict

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiError(RuntimeError):
    """Raised when Gemini fails or returns no usable text."""


def generate_content(prompt: str, api_key: str, model: str = "gemini-1.5-flash") -> str:
    if not api_key:
        raise GeminiError("GEMINI_API_KEY is not set")

    body = {"contents": [{"parts": [{"text": prompt}]}]}
    response = _SESSION.post(
        f"{_BASE_URL}/{model}:generateContent",
        params={"key": api_key},
        json=body,
        timeout=30,
    )
    payload: Dict[str, Any] = response.json()
    if not response.ok:
        message = (payload.get("error") or {}).get("message")
        logger.error("generate_content failed: status=%s, error_message=%s", response.status_code, message)
        raise GeminiError(message or "Failed to fetch from Gemini")

    try:
        return payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        logger.error("generate_content returned no text: keys=%s", list(payload.keys())[:10])
        raise GeminiError("Gemini returned an empty response") from exc
