"""Read-aloud with backend synthesis and an on-device fallback."""

from __future__ import annotations

import base64
import logging
from typing import Callable, Iterable, List, Optional, Protocol

from sehat_saathi.vendors import text_to_speech

logger = logging.getLogger(__name__)

MIN_READABLE_CHARS = 10


class SpeechError(RuntimeError):
    """Raised when neither speech engine could play the text."""


class SpeechEngine(Protocol):
    name: str

    def speak(self, text: str, language: str) -> None: ...


class BackendSpeechEngine:
    """Synthesizes MP3 audio through Google Cloud TTS and hands it to ``player``."""

    name = "backend"

    def __init__(self, api_key: str, player: Callable[[bytes], None]) -> None:
        self._api_key = api_key
        self._player = player

    def speak(self, text: str, language: str) -> None:
        audio_content = text_to_speech.synthesize(text, language, self._api_key)
        self._player(base64.b64decode(audio_content))


class DeviceSpeechEngine:
    """Adapter for a local speech callable taking ``(text, locale, rate)``."""

    name = "device"

    def __init__(self, say: Callable[[str, str, float], None], rate: float = 0.9) -> None:
        self._say = say
        self._rate = rate

    def speak(self, text: str, language: str) -> None:
        self._say(text, text_to_speech.voice_language(language), self._rate)


def readable_paragraphs(texts: Iterable[Optional[str]]) -> List[str]:
    """Keep the page texts worth reading aloud, in page order."""
    readable = []
    for text in texts:
        stripped = (text or "").strip()
        if len(stripped) > MIN_READABLE_CHARS:
            readable.append(stripped)
    return readable


class SpeechReader:
    """Plays one text at a time; a request made while busy is ignored."""

    def __init__(self, primary: SpeechEngine, secondary: Optional[SpeechEngine] = None) -> None:
        self._primary = primary
        self._secondary = secondary
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def read(self, text: str, language: str = "en") -> Optional[str]:
        """Speak ``text``; returns the engine name used or ``None`` when busy."""
        if self._busy:
            logger.debug("Speech already playing; ignoring read request")
            return None

        self._busy = True
        try:
            return self._speak(text, language)
        finally:
            self._busy = False

    def read_aloud(self, paragraphs: Iterable[str], language: str = "en") -> int:
        """Read paragraphs in order, stopping at the first failure. Returns how many were read."""
        count = 0
        for paragraph in paragraphs:
            try:
                if self.read(paragraph, language) is None:
                    break
            except SpeechError as exc:
                logger.error("Read aloud stopped at paragraph %d: %s", count, exc)
                break
            count += 1
        return count

    def _speak(self, text: str, language: str) -> str:
        try:
            self._primary.speak(text, language)
            return self._primary.name
        except Exception as exc:  # noqa: BLE001
            logger.warning("%s speech failed, trying fallback: %s", self._primary.name, exc)
            if self._secondary is None:
                raise SpeechError("Text-to-speech is not available") from exc

        try:
            self._secondary.speak(text, language)
        except Exception as exc:  # noqa: BLE001
            raise SpeechError("Failed to play audio") from exc
        logger.info("Using offline voice temporarily")
        return self._secondary.name
