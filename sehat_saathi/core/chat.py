"""Health chat transcript and the parser for myth-check replies.

Replies loosely follow::

    Status: TRUE
    English: <explanation>
    Hindi: <explanation>

This is labelled free text, not a grammar; extraction is best effort.
"""

from __future__ import annotations

import itertools
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

_STATUS_RE = re.compile(r"(?:Status|Verdict):\s*(.*?)(?:\n|$)", re.IGNORECASE)
_ENGLISH_RE = re.compile(r"English:\s*(.*?)(?=\n\s*Hindi:|\Z)", re.IGNORECASE | re.DOTALL)
_HINDI_RE = re.compile(r"Hindi:\s*(.*)\Z", re.IGNORECASE | re.DOTALL)

GREETING_EN = "Namaste! I am Sehat Saathi. Tell me your health problem."
GREETING_HI = "नमस्ते! मैं सेहत साथी हूँ। मुझे अपनी स्वास्थ्य समस्या बताएं।"
ERROR_HI = "त्रुटि: कृपया बाद में पुनः प्रयास करें।"

_CHAT_PROMPT = """
You are Sehat Saathi, a friendly health guide for people in rural India.
The user says: "{message}"

If the message states a health belief, check whether it is true or a myth.
Reply in exactly this format, in simple words:
Status: TRUE or FALSE (leave out this line if no belief was stated)
English: <short answer in English>
Hindi: <the same answer in Hindi>

Always advise visiting a doctor or calling 108 for emergencies.
"""


def build_chat_prompt(message: str) -> str:
    return _CHAT_PROMPT.format(message=message.strip())


@dataclass(frozen=True)
class MythReply:
    raw: str
    status: Optional[str] = None
    english: Optional[str] = None
    hindi: Optional[str] = None

    @property
    def display_text(self) -> str:
        return self.english or self.raw


def parse_myth_reply(text: str) -> MythReply:
    clean = (text or "").replace("**", "")

    status = None
    status_match = _STATUS_RE.search(clean)
    if status_match:
        verdict = status_match.group(1).lower()
        if "true" in verdict:
            status = "TRUE"
        elif "false" in verdict:
            status = "FALSE"

    english_match = _ENGLISH_RE.search(clean)
    hindi_match = _HINDI_RE.search(clean)
    return MythReply(
        raw=text or "",
        status=status,
        english=english_match.group(1).strip() if english_match else None,
        hindi=hindi_match.group(1).strip() if hindi_match else None,
    )


@dataclass(frozen=True)
class ChatMessage:
    id: str
    text_en: str
    sender: str
    text_hi: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    status: Optional[str] = None


class ChatSession:
    """Keeps the transcript and turns ``ask`` replies into bot messages."""

    def __init__(self, ask: Callable[[str], str]) -> None:
        self._ask = ask
        self._ids = itertools.count(1)
        self.messages: List[ChatMessage] = [self._message(GREETING_EN, "bot", text_hi=GREETING_HI)]

    def send(self, text: str) -> Optional[ChatMessage]:
        """Post a user message; returns the bot reply, ``None`` for blank input."""
        if not text or not text.strip():
            return None
        self.messages.append(self._message(text, "user"))

        try:
            reply = self._ask(text)
            parsed = parse_myth_reply(reply)
            bot = self._message(parsed.display_text, "bot", text_hi=parsed.hindi, status=parsed.status)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Health chat failed: %s", exc)
            bot = self._message(f"Error: {str(exc) or 'Unknown error'}. Please try again.", "bot", text_hi=ERROR_HI)

        self.messages.append(bot)
        return bot

    def _message(self, text_en: str, sender: str, **extra) -> ChatMessage:
        return ChatMessage(id=str(next(self._ids)), text_en=text_en, sender=sender, **extra)
