"""Symptom triage through Gemini with an always-valid fallback payload."""

import json
import logging
from typing import Any, Dict, Optional

from sehat_saathi.vendors import gemini

logger = logging.getLogger(__name__)

FALLBACK_ACTION = {
    "textEn": "Error connecting. Please call a doctor.",
    "textHi": "संपर्क त्रुटि। कृपया डॉक्टर को कॉल करें।",
}

_PROMPT = """
Act as a kind, simple-speaking medical assistant for rural India.
The user is reporting pain or an issue with their "{body_part}".
Additional description: "{description}".

Analyze the input for potential emergencies (e.g., snake bites, heavy bleeding, chest pain).

Return strictly a JSON object with the following structure:
{{
  "questions": [
    {{ "textEn": "Question 1 in English?", "textHi": "Question 1 in Hindi?", "icon": "LucideIconName" }}
  ],
  "severity": "Low" | "Medium" | "High",
  "medicalTerm": "Specific search term for Google Maps",
  "action": {{
    "textEn": "One simple first-aid step in English.",
    "textHi": "One simple first-aid step in Hindi."
  }}
}}

Use simple language suitable for a rural farmer.
ENSURE THE RESPONSE IS VALID JSON. Do not include markdown formatting like ```json.
"""


def build_prompt(body_part: Optional[str], description: Optional[str]) -> str:
    return _PROMPT.format(body_part=body_part or "General", description=description or "None provided")


def parse_model_json(text: str) -> Dict[str, Any]:
    """Strip Markdown code fences the model adds anyway and decode the object."""
    cleaned = (text or "").replace("```json", "").replace("```", "").strip()
    payload = json.loads(cleaned)
    if not isinstance(payload, dict):
        raise ValueError("triage response is not a JSON object")
    return payload


def fallback_payload(error: str) -> Dict[str, Any]:
    return {"error": error or "Unknown error", "severity": "Low", "action": dict(FALLBACK_ACTION)}


def assess(body_part: Optional[str], description: Optional[str], api_key: str, model: str) -> Dict[str, Any]:
    """Return the triage object, or :func:`fallback_payload` on any failure."""
    try:
        reply = gemini.generate_content(build_prompt(body_part, description), api_key, model)
        return parse_model_json(reply)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error in triage assist: %s", exc)
        return fallback_payload(str(exc))
