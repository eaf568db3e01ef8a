"""HTTP proxy endpoints for the Sehat Saathi web client (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict

from flask import Flask, jsonify, request

from sehat_saathi.core import triage
from sehat_saathi.core.chat import build_chat_prompt
from sehat_saathi.core.config import get_settings
from sehat_saathi.core.search import ProviderSearchClient, SearchError
from sehat_saathi.etl.transform import to_hospital_payload
from sehat_saathi.models import Coordinate
from sehat_saathi.vendors import gemini, text_to_speech

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


@app.after_request
def add_cors_headers(response):
    for name, value in CORS_HEADERS.items():
        response.headers[name] = value
    return response


# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "port_config": settings.port,
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.route("/nearby-hospitals", methods=["POST", "OPTIONS"])
def nearby_hospitals() -> Any:
    """
    Find hospitals near a point.
    Required JSON fields: latitude, longitude
    Optional: radius (int), specialty (str), rankBy ("distance")
    """
    if request.method == "OPTIONS":
        return "", 200

    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    latitude = payload.get("latitude")
    longitude = payload.get("longitude")
    if latitude is None or longitude is None:
        return jsonify({"error": "Latitude and longitude are required"}), 500

    settings = get_settings()
    try:
        origin = Coordinate(latitude=float(latitude), longitude=float(longitude))
        radius = int(payload.get("radius") or settings.search_radius_meters)
    except (TypeError, ValueError) as exc:
        return jsonify({"error": str(exc)}), 500

    specialty = str(payload.get("specialty") or "").strip() or None
    if payload.get("rankBy") == "distance":
        search_kwargs: Dict[str, Any] = {"keyword": specialty, "rank_by": "distance"}
    else:
        search_kwargs = {"keyword": specialty, "radius": radius}

    try:
        candidates = ProviderSearchClient(settings.google_maps_api_key).nearby(origin, **search_kwargs)
    except SearchError as exc:
        logger.error("Error in nearby-hospitals (%s): %s", exc.reason.value, exc)
        return jsonify({"error": str(exc)}), 500

    return jsonify({"hospitals": [to_hospital_payload(candidate) for candidate in candidates]}), 200


@app.route("/triage-assist", methods=["POST", "OPTIONS"])
def triage_assist() -> Any:
    """Always answers 200; failures come back as the fallback triage object."""
    if request.method == "OPTIONS":
        return "", 200

    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    settings = get_settings()
    result = triage.assess(
        payload.get("bodyPart"),
        payload.get("userDescription"),
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
    )
    return jsonify(result), 200


@app.route("/health-chat", methods=["POST", "OPTIONS"])
def health_chat() -> Any:
    if request.method == "OPTIONS":
        return "", 200

    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    message = str(payload.get("message") or "").strip()
    if not message:
        return jsonify({"error": "message is required"}), 500

    settings = get_settings()
    try:
        reply = gemini.generate_content(build_chat_prompt(message), settings.gemini_api_key, settings.gemini_model)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error in health-chat: %s", exc)
        return jsonify({"error": str(exc) or "Unknown error"}), 500

    return jsonify({"reply": reply}), 200


@app.route("/text-to-speech", methods=["POST", "OPTIONS"])
def synthesize_speech() -> Any:
    if request.method == "OPTIONS":
        return "", 200

    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    text = str(payload.get("text") or "")
    language = str(payload.get("language") or "en")

    settings = get_settings()
    try:
        audio_content = text_to_speech.synthesize(text, language, settings.google_tts_api_key)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error in text-to-speech: %s", exc)
        return jsonify({"error": str(exc) or "Unknown error"}), 500

    return jsonify({"audioContent": audio_content}), 200


def main() -> None:
    """Cloud Run injects PORT; fall back to the configured port locally."""
    port = int(os.getenv("PORT") or get_settings().port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
