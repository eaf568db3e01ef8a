"""Utilities for transforming Google Places responses into provider records."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from sehat_saathi.models import Coordinate, ProviderCandidate

logger = logging.getLogger(__name__)


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


def to_candidate(result: Dict[str, Any]) -> Optional[ProviderCandidate]:
    """Normalize one nearby-search result, ``None`` when it cannot be placed on a map."""
    place_id = result.get("place_id")
    geometry = result.get("geometry")
    location = geometry.get("location") if isinstance(geometry, dict) else None
    if not isinstance(location, dict):
        location = {}
    lat = _safe_float(location.get("lat"))
    lng = _safe_float(location.get("lng"))
    if not isinstance(place_id, str) or not place_id or lat is None or lng is None:
        logger.debug("Skipping result without place_id or location: %s", result.get("name"))
        return None

    try:
        coordinate = Coordinate(latitude=lat, longitude=lng)
    except ValueError:
        logger.debug("Skipping %s with invalid coordinates", place_id)
        return None

    rating = _safe_float(result.get("rating"))
    if rating is not None and not 0.0 <= rating <= 5.0:
        rating = None
    opening_hours = result.get("opening_hours")
    open_now = opening_hours.get("open_now") if isinstance(opening_hours, dict) else None

    return ProviderCandidate(
        id=place_id,
        name=str(result.get("name") or ""),
        address=str(result.get("vicinity") or result.get("formatted_address") or ""),
        location=coordinate,
        rating=rating,
        is_open=open_now if isinstance(open_now, bool) else None,
    )


def to_candidates(results: Iterable[Dict[str, Any]]) -> List[ProviderCandidate]:
    candidates = []
    for result in results:
        if not isinstance(result, dict):
            continue
        candidate = to_candidate(result)
        if candidate is not None:
            candidates.append(candidate)
    return candidates


def to_hospital_payload(candidate: ProviderCandidate) -> Dict[str, Any]:
    """Render a candidate in the ``/nearby-hospitals`` response shape."""
    payload: Dict[str, Any] = {
        "id": candidate.id,
        "name": candidate.name,
        "address": candidate.address,
        "location": {"lat": candidate.location.latitude, "lng": candidate.location.longitude},
        "rating": candidate.rating or 0,
    }
    if candidate.is_open is not None:
        payload["isOpen"] = candidate.is_open
    return payload
