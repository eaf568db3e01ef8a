"""Client utilities for the Google Places API."""

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://maps.googleapis.com/maps/api/place"


class GooglePlacesError(RuntimeError):
    """Raised when the Places API returns a non-successful response."""


def nearby_search(
    location: str,
    api_key: str,
    *,
    place_type: str = "hospital",
    keyword: Optional[str] = None,
    radius: Optional[int] = None,
    rank_by: Optional[str] = None,
) -> Dict[str, Any]:
    """Run a Places nearby search around ``location`` (``"lat,lng"``).

    ``radius`` and ``rank_by`` are mutually exclusive upstream; exactly one
    of them must be supplied.
    """
    if radius is not None and rank_by:
        raise ValueError("radius must not be combined with rank_by")
    if radius is None and not rank_by:
        raise ValueError("either radius or rank_by is required")

    params: Dict[str, Any] = {"location": location, "type": place_type, "key": api_key}
    if keyword:
        params["keyword"] = keyword
    if rank_by:
        params["rankby"] = rank_by
    else:
        params["radius"] = radius

    response = _SESSION.get(f"{_BASE_URL}/nearbysearch/json", params=params, timeout=10)
    response.raise_for_status()
    payload = response.json()
    if not isinstance(payload, dict):
        raise ValueError("Places response is not a JSON object")
    status = payload.get("status")
    if status not in {"OK", "ZERO_RESULTS"}:
        logger.error("nearby_search failed: status=%s, error_message=%s", status, payload.get("error_message"))
        raise GooglePlacesError(payload.get("error_message") or status)
    return payload
