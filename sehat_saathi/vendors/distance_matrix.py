"""Client utilities for the Google Distance Matrix API."""

import logging
from typing import Any, Dict, List, Sequence

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"


class DistanceMatrixError(RuntimeError):
    """Raised when the Distance Matrix API rejects the whole request."""


def driving_elements(origin: str, destinations: Sequence[str], api_key: str) -> List[Dict[str, Any]]:
    """Return the per-destination elements for a single origin.

    Element order matches ``destinations``; each element carries its own
    ``status`` which callers must check individually.
    """
    params = {
        "origins": origin,
        "destinations": "|".join(destinations),
        "mode": "driving",
        "key": api_key,
    }
    response = _SESSION.get(_URL, params=params, timeout=10)
    response.raise_for_status()
    payload = response.json()
    if not isinstance(payload, dict):
        raise DistanceMatrixError("Distance Matrix response is not a JSON object")
    status = payload.get("status")
    if status != "OK":
        logger.error("driving_elements failed: status=%s, error_message=%s", status, payload.get("error_message"))
        raise DistanceMatrixError(payload.get("error_message") or status)

    rows = payload.get("rows") or []
    if not isinstance(rows, list):
        raise DistanceMatrixError("Distance Matrix rows is not a list")
    if not rows:
        return []
    if not isinstance(rows[0], dict):
        raise DistanceMatrixError("Distance Matrix row is not an object")
    elements = rows[0].get("elements") or []
    if not isinstance(elements, list):
        raise DistanceMatrixError("Distance Matrix elements is not a list")
    return elements
