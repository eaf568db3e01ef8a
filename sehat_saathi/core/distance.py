"""Straight-line distance and drive-time annotations for hospital candidates."""

import logging
import math
from dataclasses import replace
from typing import List, Optional, Sequence

import requests

from sehat_saathi.models import AnnotatedCandidate, Coordinate, ProviderCandidate
from sehat_saathi.vendors import distance_matrix

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0


def haversine_km(origin: Coordinate, destination: Coordinate) -> float:
    """Great-circle distance in kilometres, rounded to one decimal."""
    phi1 = math.radians(origin.latitude)
    phi2 = math.radians(destination.latitude)
    dphi = math.radians(destination.latitude - origin.latitude)
    dlmb = math.radians(destination.longitude - origin.longitude)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    # Rounding error can push a past 1.0 for antipodal points.
    distance = 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, a)))
    return round(distance, 1)


def annotate_distances(origin: Coordinate, candidates: Sequence[ProviderCandidate]) -> List[AnnotatedCandidate]:
    return [
        AnnotatedCandidate(candidate=candidate, straight_line_distance_km=haversine_km(origin, candidate.location))
        for candidate in candidates
    ]


class DistanceAnnotator:
    """Attaches drive-time ETAs from a single batched Distance Matrix call.

    ETA is optional: any failure leaves candidates without ``eta_text``.
    """

    def __init__(self, api_key: Optional[str]) -> None:
        self._api_key = api_key or ""

    def attach_etas(self, origin: Coordinate, annotated: Sequence[AnnotatedCandidate]) -> List[AnnotatedCandidate]:
        annotated = list(annotated)
        if not annotated:
            return annotated
        if not self._api_key:
            logger.warning("GOOGLE_MAPS_API_KEY missing; skipping ETA lookup")
            return annotated

        destinations = [item.location.as_param() for item in annotated]
        try:
            elements = distance_matrix.driving_elements(origin.as_param(), destinations, self._api_key)
        except (requests.RequestException, distance_matrix.DistanceMatrixError, ValueError) as exc:
            logger.warning("ETA lookup failed; showing list without drive times: %s", exc)
            return annotated

        with_eta = []
        for index, item in enumerate(annotated):
            eta_text = _eta_from_element(elements[index] if index < len(elements) else None)
            with_eta.append(replace(item, eta_text=eta_text) if eta_text else item)
        return with_eta


def _eta_from_element(element) -> Optional[str]:
    if not isinstance(element, dict) or element.get("status") != "OK":
        return None
    duration = element.get("duration")
    text = duration.get("text") if isinstance(duration, dict) else None
    return text if isinstance(text, str) and text else None
