"""Nearby-care resolution pipeline.

Location -> hospital search -> distance/ETA annotation -> ranking -> map and
list state. Each :meth:`NearbyCareLocator.refresh` fully replaces the previous
result set; results from a run that has since been superseded by a newer
refresh are dropped.
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import List, Optional, Tuple

from sehat_saathi.core.distance import DistanceAnnotator, annotate_distances
from sehat_saathi.core.location import GeolocationSource, LocationError, LocationErrorReason
from sehat_saathi.core.presentation import (
    EMERGENCY_NUMBER,
    CallIntent,
    MapSurface,
    build_markers,
    marker_color,
    rank,
)
from sehat_saathi.core.search import ProviderSearchClient, SearchError
from sehat_saathi.models import AnnotatedCandidate, Coordinate, SearchQuery, Severity

logger = logging.getLogger(__name__)

USER_ZOOM = 13
SELECTION_ZOOM = 15

LOCATION_MESSAGES = {
    LocationErrorReason.PERMISSION_DENIED: "Please allow location access to find hospitals near you.",
    LocationErrorReason.UNAVAILABLE: "Your location is unavailable. Please try again.",
    LocationErrorReason.TIMEOUT: "Finding your location took too long. Please try again.",
}
SEARCH_ERROR_MESSAGE = "Could not load nearby hospitals. Please try again."


class NearbyCareLocator:
    def __init__(
        self,
        location_source: GeolocationSource,
        search_client: ProviderSearchClient,
        annotator: Optional[DistanceAnnotator] = None,
        map_surface: Optional[MapSurface] = None,
        *,
        specialty: Optional[str] = None,
        severity: Optional[Severity] = None,
        radius_meters: int = 5000,
    ) -> None:
        self._location_source = location_source
        self._search_client = search_client
        self._annotator = annotator
        self._map = map_surface
        self.specialty = (specialty or "").strip() or None
        self.severity = severity
        self.radius_meters = radius_meters

        self._sequence = itertools.count(1)
        self._latest = 0
        self._sequence_lock = threading.Lock()

        self.user_location: Optional[Coordinate] = None
        self.results: Tuple[AnnotatedCandidate, ...] = ()
        self.selection: Optional[AnnotatedCandidate] = None
        self.error_message: Optional[str] = None
        self.loading = False

        if self._map is not None:
            self._map.on("marker_click", self._on_marker_click)

    @property
    def marker_color(self) -> str:
        return marker_color(self.severity)

    def build_query(self, origin: Coordinate) -> SearchQuery:
        return SearchQuery(
            origin=origin,
            radius_meters=self.radius_meters,
            specialty_keyword=self.specialty,
            severity=self.severity,
        )

    def refresh(self) -> Tuple[AnnotatedCandidate, ...]:
        """Run the pipeline once. Errors end up in :attr:`error_message`."""
        sequence = self._issue_sequence()

        try:
            origin = self._location_source.get_current_location()
        except LocationError as exc:
            logger.warning("Geolocation failed (%s): %s", exc.reason.value, exc)
            if self._is_current(sequence):
                self.error_message = LOCATION_MESSAGES[exc.reason]
            return self.results

        if not self._is_current(sequence):
            return self.results
        self.user_location = origin
        if self._map is not None:
            self._map.set_center(origin, USER_ZOOM)

        self.loading = True
        self.error_message = None
        try:
            candidates = self._search_client.search(self.build_query(origin))
        except SearchError as exc:
            logger.error("Error fetching hospitals (%s): %s", exc.reason.value, exc)
            if self._is_current(sequence):
                self.error_message = SEARCH_ERROR_MESSAGE
                self.loading = False
            return self.results

        if not self._is_current(sequence):
            logger.info("Discarding stale hospital results from refresh #%d", sequence)
            return self.results

        self._publish(rank(annotate_distances(origin, candidates)))
        self.loading = False

        if self._annotator is not None and self.results:
            with_eta = self._annotator.attach_etas(origin, self.results)
            if self._is_current(sequence):
                self._publish(with_eta, redraw=False)
            else:
                logger.info("Discarding stale ETAs from refresh #%d", sequence)
        return self.results

    def select(self, candidate_id: str, zoom: Optional[int] = SELECTION_ZOOM) -> Optional[AnnotatedCandidate]:
        match = self._find(candidate_id)
        self.selection = match
        if match is not None and self._map is not None:
            self._map.set_center(match.location, zoom)
        return match

    def call_intent(self, candidate_id: str) -> Optional[CallIntent]:
        match = self._find(candidate_id)
        if match is None:
            return None
        return CallIntent(number=EMERGENCY_NUMBER, name=match.candidate.name)

    def close(self) -> None:
        if self._map is not None:
            self._map.close()
            self._map = None

    def _publish(self, results: List[AnnotatedCandidate], redraw: bool = True) -> None:
        selected_id = self.selection.id if self.selection is not None else None
        self.results = tuple(results)
        if redraw:
            self.selection = None
            if self._map is not None:
                self._map.set_markers(build_markers(self.user_location, self.results, self.severity))
        elif selected_id is not None:
            # Same result set with ETAs attached; keep focus on the same provider.
            self.selection = self._find(selected_id)

    def _find(self, candidate_id: str) -> Optional[AnnotatedCandidate]:
        for item in self.results:
            if item.id == candidate_id:
                return item
        return None

    def _issue_sequence(self) -> int:
        with self._sequence_lock:
            sequence = next(self._sequence)
            self._latest = sequence
        return sequence

    def _is_current(self, sequence: int) -> bool:
        return sequence == self._latest

    def _on_marker_click(self, candidate_id: str) -> None:
        self.select(candidate_id, zoom=None)
