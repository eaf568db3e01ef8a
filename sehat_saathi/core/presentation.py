"""Ranking policy and the map surface the locator draws on."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from sehat_saathi.models import AnnotatedCandidate, Coordinate, Severity

logger = logging.getLogger(__name__)

ALERT_COLOR = "#DC2626"
NEUTRAL_COLOR = "#4285F4"
EMERGENCY_NUMBER = "108"


def rank(candidates: Sequence[AnnotatedCandidate]) -> List[AnnotatedCandidate]:
    """Upstream order already encodes proximity or relevance, so it is kept."""
    return list(candidates)


def marker_color(severity: Optional[Severity]) -> str:
    return ALERT_COLOR if severity is Severity.HIGH else NEUTRAL_COLOR


@dataclass(frozen=True)
class Marker:
    position: Coordinate
    title: str
    color: str
    kind: str = "provider"
    candidate_id: Optional[str] = None


@dataclass(frozen=True)
class CallIntent:
    number: str
    name: str

    @property
    def uri(self) -> str:
        return f"tel:{self.number}"


def build_markers(
    user_location: Optional[Coordinate],
    candidates: Sequence[AnnotatedCandidate],
    severity: Optional[Severity],
) -> List[Marker]:
    markers: List[Marker] = []
    if user_location is not None:
        markers.append(Marker(position=user_location, title="Your Location", color=NEUTRAL_COLOR, kind="user"))
    color = marker_color(severity)
    for item in candidates:
        markers.append(
            Marker(position=item.location, title=item.candidate.name, color=color, candidate_id=item.id)
        )
    return markers


class MapSurface(ABC):
    """Explicit-lifecycle wrapper around a map widget."""

    @abstractmethod
    def set_center(self, position: Coordinate, zoom: Optional[int] = None) -> None: ...

    @abstractmethod
    def set_markers(self, markers: Sequence[Marker]) -> None:
        """Replace every marker currently drawn."""

    @abstractmethod
    def on(self, event: str, handler: Callable[[Any], None]) -> None: ...

    @abstractmethod
    def close(self) -> None: ...


class RecordingMapSurface(MapSurface):
    """In-memory surface that keeps the last drawn state."""

    def __init__(self, center: Optional[Coordinate] = None, zoom: int = 5) -> None:
        self.center = center
        self.zoom = zoom
        self.markers: List[Marker] = []
        self.closed = False
        self._handlers: Dict[str, List[Callable[[Any], None]]] = defaultdict(list)

    def set_center(self, position: Coordinate, zoom: Optional[int] = None) -> None:
        self._ensure_open()
        self.center = position
        if zoom is not None:
            self.zoom = zoom

    def set_markers(self, markers: Sequence[Marker]) -> None:
        self._ensure_open()
        self.markers = list(markers)

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        self._ensure_open()
        self._handlers[event].append(handler)

    def emit(self, event: str, payload: Any) -> None:
        for handler in list(self._handlers.get(event, [])):
            handler(payload)

    def close(self) -> None:
        self.markers = []
        self._handlers.clear()
        self.closed = True

    def _ensure_open(self) -> None:
        if self.closed:
            raise RuntimeError("map surface is closed")
