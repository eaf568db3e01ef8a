"""Core data models shared by the care-locator pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class Severity(str, enum.Enum):
    LOW = "low"
    HIGH = "high"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Severity"]:
        """Map a free-form severity string onto the enum, ``None`` when unknown."""
        if not value:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class Coordinate:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")

    def as_param(self) -> str:
        """Render as the ``lat,lng`` string the Google Maps web services expect."""
        return f"{self.latitude},{self.longitude}"


@dataclass(frozen=True, slots=True)
class ProviderCandidate:
    """Normalized snapshot of a hospital returned by the Places nearby search."""

    id: str
    name: str
    address: str
    location: Coordinate
    rating: Optional[float] = None
    is_open: Optional[bool] = None


@dataclass(frozen=True, slots=True)
class AnnotatedCandidate:
    candidate: ProviderCandidate
    straight_line_distance_km: float
    eta_text: Optional[str] = None

    @property
    def id(self) -> str:
        return self.candidate.id

    @property
    def location(self) -> Coordinate:
        return self.candidate.location


@dataclass(frozen=True, slots=True)
class SearchQuery:
    origin: Coordinate
    radius_meters: int = 5000
    specialty_keyword: Optional[str] = None
    severity: Optional[Severity] = None

    @property
    def ranked_by_distance(self) -> bool:
        # Urgent or specialty searches want the nearest match at any distance.
        return self.severity is Severity.HIGH or bool(self.specialty_keyword)
