"""CLI job that runs the nearby-care pipeline once and prints the results."""

import argparse
import logging
from typing import List, Optional

from sehat_saathi.core.config import get_settings
from sehat_saathi.core.distance import DistanceAnnotator
from sehat_saathi.core.location import FixedLocationSource
from sehat_saathi.core.locator import NearbyCareLocator
from sehat_saathi.core.presentation import RecordingMapSurface
from sehat_saathi.core.search import ProviderSearchClient
from sehat_saathi.models import AnnotatedCandidate, Coordinate, Severity

logger = logging.getLogger(__name__)


def format_result(index: int, item: AnnotatedCandidate) -> str:
    candidate = item.candidate
    parts = [f"{index}. {candidate.name}", candidate.address, f"{item.straight_line_distance_km} km"]
    if item.eta_text:
        parts.append(f"{item.eta_text} away")
    if candidate.rating:
        parts.append(f"rating {candidate.rating}")
    if candidate.is_open is not None:
        parts.append("open" if candidate.is_open else "closed")
    return " | ".join(part for part in parts if part)


def run_locate_job(
    *,
    latitude: Optional[float],
    longitude: Optional[float],
    specialty: Optional[str],
    severity: Optional[str],
    radius: int,
) -> List[str]:
    settings = get_settings()
    origin = None
    if latitude is not None and longitude is not None:
        origin = Coordinate(latitude=latitude, longitude=longitude)

    locator = NearbyCareLocator(
        FixedLocationSource(origin),
        ProviderSearchClient(settings.google_maps_api_key),
        DistanceAnnotator(settings.google_maps_api_key),
        RecordingMapSurface(),
        specialty=specialty,
        severity=Severity.parse(severity),
        radius_meters=radius,
    )
    try:
        results = locator.refresh()
        if locator.error_message:
            raise RuntimeError(locator.error_message)
        lines = [format_result(index, item) for index, item in enumerate(results, start=1)]
        logger.info("Found %d hospitals (marker color %s)", len(lines), locator.marker_color)
        return lines
    finally:
        locator.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find hospitals near a location")
    parser.add_argument("--lat", dest="latitude", type=float, help="Latitude of the caller")
    parser.add_argument("--lng", dest="longitude", type=float, help="Longitude of the caller")
    parser.add_argument("--specialty", dest="specialty", help="Specialty keyword, e.g. cardiology")
    parser.add_argument("--severity", dest="severity", choices=[s.value for s in Severity], help="Symptom severity")
    parser.add_argument(
        "--radius",
        dest="radius",
        type=int,
        default=get_settings().search_radius_meters,
        help="Search radius in meters for routine searches",
    )
    return parser


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args()

    lines = run_locate_job(
        latitude=args.latitude,
        longitude=args.longitude,
        specialty=args.specialty,
        severity=args.severity,
        radius=args.radius,
    )
    for line in lines:
        print(line)


if __name__ == "__main__":
    main()
