"""Hospital search against the Places nearby-search index."""

import enum
import logging
from typing import Any, Dict, List, Optional

import requests

from sehat_saathi.etl.transform import to_candidates
from sehat_saathi.models import Coordinate, ProviderCandidate, SearchQuery
from sehat_saathi.vendors import google_places

logger = logging.getLogger(__name__)


class SearchErrorReason(str, enum.Enum):
    MISSING_CREDENTIALS = "missing_credentials"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    INVALID_RESPONSE = "invalid_response"


class SearchError(RuntimeError):
    def __init__(self, reason: SearchErrorReason, message: str = "") -> None:
        super().__init__(message or reason.value)
        self.reason = reason


def build_search_kwargs(query: SearchQuery) -> Dict[str, Any]:
    """Translate a query into :func:`google_places.nearby_search` keyword arguments.

    Ranked queries ask for ``rankby=distance`` and carry no radius; all other
    queries use a bounded radius.
    """
    kwargs: Dict[str, Any] = {"keyword": query.specialty_keyword or None}
    if query.ranked_by_distance:
        kwargs["rank_by"] = "distance"
    else:
        kwargs["radius"] = query.radius_meters
    return kwargs


class ProviderSearchClient:
    def __init__(self, api_key: Optional[str]) -> None:
        self._api_key = api_key or ""

    def search(self, query: SearchQuery) -> List[ProviderCandidate]:
        return self.nearby(query.origin, **build_search_kwargs(query))

    def nearby(
        self,
        origin: Coordinate,
        *,
        keyword: Optional[str] = None,
        radius: Optional[int] = None,
        rank_by: Optional[str] = None,
    ) -> List[ProviderCandidate]:
        """Run one nearby search with explicit upstream parameters."""
        if not self._api_key:
            raise SearchError(SearchErrorReason.MISSING_CREDENTIALS, "Google Maps API key not configured")

        logger.info("Searching hospitals near %s keyword=%s radius=%s rank_by=%s", origin.as_param(), keyword, radius, rank_by)
        try:
            payload = google_places.nearby_search(
                origin.as_param(), self._api_key, keyword=keyword, radius=radius, rank_by=rank_by
            )
        except requests.JSONDecodeError as exc:
            logger.warning("Places returned a non-JSON body: %s", exc)
            raise SearchError(SearchErrorReason.INVALID_RESPONSE, "Places response is not JSON") from exc
        except (requests.RequestException, google_places.GooglePlacesError) as exc:
            logger.warning("Hospital search failed: %s", exc)
            raise SearchError(SearchErrorReason.UPSTREAM_UNAVAILABLE, "Failed to fetch nearby hospitals") from exc
        except ValueError as exc:
            raise SearchError(SearchErrorReason.INVALID_RESPONSE, str(exc)) from exc

        results = payload.get("results")
        if not isinstance(results, list):
            raise SearchError(SearchErrorReason.INVALID_RESPONSE, "Places response has no results list")

        try:
            candidates = to_candidates(results)
        except (AttributeError, KeyError, TypeError) as exc:
            logger.warning("Malformed Places result: %s", exc)
            raise SearchError(SearchErrorReason.INVALID_RESPONSE, "Places response is malformed") from exc
        logger.info("Parsed %d hospitals from %d results", len(candidates), len(results))
        return candidates
