"""Single-shot sources for the caller's coordinates."""

import enum
import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional, Tuple

from sehat_saathi.models import Coordinate

logger = logging.getLogger(__name__)


class LocationErrorReason(str, enum.Enum):
    PERMISSION_DENIED = "permission_denied"
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"


class LocationError(RuntimeError):
    """Raised when the caller's position cannot be obtained."""

    def __init__(self, reason: LocationErrorReason, message: str = "") -> None:
        super().__init__(message or reason.value)
        self.reason = reason


class GeolocationSource(ABC):
    @abstractmethod
    def get_current_location(self) -> Coordinate:
        """Return the current position or raise :class:`LocationError`."""


class FixedLocationSource(GeolocationSource):
    """Location known up front, e.g. coordinates posted by a client or given on the CLI."""

    def __init__(self, coordinate: Optional[Coordinate]) -> None:
        self._coordinate = coordinate

    def get_current_location(self) -> Coordinate:
        if self._coordinate is None:
            raise LocationError(LocationErrorReason.UNAVAILABLE, "No location was provided")
        return self._coordinate


class CallbackLocationSource(GeolocationSource):
    """Wraps a provider callable returning ``(lat, lng)``.

    Provider failures are mapped onto :class:`LocationError`: ``PermissionError``
    means the user denied access, ``TimeoutError`` a timeout, anything else
    an unavailable position.
    """

    def __init__(self, provider: Callable[[], Tuple[float, float]]) -> None:
        self._provider = provider

    def get_current_location(self) -> Coordinate:
        try:
            lat, lng = self._provider()
        except LocationError:
            raise
        except PermissionError as exc:
            raise LocationError(LocationErrorReason.PERMISSION_DENIED, str(exc)) from exc
        except TimeoutError as exc:
            raise LocationError(LocationErrorReason.TIMEOUT, str(exc)) from exc
        except Exception as exc:  # noqa: BLE001
            logger.warning("Location provider failed: %s", exc)
            raise LocationError(LocationErrorReason.UNAVAILABLE, str(exc)) from exc

        try:
            return Coordinate(latitude=float(lat), longitude=float(lng))
        except (TypeError, ValueError) as exc:
            raise LocationError(LocationErrorReason.UNAVAILABLE, f"Invalid position: {lat}, {lng}") from exc
