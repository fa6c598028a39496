"""Provider-agnostic weather and geocoding interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..location.models import Coordinate
from .models import Placemark, WeatherBundle


class WeatherService(ABC):
    """Base contract for the combined current/daily/alerts weather call."""

    @abstractmethod
    async def fetch(self, coordinate: Coordinate) -> WeatherBundle:
        """Fetch current conditions, daily forecast and active alerts.

        Raises WeatherServiceError on any failure.
        """

    @abstractmethod
    async def aclose(self) -> None:
        """Release service resources."""


class Geocoder(ABC):
    """Base contract for reverse geocoding."""

    @abstractmethod
    async def reverse(self, coordinate: Coordinate) -> list[Placemark]:
        """Return zero or more place candidates; raises GeocodeError on failure."""

    @abstractmethod
    async def aclose(self) -> None:
        """Release geocoder resources."""
