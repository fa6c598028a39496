"""Nominatim (OpenStreetMap) reverse geocoder."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import Settings
from ..exceptions import GeocodeError
from ..location.models import Coordinate
from ..redaction import sanitize_text
from .base import Geocoder
from .models import Placemark

_LOCALITY_KEYS = ("city", "town", "village", "hamlet", "municipality")


class NominatimGeocoder(Geocoder):
    """Resolves a coordinate to at most one placemark."""

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._base_url = str(settings.geocoder_base_url)
        self._client = client or httpx.AsyncClient(
            timeout=settings.geocoder_timeout_seconds,
            headers={"User-Agent": settings.http_user_agent},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def reverse(self, coordinate: Coordinate) -> list[Placemark]:
        params = {
            "format": "jsonv2",
            "lat": f"{coordinate.latitude:.4f}",
            "lon": f"{coordinate.longitude:.4f}",
            "zoom": "10",
            "addressdetails": "1",
        }
        payload = await self._request_json(params)
        if "error" in payload:
            # Nominatim reports "nothing here" (open ocean) as an error body.
            self.logger.debug("Nominatim found no place: %s", payload.get("error"))
            return []
        return [self._normalize_placemark(payload)]

    async def _request_json(self, params: dict[str, str]) -> dict[str, Any]:
        try:
            response = await self._client.get(self._base_url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise GeocodeError(
                f"Nominatim reverse lookup failed with status {exc.response.status_code}: "
                f"{sanitize_text(exc.response.text[:300])}"
            ) from exc
        except httpx.HTTPError as exc:
            raise GeocodeError(
                f"Nominatim reverse lookup request failed: {sanitize_text(str(exc))}"
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise GeocodeError("Nominatim reverse lookup returned non-JSON response.") from exc
        if not isinstance(payload, dict):
            raise GeocodeError(
                f"Nominatim reverse lookup returned unexpected payload type "
                f"{type(payload).__name__}."
            )
        return payload

    def _normalize_placemark(self, payload: dict[str, Any]) -> Placemark:
        address = payload.get("address")
        if not isinstance(address, dict):
            address = {}

        locality = next(
            (value for key in _LOCALITY_KEYS if (value := self._as_str(address.get(key)))),
            None,
        )
        country_code = self._as_str(address.get("country_code"))
        # ISO3166-2-lvl4 is e.g. "US-CA"; its suffix is the postal abbreviation.
        subdivision = self._as_str(address.get("ISO3166-2-lvl4"))
        administrative_area = (
            subdivision.split("-", 1)[1]
            if subdivision and "-" in subdivision
            else self._as_str(address.get("state"))
        )
        return Placemark(
            country_code=country_code.upper() if country_code else None,
            country=self._as_str(address.get("country")),
            locality=locality,
            administrative_area=administrative_area,
            name=self._as_str(payload.get("name")) or self._as_str(payload.get("display_name")),
        )

    @staticmethod
    def _as_str(value: Any) -> str | None:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None
