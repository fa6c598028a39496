"""NWS (api.weather.gov) active-alerts client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import Settings
from ..exceptions import WeatherServiceError
from ..location.models import Coordinate
from ..redaction import sanitize_text
from .models import ServiceAlert


class NWSAlertsClient:
    """Fetches active alerts for a point from api.weather.gov."""

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._base_url = str(settings.alerts_api_base_url)
        self._client = client or httpx.AsyncClient(
            timeout=settings.weather_timeout_seconds,
            headers={
                "Accept": "application/geo+json",
                "User-Agent": settings.http_user_agent,
            },
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_alerts(self, coordinate: Coordinate) -> list[ServiceAlert]:
        """Return active alerts in the order the service lists them."""
        params = {"point": f"{coordinate.latitude:.4f},{coordinate.longitude:.4f}"}
        payload = await self._request_json(self._base_url, params=params, context="alerts fetch")

        features = payload.get("features")
        if not isinstance(features, list):
            raise WeatherServiceError("NWS alerts payload missing 'features' list.")

        alerts: list[ServiceAlert] = []
        for feature in features:
            if not isinstance(feature, dict):
                continue
            alert = self._normalize_alert(feature)
            if alert is not None:
                alerts.append(alert)
        return alerts

    async def _request_json(
        self, url: str, params: dict[str, Any], context: str
    ) -> dict[str, Any]:
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise WeatherServiceError(
                f"NWS {context} failed with status {status}: "
                f"{sanitize_text(exc.response.text[:300])}"
            ) from exc
        except httpx.HTTPError as exc:
            raise WeatherServiceError(
                f"NWS {context} request failed: {sanitize_text(str(exc))}"
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise WeatherServiceError(f"NWS {context} returned non-JSON response.") from exc

        if not isinstance(payload, dict):
            raise WeatherServiceError(
                f"NWS {context} returned unexpected payload type {type(payload).__name__}."
            )
        return payload

    def _normalize_alert(self, feature: dict[str, Any]) -> ServiceAlert | None:
        properties = feature.get("properties")
        if not isinstance(properties, dict):
            return None
        summary = self._as_str(properties.get("event")) or self._as_str(
            properties.get("headline")
        )
        if summary is None:
            self.logger.debug("Skipping NWS alert without event or headline")
            return None
        return ServiceAlert(
            severity=self._as_str(properties.get("severity")) or "Unknown",
            summary=summary,
            details_key=self._as_str(properties.get("id")) or self._as_str(feature.get("id")),
        )

    @staticmethod
    def _as_str(value: Any) -> str | None:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None
