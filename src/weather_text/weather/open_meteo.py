"""Open-Meteo forecast service, combined with NWS alerts into one logical call."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from ..config import Settings
from ..exceptions import WeatherServiceError
from ..location.models import Coordinate
from ..redaction import sanitize_text
from . import conditions
from .base import WeatherService
from .models import CurrentConditions, DailyForecast, ServiceAlert, WeatherBundle
from .nws import NWSAlertsClient

CURRENT_FIELDS = "temperature_2m,weather_code,is_day"
DAILY_FIELDS = "temperature_2m_max,temperature_2m_min,sunrise,sunset"


class OpenMeteoWeatherService(WeatherService):
    """Fetches current conditions and daily forecast from Open-Meteo.

    Alerts come from the optional NWS client. Either request failing fails
    the whole call; there are no retries.
    """

    provider_name = "open-meteo"

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        alerts_client: NWSAlertsClient | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self.alerts_client = alerts_client
        self._base_url = str(settings.weather_api_base_url)
        self._client = client or httpx.AsyncClient(
            timeout=settings.weather_timeout_seconds,
            headers={"User-Agent": settings.http_user_agent},
        )

    async def __aenter__(self) -> OpenMeteoWeatherService:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()
        if self.alerts_client is not None:
            await self.alerts_client.aclose()

    async def fetch(self, coordinate: Coordinate) -> WeatherBundle:
        params = {
            "latitude": f"{coordinate.latitude:.4f}",
            "longitude": f"{coordinate.longitude:.4f}",
            "current": CURRENT_FIELDS,
            "daily": DAILY_FIELDS,
            "temperature_unit": self.settings.temperature_unit,
            "forecast_days": str(self.settings.forecast_days),
            "timezone": "auto",
            "timeformat": "unixtime",
        }
        payload = await self._request_json(self._base_url, params=params, context="forecast fetch")

        alerts: list[ServiceAlert] = []
        if self.alerts_client is not None:
            alerts = await self.alerts_client.fetch_alerts(coordinate)

        return WeatherBundle(
            temperature_unit=self.settings.temperature_unit,
            current=self._normalize_current(payload),
            daily=self._normalize_daily(payload),
            alerts=alerts,
        )

    async def _request_json(
        self, url: str, params: dict[str, str], context: str
    ) -> dict[str, Any]:
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise WeatherServiceError(
                f"Open-Meteo {context} failed with status {status}: "
                f"{sanitize_text(exc.response.text[:300])}"
            ) from exc
        except httpx.HTTPError as exc:
            raise WeatherServiceError(
                f"Open-Meteo {context} request failed: {sanitize_text(str(exc))}"
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise WeatherServiceError(f"Open-Meteo {context} returned non-JSON response.") from exc

        if not isinstance(payload, dict):
            raise WeatherServiceError(
                f"Open-Meteo {context} returned unexpected payload type "
                f"{type(payload).__name__}."
            )
        if payload.get("error"):
            raise WeatherServiceError(
                f"Open-Meteo {context} rejected request: "
                f"{sanitize_text(str(payload.get('reason', 'unknown reason')))}"
            )
        return payload

    def _normalize_current(self, payload: dict[str, Any]) -> CurrentConditions:
        current = payload.get("current")
        if not isinstance(current, dict):
            raise WeatherServiceError("Open-Meteo payload missing 'current' object.")

        temperature = self._as_float(current.get("temperature_2m"))
        if temperature is None:
            raise WeatherServiceError("Open-Meteo payload missing 'current.temperature_2m'.")

        code = self._as_int(current.get("weather_code"))
        is_day = current.get("is_day") != 0
        symbol_id, condition_text = conditions.describe(code, is_day=is_day)
        return CurrentConditions(
            temperature=temperature,
            symbol_id=symbol_id,
            condition_text=condition_text,
        )

    def _normalize_daily(self, payload: dict[str, Any]) -> list[DailyForecast]:
        daily = payload.get("daily")
        if not isinstance(daily, dict):
            raise WeatherServiceError("Open-Meteo payload missing 'daily' object.")

        dates = daily.get("time")
        highs = daily.get("temperature_2m_max")
        lows = daily.get("temperature_2m_min")
        if not isinstance(dates, list) or not isinstance(highs, list) or not isinstance(lows, list):
            raise WeatherServiceError("Open-Meteo payload missing daily time/temperature lists.")
        sunrises = daily.get("sunrise") if isinstance(daily.get("sunrise"), list) else []
        sunsets = daily.get("sunset") if isinstance(daily.get("sunset"), list) else []

        days: list[DailyForecast] = []
        for index, raw_date in enumerate(dates):
            date = self._parse_timestamp(raw_date)
            high = self._as_float(highs[index]) if index < len(highs) else None
            low = self._as_float(lows[index]) if index < len(lows) else None
            if date is None or high is None or low is None:
                self.logger.debug("Skipping incomplete Open-Meteo daily entry %d", index)
                continue
            days.append(
                DailyForecast(
                    date=date,
                    high_temperature=high,
                    low_temperature=low,
                    sunrise=self._parse_timestamp(sunrises[index])
                    if index < len(sunrises)
                    else None,
                    sunset=self._parse_timestamp(sunsets[index])
                    if index < len(sunsets)
                    else None,
                )
            )
        return days

    @staticmethod
    def _as_int(value: Any) -> int | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            try:
                return int(value)
            except (OverflowError, ValueError):
                return None
        return None

    @staticmethod
    def _as_float(value: Any) -> float | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return float(value)
        return None

    @staticmethod
    def _parse_timestamp(value: Any) -> datetime | None:
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, (int, float)):
            try:
                return datetime.fromtimestamp(value, tz=UTC)
            except (OverflowError, ValueError, OSError):
                return None
        if isinstance(value, str):
            candidate = value.strip()
            if not candidate:
                return None
            if candidate.endswith("Z"):
                candidate = candidate[:-1] + "+00:00"
            try:
                parsed = datetime.fromisoformat(candidate)
            except ValueError:
                return None
            return parsed.astimezone(UTC) if parsed.tzinfo else parsed.replace(tzinfo=UTC)
        return None
