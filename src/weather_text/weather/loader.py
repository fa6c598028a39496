"""Builds a WeatherSnapshot from the weather service plus best-effort enrichment."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime

from ..exceptions import WeatherServiceError
from ..location.models import Coordinate
from .base import Geocoder, WeatherService
from .models import (
    AlertSeverity,
    DailyForecast,
    Placemark,
    ServiceAlert,
    SunEvent,
    SunEventKind,
    WeatherAlert,
    WeatherSnapshot,
)

DEFAULT_SUPPRESSED_ALERT_SUMMARY = "Test Message"

_IGNORED_SEVERITIES = {"minor", "moderate"}
_SEVERITY_MAP = {
    "severe": AlertSeverity.SEVERE,
    "extreme": AlertSeverity.EXTREME,
}


def ensure_utc(value: datetime) -> datetime:
    """Treat a naive `value` as UTC so it compares against service timestamps."""
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def select_sun_event(daily: Iterable[DailyForecast], now: datetime) -> SunEvent | None:
    """Return the first sunrise or sunset strictly after `now`.

    Days are visited in order and sunrise is checked before sunset.
    """
    for day in daily:
        if day.sunrise is not None and day.sunrise > now:
            return SunEvent(kind=SunEventKind.SUNRISE, timestamp=day.sunrise)
        if day.sunset is not None and day.sunset > now:
            return SunEvent(kind=SunEventKind.SUNSET, timestamp=day.sunset)
    return None


def map_severity(raw: str) -> AlertSeverity:
    return _SEVERITY_MAP.get(raw.strip().lower(), AlertSeverity.UNKNOWN)


def select_alert(
    alerts: Iterable[ServiceAlert],
    suppressed_summary: str = DEFAULT_SUPPRESSED_ALERT_SUMMARY,
) -> WeatherAlert | None:
    """Pick the alert to display.

    Every qualifying alert overwrites the previous pick, so the last one in
    input order wins regardless of relative severity.
    """
    selected: WeatherAlert | None = None
    for alert in alerts:
        if alert.summary == suppressed_summary:
            continue
        if alert.severity.strip().lower() in _IGNORED_SEVERITIES:
            continue
        selected = WeatherAlert(
            severity=map_severity(alert.severity),
            summary=alert.summary,
            details_key=alert.details_key,
        )
    return selected


def format_place_name(placemark: Placemark) -> str | None:
    """Format "City, ST" in the US, "City, Country" elsewhere, else the raw name."""
    if (
        placemark.country_code == "US"
        and placemark.locality
        and placemark.administrative_area
    ):
        return f"{placemark.locality}, {placemark.administrative_area}"
    if placemark.locality and placemark.country:
        return f"{placemark.locality}, {placemark.country}"
    return placemark.name


class WeatherLoader:
    """Loads one snapshot per call; only the weather service call is mandatory."""

    def __init__(
        self,
        weather_service: WeatherService,
        geocoder: Geocoder | None,
        logger: logging.Logger,
        suppressed_alert_summary: str = DEFAULT_SUPPRESSED_ALERT_SUMMARY,
    ) -> None:
        self.weather_service = weather_service
        self.geocoder = geocoder
        self.logger = logger
        self.suppressed_alert_summary = suppressed_alert_summary

    async def load(self, coordinate: Coordinate, now: datetime) -> WeatherSnapshot:
        now = ensure_utc(now)
        bundle = await self.weather_service.fetch(coordinate)
        if not bundle.daily:
            raise WeatherServiceError("Weather service returned no daily forecast.")
        today = bundle.daily[0]

        sun_event = select_sun_event(bundle.daily, now)
        alert = select_alert(bundle.alerts, self.suppressed_alert_summary)
        place_name = await self._resolve_place_name(coordinate)

        return WeatherSnapshot(
            coordinate=coordinate,
            place_name=place_name,
            temperature_unit=bundle.temperature_unit,
            current_temperature=bundle.current.temperature,
            current_symbol_id=bundle.current.symbol_id,
            current_condition_text=bundle.current.condition_text,
            high_temperature=today.high_temperature,
            low_temperature=today.low_temperature,
            sun_event=sun_event,
            alert=alert,
        )

    async def _resolve_place_name(self, coordinate: Coordinate) -> str | None:
        if self.geocoder is None:
            return None
        try:
            placemarks = await self.geocoder.reverse(coordinate)
            if not placemarks:
                return None
            return format_place_name(placemarks[0])
        except Exception as exc:
            # Place name is optional enrichment.
            self.logger.warning("Reverse geocoding failed: %s: %s", type(exc).__name__, exc)
            return None
