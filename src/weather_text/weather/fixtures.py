"""Static preview snapshots for instant display before real data arrives."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from ..location.models import Coordinate
from .models import AlertSeverity, SunEvent, SunEventKind, WeatherAlert, WeatherSnapshot

PREVIEW_COORDINATE = Coordinate(latitude=37.3230, longitude=-122.0322)
PREVIEW_PLACE_NAME = "Cupertino, CA"


def _at_hour(now: datetime | None, hour: int) -> datetime:
    """Next occurrence of `hour`:00 strictly after `now`."""
    base = now or datetime.now(UTC)
    candidate = base.replace(hour=hour, minute=0, second=0, microsecond=0)
    if candidate <= base:
        candidate += timedelta(days=1)
    return candidate


def good_weather(now: datetime | None = None) -> WeatherSnapshot:
    return WeatherSnapshot(
        coordinate=PREVIEW_COORDINATE,
        place_name=PREVIEW_PLACE_NAME,
        current_temperature=62.9,
        current_symbol_id="cloud.sun",
        current_condition_text="Partly Cloudy",
        high_temperature=78.6,
        low_temperature=48.2,
        sun_event=SunEvent(kind=SunEventKind.SUNRISE, timestamp=_at_hour(now, 7)),
    )


def medium_weather(now: datetime | None = None) -> WeatherSnapshot:
    return WeatherSnapshot(
        coordinate=PREVIEW_COORDINATE,
        place_name=PREVIEW_PLACE_NAME,
        current_temperature=52.9,
        current_symbol_id="cloud.sun",
        current_condition_text="Mostly Cloudy",
        high_temperature=55.6,
        low_temperature=41.2,
        sun_event=SunEvent(kind=SunEventKind.SUNRISE, timestamp=_at_hour(now, 7)),
    )


def bad_weather(now: datetime | None = None) -> WeatherSnapshot:
    return WeatherSnapshot(
        coordinate=PREVIEW_COORDINATE,
        place_name=PREVIEW_PLACE_NAME,
        current_temperature=20.7,
        current_symbol_id="wind.snow",
        current_condition_text="Blizzard",
        high_temperature=30.7,
        low_temperature=12.2,
        sun_event=SunEvent(kind=SunEventKind.SUNSET, timestamp=_at_hour(now, 17)),
        alert=WeatherAlert(
            severity=AlertSeverity.EXTREME,
            summary="Thunderbolt and lightning, very very frightening",
            details_key="preview-extreme",
        ),
    )


def placeholder(now: datetime | None = None) -> WeatherSnapshot:
    """Snapshot shown before the first refresh completes."""
    return good_weather(now)
