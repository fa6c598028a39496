"""Tests for snapshot assembly: sun events, alert selection, place names."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

import pytest

from weather_text.exceptions import GeocodeError, WeatherServiceError
from weather_text.location.models import Coordinate
from weather_text.weather.base import Geocoder, WeatherService
from weather_text.weather.loader import (
    WeatherLoader,
    format_place_name,
    select_alert,
    select_sun_event,
)
from weather_text.weather.models import (
    AlertSeverity,
    CurrentConditions,
    DailyForecast,
    Placemark,
    ServiceAlert,
    SunEventKind,
    WeatherBundle,
)

NOW = datetime(2026, 2, 24, 12, 0, tzinfo=UTC)
COORD = Coordinate(latitude=37.3230, longitude=-122.0322)


def _day(
    offset_days: int, sunrise_hour: int | None = 7, sunset_hour: int | None = 18
) -> DailyForecast:
    date = NOW.replace(hour=0) + timedelta(days=offset_days)
    return DailyForecast(
        date=date,
        high_temperature=70.0 + offset_days,
        low_temperature=50.0 + offset_days,
        sunrise=date.replace(hour=sunrise_hour) if sunrise_hour is not None else None,
        sunset=date.replace(hour=sunset_hour) if sunset_hour is not None else None,
    )


def _bundle(**overrides: object) -> WeatherBundle:
    values: dict[str, object] = {
        "current": CurrentConditions(
            temperature=62.9, symbol_id="cloud.sun", condition_text="Partly Cloudy"
        ),
        "daily": [_day(0), _day(1)],
        "alerts": [],
    }
    values.update(overrides)
    return WeatherBundle(**values)


class FakeWeatherService(WeatherService):
    def __init__(self, bundle: WeatherBundle | None = None, error: Exception | None = None) -> None:
        self.bundle = bundle
        self.error = error
        self.calls: list[Coordinate] = []

    async def fetch(self, coordinate: Coordinate) -> WeatherBundle:
        self.calls.append(coordinate)
        if self.error is not None:
            raise self.error
        assert self.bundle is not None
        return self.bundle

    async def aclose(self) -> None:
        return None


class FakeGeocoder(Geocoder):
    def __init__(
        self, placemarks: list[Placemark] | None = None, error: Exception | None = None
    ) -> None:
        self.placemarks = placemarks or []
        self.error = error

    async def reverse(self, coordinate: Coordinate) -> list[Placemark]:
        if self.error is not None:
            raise self.error
        return self.placemarks

    async def aclose(self) -> None:
        return None


def _make_loader(service: WeatherService, geocoder: Geocoder | None = None) -> WeatherLoader:
    return WeatherLoader(service, geocoder, logging.getLogger("test_weather_loader"))


# ---------------------------------------------------------------------------
# Sun events
# ---------------------------------------------------------------------------


def test_sun_event_picks_todays_sunset_after_sunrise_passed() -> None:
    event = select_sun_event([_day(0), _day(1)], NOW)
    assert event is not None
    assert event.kind == SunEventKind.SUNSET
    assert event.timestamp == NOW.replace(hour=18)


def test_sun_event_picks_tomorrows_sunrise_after_sunset_passed() -> None:
    event = select_sun_event([_day(0), _day(1)], NOW.replace(hour=20))
    assert event is not None
    assert event.kind == SunEventKind.SUNRISE
    assert event.timestamp == NOW.replace(hour=7) + timedelta(days=1)


def test_sun_event_requires_strictly_later_timestamp() -> None:
    event = select_sun_event([_day(0)], NOW.replace(hour=18))
    assert event is None


def test_sun_event_skips_days_without_sun_times() -> None:
    polar_night = _day(0, sunrise_hour=None, sunset_hour=None)
    event = select_sun_event([polar_night, _day(1)], NOW)
    assert event is not None
    assert event.kind == SunEventKind.SUNRISE
    assert event.timestamp > NOW


def test_sun_event_none_when_horizon_exhausted() -> None:
    assert select_sun_event([_day(0)], NOW + timedelta(days=2)) is None
    assert select_sun_event([], NOW) is None


# ---------------------------------------------------------------------------
# Alerts
# ---------------------------------------------------------------------------


def test_alert_minor_and_moderate_are_ignored() -> None:
    alerts = [
        ServiceAlert(severity="Minor", summary="Frost Advisory"),
        ServiceAlert(severity="Moderate", summary="Wind Advisory"),
    ]
    assert select_alert(alerts) is None


def test_alert_last_qualifying_wins_over_higher_severity() -> None:
    alerts = [
        ServiceAlert(severity="Extreme", summary="Tornado Warning", details_key="a"),
        ServiceAlert(severity="Severe", summary="Flood Warning", details_key="b"),
        ServiceAlert(severity="Minor", summary="Frost Advisory", details_key="c"),
    ]
    alert = select_alert(alerts)
    assert alert is not None
    assert alert.severity == AlertSeverity.SEVERE
    assert alert.summary == "Flood Warning"
    assert alert.details_key == "b"


def test_alert_severe_then_extreme_selects_extreme() -> None:
    alerts = [
        ServiceAlert(severity="Severe", summary="Flood Warning"),
        ServiceAlert(severity="Extreme", summary="Tornado Warning"),
    ]
    alert = select_alert(alerts)
    assert alert is not None
    assert alert.severity == AlertSeverity.EXTREME


def test_alert_suppressed_summary_excluded_regardless_of_severity() -> None:
    alerts = [
        ServiceAlert(severity="Severe", summary="Flood Warning"),
        ServiceAlert(severity="Extreme", summary="Test Message"),
    ]
    alert = select_alert(alerts, suppressed_summary="Test Message")
    assert alert is not None
    assert alert.summary == "Flood Warning"


@pytest.mark.parametrize("raw", ["Unknown", "Catastrophic", ""])
def test_alert_unrecognized_severity_maps_to_unknown(raw: str) -> None:
    alert = select_alert([ServiceAlert(severity=raw, summary="Special Statement")])
    assert alert is not None
    assert alert.severity == AlertSeverity.UNKNOWN


# ---------------------------------------------------------------------------
# Place names
# ---------------------------------------------------------------------------


def test_place_name_us_uses_city_and_state() -> None:
    placemark = Placemark(
        country_code="US",
        country="United States",
        locality="Cupertino",
        administrative_area="CA",
        name="Cupertino",
    )
    assert format_place_name(placemark) == "Cupertino, CA"


def test_place_name_outside_us_uses_city_and_country() -> None:
    placemark = Placemark(
        country_code="NZ",
        country="New Zealand",
        locality="Wellington",
        administrative_area="Wellington Region",
    )
    assert format_place_name(placemark) == "Wellington, New Zealand"


def test_place_name_us_without_state_falls_back_to_country() -> None:
    placemark = Placemark(country_code="US", country="United States", locality="Springfield")
    assert format_place_name(placemark) == "Springfield, United States"


def test_place_name_falls_back_to_generic_name() -> None:
    placemark = Placemark(country_code="US", name="Pacific Ocean")
    assert format_place_name(placemark) == "Pacific Ocean"


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_load_assembles_snapshot() -> None:
    bundle = _bundle(
        alerts=[ServiceAlert(severity="Severe", summary="Heat Advisory", details_key="heat-1")]
    )
    geocoder = FakeGeocoder(
        [Placemark(country_code="US", locality="Cupertino", administrative_area="CA")]
    )
    loader = _make_loader(FakeWeatherService(bundle), geocoder)

    snapshot = await loader.load(COORD, NOW)

    assert snapshot.coordinate == COORD
    assert snapshot.place_name == "Cupertino, CA"
    assert snapshot.current_temperature == 62.9
    assert snapshot.current_symbol_id == "cloud.sun"
    assert snapshot.current_condition_text == "Partly Cloudy"
    assert snapshot.high_temperature == 70.0
    assert snapshot.low_temperature == 50.0
    assert snapshot.sun_event is not None
    assert snapshot.sun_event.kind == SunEventKind.SUNSET
    assert snapshot.alert is not None
    assert snapshot.alert.details_key == "heat-1"


@pytest.mark.asyncio
async def test_load_geocoder_failure_leaves_place_name_absent() -> None:
    loader = _make_loader(
        FakeWeatherService(_bundle()),
        FakeGeocoder(error=GeocodeError("lookup timed out")),
    )

    snapshot = await loader.load(COORD, NOW)

    assert snapshot.place_name is None
    assert snapshot.current_temperature == 62.9
    assert snapshot.high_temperature == 70.0
    assert snapshot.sun_event is not None


@pytest.mark.asyncio
async def test_load_without_placemarks_leaves_place_name_absent() -> None:
    loader = _make_loader(FakeWeatherService(_bundle()), FakeGeocoder([]))
    snapshot = await loader.load(COORD, NOW)
    assert snapshot.place_name is None


@pytest.mark.asyncio
async def test_load_weather_service_failure_propagates() -> None:
    loader = _make_loader(
        FakeWeatherService(error=WeatherServiceError("503 from upstream")),
        FakeGeocoder([Placemark(name="Somewhere")]),
    )
    with pytest.raises(WeatherServiceError, match="503"):
        await loader.load(COORD, NOW)


@pytest.mark.asyncio
async def test_load_empty_daily_forecast_fails() -> None:
    loader = _make_loader(FakeWeatherService(_bundle(daily=[])))
    with pytest.raises(WeatherServiceError, match="no daily forecast"):
        await loader.load(COORD, NOW)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [TimeoutError("geocoder timed out"), OSError("network unreachable"), KeyError("address")],
)
async def test_load_unexpected_geocoder_error_leaves_place_name_absent(error: Exception) -> None:
    loader = _make_loader(FakeWeatherService(_bundle()), FakeGeocoder(error=error))

    snapshot = await loader.load(COORD, NOW)

    assert snapshot.place_name is None
    assert snapshot.current_temperature == 62.9


@pytest.mark.asyncio
async def test_load_accepts_naive_now_as_utc() -> None:
    loader = _make_loader(FakeWeatherService(_bundle()))

    snapshot = await loader.load(COORD, NOW.replace(tzinfo=None))

    assert snapshot.sun_event is not None
    assert snapshot.sun_event.kind == SunEventKind.SUNSET
