"""Tests for refresh orchestration, caching, and failure masking."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

import pytest

from weather_text.cache import EntryCache
from weather_text.exceptions import LocationDeniedError, WeatherServiceError
from weather_text.location.models import Coordinate
from weather_text.models import TimelineEntry
from weather_text.scheduler import RefreshScheduler
from weather_text.weather.fixtures import bad_weather, good_weather
from weather_text.weather.models import WeatherSnapshot

T0 = datetime(2026, 2, 24, 12, 0, tzinfo=UTC)
COORD = Coordinate(latitude=37.3230, longitude=-122.0322)


class StubLocationProvider:
    def __init__(self, coordinate: Coordinate | None = COORD, error: Exception | None = None):
        self.coordinate = coordinate
        self.error = error
        self.calls = 0

    async def fetch(self) -> Coordinate:
        self.calls += 1
        if self.error is not None:
            raise self.error
        assert self.coordinate is not None
        return self.coordinate


class StubLoader:
    def __init__(self, *outcomes: WeatherSnapshot | Exception) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[tuple[Coordinate, datetime]] = []

    async def load(self, coordinate: Coordinate, now: datetime) -> WeatherSnapshot:
        self.calls.append((coordinate, now))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _make_scheduler(
    location: StubLocationProvider,
    loader: StubLoader,
    cache: EntryCache | None = None,
) -> RefreshScheduler:
    return RefreshScheduler(
        location,  # type: ignore[arg-type]
        loader,  # type: ignore[arg-type]
        logging.getLogger("test_refresh_scheduler"),
        cache=cache,
    )


def test_cache_round_trip_returns_same_entry() -> None:
    cache = EntryCache()
    assert cache.last_successful() is None

    entry = TimelineEntry.success(T0, good_weather(T0))
    cache.record(entry)

    assert cache.last_successful() == entry
    assert cache.last_successful() is entry


def test_cache_overwrites_single_slot() -> None:
    cache = EntryCache()
    first = TimelineEntry.success(T0, good_weather(T0))
    second = TimelineEntry.success(T0 + timedelta(hours=1), bad_weather(T0))
    cache.record(first)
    cache.record(second)
    assert cache.last_successful() is second


def test_timeline_entry_requires_exactly_one_outcome() -> None:
    with pytest.raises(ValueError):
        TimelineEntry(timestamp=T0)
    with pytest.raises(ValueError):
        TimelineEntry(timestamp=T0, snapshot=good_weather(T0), error=RuntimeError("x"))


@pytest.mark.asyncio
async def test_success_records_entry_and_uses_long_delay() -> None:
    snapshot = good_weather(T0)
    loader = StubLoader(snapshot)
    cache = EntryCache()
    scheduler = _make_scheduler(StubLocationProvider(), loader, cache)

    entry = await scheduler.produce_entry(T0)

    assert entry.timestamp == T0
    assert entry.is_success
    assert entry.snapshot == snapshot
    assert cache.last_successful() is entry
    assert loader.calls == [(COORD, T0)]
    assert scheduler.next_refresh_delay(entry) == timedelta(seconds=3600)
    assert not scheduler.is_masked(entry, T0)


@pytest.mark.asyncio
async def test_weather_failure_masks_with_recent_cached_entry() -> None:
    cached = TimelineEntry.success(T0 - timedelta(hours=1), good_weather(T0))
    cache = EntryCache()
    cache.record(cached)
    scheduler = _make_scheduler(
        StubLocationProvider(),
        StubLoader(WeatherServiceError("upstream 500")),
        cache,
    )

    entry = await scheduler.produce_entry(T0)

    assert entry is cached
    assert entry.timestamp == T0 - timedelta(hours=1)
    assert scheduler.next_refresh_delay(entry) == timedelta(seconds=3600)
    assert scheduler.is_masked(entry, T0)


@pytest.mark.asyncio
async def test_location_denied_without_cache_yields_error_entry() -> None:
    denied = LocationDeniedError()
    loader = StubLoader()
    cache = EntryCache()
    scheduler = _make_scheduler(StubLocationProvider(error=denied), loader, cache)

    entry = await scheduler.produce_entry(T0)

    assert entry.timestamp == T0
    assert not entry.is_success
    assert entry.error is denied
    assert loader.calls == []
    assert cache.last_successful() is None
    assert scheduler.next_refresh_delay(entry) == timedelta(seconds=300)


@pytest.mark.asyncio
async def test_cached_entry_exactly_at_staleness_window_still_masks() -> None:
    cached = TimelineEntry.success(T0 - timedelta(hours=24), good_weather(T0))
    cache = EntryCache()
    cache.record(cached)
    scheduler = _make_scheduler(
        StubLocationProvider(error=LocationDeniedError()), StubLoader(), cache
    )

    assert await scheduler.produce_entry(T0) is cached


@pytest.mark.asyncio
async def test_cached_entry_past_staleness_window_yields_error() -> None:
    cached = TimelineEntry.success(T0 - timedelta(hours=24, seconds=1), good_weather(T0))
    cache = EntryCache()
    cache.record(cached)
    error = WeatherServiceError("upstream 500")
    scheduler = _make_scheduler(StubLocationProvider(), StubLoader(error), cache)

    entry = await scheduler.produce_entry(T0)

    assert entry.timestamp == T0
    assert entry.error is error
    assert cache.last_successful() is cached
    assert scheduler.next_refresh_delay(entry) == timedelta(seconds=300)


@pytest.mark.asyncio
async def test_failure_after_success_serves_previous_entry_then_recovers() -> None:
    first = good_weather(T0)
    second = bad_weather(T0)
    loader = StubLoader(first, WeatherServiceError("timeout"), second)
    scheduler = _make_scheduler(StubLocationProvider(), loader)

    entry_1 = await scheduler.produce_entry(T0)
    entry_2 = await scheduler.produce_entry(T0 + timedelta(hours=1))
    entry_3 = await scheduler.produce_entry(T0 + timedelta(hours=2))

    assert entry_2 is entry_1
    assert entry_3.timestamp == T0 + timedelta(hours=2)
    assert entry_3.snapshot == second
    assert scheduler.cache.last_successful() is entry_3


def test_placeholder_is_static_fixture() -> None:
    scheduler = _make_scheduler(StubLocationProvider(), StubLoader())
    snapshot = scheduler.placeholder(T0)
    assert snapshot == good_weather(T0)
    assert snapshot.alert is None


def test_custom_delays_are_honored() -> None:
    scheduler = RefreshScheduler(
        StubLocationProvider(),  # type: ignore[arg-type]
        StubLoader(),  # type: ignore[arg-type]
        logging.getLogger("test_refresh_scheduler"),
        success_delay=timedelta(minutes=30),
        failure_delay=timedelta(minutes=1),
    )
    ok = TimelineEntry.success(T0, good_weather(T0))
    failed = TimelineEntry.failure(T0, RuntimeError("boom"))
    assert scheduler.next_refresh_delay(ok) == timedelta(minutes=30)
    assert scheduler.next_refresh_delay(failed) == timedelta(minutes=1)


@pytest.mark.asyncio
async def test_unexpected_loader_error_masks_with_recent_cached_entry() -> None:
    cached = TimelineEntry.success(T0 - timedelta(hours=1), good_weather(T0))
    cache = EntryCache()
    cache.record(cached)
    scheduler = _make_scheduler(
        StubLocationProvider(),
        StubLoader(TimeoutError("geocoder timed out")),
        cache,
    )

    entry = await scheduler.produce_entry(T0)

    assert entry is cached
    assert scheduler.is_masked(entry, T0)


@pytest.mark.asyncio
async def test_unexpected_location_error_without_cache_yields_error_entry() -> None:
    failure = RuntimeError("positioning daemon crashed")
    scheduler = _make_scheduler(StubLocationProvider(error=failure), StubLoader())

    entry = await scheduler.produce_entry(T0)

    assert not entry.is_success
    assert entry.error is failure
    assert entry.timestamp == T0
    assert scheduler.next_refresh_delay(entry) == timedelta(seconds=300)


@pytest.mark.asyncio
async def test_naive_now_is_treated_as_utc() -> None:
    cached = TimelineEntry.success(T0 - timedelta(hours=2), good_weather(T0))
    cache = EntryCache()
    cache.record(cached)
    scheduler = _make_scheduler(
        StubLocationProvider(),
        StubLoader(WeatherServiceError("upstream 500")),
        cache,
    )

    entry = await scheduler.produce_entry(T0.replace(tzinfo=None))

    assert entry is cached
    assert scheduler.is_masked(entry, T0.replace(tzinfo=None))


@pytest.mark.parametrize("hour", [0, 6, 7, 12, 20, 23])
def test_placeholder_sun_event_is_always_in_the_future(hour: int) -> None:
    now = T0.replace(hour=hour, minute=30)
    snapshot = _make_scheduler(StubLocationProvider(), StubLoader()).placeholder(now)

    assert snapshot.sun_event is not None
    assert snapshot.sun_event.timestamp > now
    assert snapshot.sun_event.timestamp - now <= timedelta(days=1)
    assert snapshot.sun_event.timestamp.hour == 7
