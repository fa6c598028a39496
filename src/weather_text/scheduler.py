"""Refresh orchestration: location, load, cache, and masking of failures."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from .cache import EntryCache
from .location.provider import LocationProvider
from .models import TimelineEntry
from .weather.fixtures import placeholder as placeholder_snapshot
from .weather.loader import WeatherLoader, ensure_utc
from .weather.models import WeatherSnapshot

SUCCESS_REFRESH_DELAY = timedelta(seconds=3600)
FAILURE_REFRESH_DELAY = timedelta(seconds=300)
STALENESS_WINDOW = timedelta(hours=24)


class RefreshScheduler:
    """Produces one timeline entry per host invocation.

    Overlapping `produce_entry` calls on one instance share the cache without
    synchronization; the host is expected to invoke them one at a time.
    """

    def __init__(
        self,
        location_provider: LocationProvider,
        loader: WeatherLoader,
        logger: logging.Logger,
        cache: EntryCache | None = None,
        success_delay: timedelta = SUCCESS_REFRESH_DELAY,
        failure_delay: timedelta = FAILURE_REFRESH_DELAY,
        staleness_window: timedelta = STALENESS_WINDOW,
    ) -> None:
        self.location_provider = location_provider
        self.loader = loader
        self.logger = logger
        self.cache = cache if cache is not None else EntryCache()
        self.success_delay = success_delay
        self.failure_delay = failure_delay
        self.staleness_window = staleness_window

    def placeholder(self, now: datetime | None = None) -> WeatherSnapshot:
        return placeholder_snapshot(now)

    async def produce_entry(self, now: datetime) -> TimelineEntry:
        """Run one refresh; every failure becomes the cached entry or an error entry."""
        now = ensure_utc(now)
        try:
            coordinate = await self.location_provider.fetch()
            snapshot = await self.loader.load(coordinate, now)
        except Exception as exc:
            self.logger.warning("Refresh failed: %s: %s", type(exc).__name__, exc)
            return self._fallback_entry(now, exc)

        entry = TimelineEntry.success(now, snapshot)
        self.cache.record(entry)
        self.logger.info("Refresh succeeded at %s", now.isoformat())
        return entry

    def next_refresh_delay(self, entry: TimelineEntry) -> timedelta:
        return self.success_delay if entry.is_success else self.failure_delay

    def is_masked(self, entry: TimelineEntry, now: datetime) -> bool:
        """True when `entry` is a cached success served in place of a failure at `now`."""
        now = ensure_utc(now)
        return entry.is_success and entry.timestamp < now

    def _fallback_entry(self, now: datetime, error: Exception) -> TimelineEntry:
        cached = self.cache.last_successful()
        if cached is not None and now - cached.timestamp <= self.staleness_window:
            self.logger.info(
                "Serving cached entry from %s in place of failure",
                cached.timestamp.isoformat(),
            )
            return cached
        return TimelineEntry.failure(now, error)
