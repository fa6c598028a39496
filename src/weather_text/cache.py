"""Single-slot in-memory cache of the last successful timeline entry."""

from __future__ import annotations

from .models import TimelineEntry


class EntryCache:
    """Remembers the most recent successful entry for the process lifetime."""

    def __init__(self) -> None:
        self._entry: TimelineEntry | None = None

    def record(self, entry: TimelineEntry) -> None:
        self._entry = entry

    def last_successful(self) -> TimelineEntry | None:
        return self._entry
