"""Weather-text: background refresh pipeline for a one-glance weather summary."""

from .cache import EntryCache
from .models import TimelineEntry
from .scheduler import RefreshScheduler

__all__ = ["EntryCache", "RefreshScheduler", "TimelineEntry"]

__version__ = "0.1.0"
