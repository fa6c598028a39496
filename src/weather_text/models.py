"""Timeline entry served to the display host."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, model_validator

from .weather.models import WeatherSnapshot


class TimelineEntry(BaseModel):
    """A timestamped outcome: exactly one of `snapshot` or `error` is set."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    timestamp: datetime
    snapshot: WeatherSnapshot | None = None
    error: Exception | None = None

    @model_validator(mode="after")
    def validate_outcome(self) -> TimelineEntry:
        if (self.snapshot is None) == (self.error is None):
            raise ValueError("TimelineEntry requires exactly one of snapshot or error.")
        return self

    @classmethod
    def success(cls, timestamp: datetime, snapshot: WeatherSnapshot) -> TimelineEntry:
        return cls(timestamp=timestamp, snapshot=snapshot)

    @classmethod
    def failure(cls, timestamp: datetime, error: Exception) -> TimelineEntry:
        return cls(timestamp=timestamp, error=error)

    @property
    def is_success(self) -> bool:
        return self.snapshot is not None
