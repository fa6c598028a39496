"""Application exception classes."""

from __future__ import annotations

from typing import Any


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class LocationError(Exception):
    """Raised when a device coordinate cannot be produced."""


class LocationRestrictedError(LocationError):
    """Raised when location access is restricted by device policy."""

    def __init__(self) -> None:
        super().__init__(
            "Location information is restricted, please check with your device administrator."
        )


class LocationDeniedError(LocationError):
    """Raised when the user has not granted location access."""

    def __init__(self) -> None:
        super().__init__("Location access was not granted, please check your device settings.")


class UnknownAuthorizationError(LocationError):
    """Raised for authorization states the provider does not recognize."""

    def __init__(self, state: Any) -> None:
        super().__init__(f"Unexpected location authorization status: {state}")
        self.state = state


class LocationBusyError(LocationError):
    """Raised when a location request is already outstanding."""


class PositioningError(LocationError):
    """Raised when the positioning subsystem fails to produce a fix."""


class WeatherServiceError(Exception):
    """Raised when the weather service request or normalization fails."""


class GeocodeError(Exception):
    """Raised when reverse geocoding fails."""


class PreferenceStoreError(Exception):
    """Raised when reading or writing persisted preferences fails."""


class JournalError(Exception):
    """Raised when writing to journal files fails."""
