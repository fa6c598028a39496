"""Positioning subsystem contract consumed by the location provider."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Protocol

from .models import AuthorizationState, Coordinate


class PositioningDelegate(Protocol):
    """Receiver for asynchronous positioning subsystem notifications."""

    def authorization_changed(self, state: AuthorizationState | Any) -> None: ...

    def locations_updated(self, coordinates: Sequence[Coordinate]) -> None: ...

    def location_failed(self, error: Exception) -> None: ...


class PositioningSubsystem(ABC):
    """Base contract for the platform positioning hardware and permission prompt.

    Implementations report results by calling back into the registered
    delegate; none of the request methods block.
    """

    @property
    @abstractmethod
    def authorization_state(self) -> AuthorizationState | Any:
        """Current permission state; may be a value outside AuthorizationState."""

    @property
    @abstractmethod
    def last_location(self) -> Coordinate | None:
        """Most recent fix already held by the subsystem, if any."""

    @abstractmethod
    def set_delegate(self, delegate: PositioningDelegate) -> None:
        """Register the receiver for notifications."""

    @abstractmethod
    def request_location(self) -> None:
        """Ask the hardware for one fresh fix."""

    @abstractmethod
    def request_authorization(self) -> None:
        """Show the permission prompt."""
