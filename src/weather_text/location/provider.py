"""Single-shot location acquisition driven by permission state."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from ..exceptions import (
    LocationBusyError,
    LocationDeniedError,
    LocationError,
    LocationRestrictedError,
    PositioningError,
    UnknownAuthorizationError,
)
from .base import PositioningSubsystem
from .models import AuthorizationState, Coordinate


class LocationProvider:
    """Resolves one coordinate per `fetch` call.

    The provider registers itself as the subsystem delegate. Permission and
    fix notifications resolve the pending future if a fetch is outstanding
    and are discarded otherwise.
    """

    def __init__(self, subsystem: PositioningSubsystem, logger: logging.Logger) -> None:
        self.subsystem = subsystem
        self.logger = logger
        self._pending: asyncio.Future[Coordinate] | None = None
        subsystem.set_delegate(self)

    @property
    def is_pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    async def fetch(self) -> Coordinate:
        """Return the last known coordinate or wait for a fresh fix."""
        if self.is_pending:
            raise LocationBusyError("A location request is already outstanding.")

        cached = self.subsystem.last_location
        if cached is not None:
            self.logger.debug("Using last known location")
            return cached

        future: asyncio.Future[Coordinate] = asyncio.get_running_loop().create_future()
        self._pending = future
        try:
            self.authorization_changed(self.subsystem.authorization_state)
            return await future
        finally:
            if self._pending is future:
                self._pending = None

    def authorization_changed(self, state: AuthorizationState | Any) -> None:
        if not self.is_pending:
            return
        if state in (
            AuthorizationState.AUTHORIZED_WHEN_IN_USE,
            AuthorizationState.AUTHORIZED_ALWAYS,
        ):
            self.logger.debug("Location authorized; requesting fix")
            self.subsystem.request_location()
        elif state == AuthorizationState.RESTRICTED:
            self._fail(LocationRestrictedError())
        elif state == AuthorizationState.DENIED:
            self._fail(LocationDeniedError())
        elif state == AuthorizationState.NOT_DETERMINED:
            self.logger.info("Location authorization not determined; prompting")
            self.subsystem.request_authorization()
        else:
            self._fail(UnknownAuthorizationError(state))

    def locations_updated(self, coordinates: Sequence[Coordinate]) -> None:
        if self._pending is None or self._pending.done() or not coordinates:
            return
        self._pending.set_result(coordinates[-1])

    def location_failed(self, error: Exception) -> None:
        if not self.is_pending:
            return
        if isinstance(error, LocationError):
            self._fail(error)
            return
        wrapped = PositioningError(f"Positioning failed: {error}")
        wrapped.__cause__ = error
        self._fail(wrapped)

    def _fail(self, error: LocationError) -> None:
        if self._pending is None or self._pending.done():
            return
        self.logger.warning("Location request failed: %s", error)
        self._pending.set_exception(error)
