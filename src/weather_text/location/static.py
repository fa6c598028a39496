"""Positioning subsystem backed by a configured coordinate."""

from __future__ import annotations

import asyncio

from ..exceptions import PositioningError
from .base import PositioningDelegate, PositioningSubsystem
from .models import AuthorizationState, Coordinate


class StaticPositioning(PositioningSubsystem):
    """Reports a fixed coordinate, for hosts without positioning hardware.

    Notifications are delivered on the running event loop, never inline, so
    callers observe the same suspension points as with real hardware.
    """

    def __init__(
        self,
        coordinate: Coordinate | None,
        authorization: AuthorizationState = AuthorizationState.AUTHORIZED_ALWAYS,
        grant_on_prompt: bool = True,
    ) -> None:
        self._coordinate = coordinate
        self._authorization = authorization
        self._grant_on_prompt = grant_on_prompt
        self._delegate: PositioningDelegate | None = None
        self._fix_delivered = False

    @property
    def authorization_state(self) -> AuthorizationState:
        return self._authorization

    @property
    def last_location(self) -> Coordinate | None:
        if not self._authorization.is_authorized or not self._fix_delivered:
            return None
        return self._coordinate

    def set_delegate(self, delegate: PositioningDelegate) -> None:
        self._delegate = delegate

    def request_location(self) -> None:
        delegate = self._require_delegate()
        loop = asyncio.get_running_loop()
        if self._coordinate is None:
            loop.call_soon(
                delegate.location_failed,
                PositioningError("No coordinate configured; set LOCATION_LAT/LOCATION_LON."),
            )
            return
        self._fix_delivered = True
        loop.call_soon(delegate.locations_updated, [self._coordinate])

    def request_authorization(self) -> None:
        delegate = self._require_delegate()
        self._authorization = (
            AuthorizationState.AUTHORIZED_WHEN_IN_USE
            if self._grant_on_prompt
            else AuthorizationState.DENIED
        )
        asyncio.get_running_loop().call_soon(delegate.authorization_changed, self._authorization)

    def _require_delegate(self) -> PositioningDelegate:
        if self._delegate is None:
            raise PositioningError("Positioning subsystem has no delegate registered.")
        return self._delegate
