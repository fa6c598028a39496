"""Typed models for device location and permission state."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class AuthorizationState(str, Enum):
    """Location permission state reported by the positioning subsystem."""

    NOT_DETERMINED = "notDetermined"
    AUTHORIZED_WHEN_IN_USE = "authorizedWhenInUse"
    AUTHORIZED_ALWAYS = "authorizedAlways"
    RESTRICTED = "restricted"
    DENIED = "denied"
    UNKNOWN = "unknown"

    @property
    def is_authorized(self) -> bool:
        return self in {
            AuthorizationState.AUTHORIZED_WHEN_IN_USE,
            AuthorizationState.AUTHORIZED_ALWAYS,
        }


class Coordinate(BaseModel):
    """Immutable geographic coordinate in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
