"""Device location acquisition."""

from .base import PositioningDelegate, PositioningSubsystem
from .models import AuthorizationState, Coordinate
from .provider import LocationProvider
from .static import StaticPositioning

__all__ = [
    "AuthorizationState",
    "Coordinate",
    "LocationProvider",
    "PositioningDelegate",
    "PositioningSubsystem",
    "StaticPositioning",
]
