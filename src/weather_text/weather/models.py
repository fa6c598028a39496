"""Typed models for weather service payloads and normalized snapshots."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ..location.models import Coordinate

TemperatureUnit = Literal["fahrenheit", "celsius"]


class CurrentConditions(BaseModel):
    """Current conditions as returned by the weather service."""

    temperature: float
    symbol_id: str
    condition_text: str


class DailyForecast(BaseModel):
    """One forecast day; sun times are absent during polar day or night."""

    date: datetime
    high_temperature: float
    low_temperature: float
    sunrise: datetime | None = None
    sunset: datetime | None = None


class ServiceAlert(BaseModel):
    """Active alert as returned by the weather service, before filtering."""

    severity: str
    summary: str
    details_key: str | None = None


class WeatherBundle(BaseModel):
    """Result of the combined current + daily + alerts request."""

    temperature_unit: TemperatureUnit = "fahrenheit"
    current: CurrentConditions
    daily: list[DailyForecast] = Field(default_factory=list)
    alerts: list[ServiceAlert] = Field(default_factory=list)


class Placemark(BaseModel):
    """One reverse-geocoding candidate."""

    country_code: str | None = None
    country: str | None = None
    locality: str | None = None
    administrative_area: str | None = None
    name: str | None = None


class SunEventKind(str, Enum):
    SUNRISE = "sunrise"
    SUNSET = "sunset"


class SunEvent(BaseModel):
    """Next sunrise or sunset."""

    model_config = ConfigDict(frozen=True)

    kind: SunEventKind
    timestamp: datetime


class AlertSeverity(str, Enum):
    """Severities that qualify for display."""

    SEVERE = "severe"
    EXTREME = "extreme"
    UNKNOWN = "unknown"


class WeatherAlert(BaseModel):
    """Selected alert; `details_key` lets a user silence this specific alert."""

    model_config = ConfigDict(frozen=True)

    severity: AlertSeverity
    summary: str
    details_key: str | None = None


class WeatherSnapshot(BaseModel):
    """Complete weather payload for one refresh cycle."""

    model_config = ConfigDict(frozen=True)

    coordinate: Coordinate
    place_name: str | None = None
    temperature_unit: TemperatureUnit = "fahrenheit"
    current_temperature: float
    current_symbol_id: str
    current_condition_text: str
    high_temperature: float
    low_temperature: float
    sun_event: SunEvent | None = None
    alert: WeatherAlert | None = None
