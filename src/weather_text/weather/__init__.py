"""Weather service integrations and snapshot loading."""

from .base import Geocoder, WeatherService
from .loader import WeatherLoader
from .models import (
    AlertSeverity,
    CurrentConditions,
    DailyForecast,
    Placemark,
    ServiceAlert,
    SunEvent,
    SunEventKind,
    WeatherAlert,
    WeatherBundle,
    WeatherSnapshot,
)
from .nominatim import NominatimGeocoder
from .nws import NWSAlertsClient
from .open_meteo import OpenMeteoWeatherService

__all__ = [
    "AlertSeverity",
    "CurrentConditions",
    "DailyForecast",
    "Geocoder",
    "NWSAlertsClient",
    "NominatimGeocoder",
    "OpenMeteoWeatherService",
    "Placemark",
    "ServiceAlert",
    "SunEvent",
    "SunEventKind",
    "WeatherAlert",
    "WeatherBundle",
    "WeatherLoader",
    "WeatherService",
    "WeatherSnapshot",
]
