"""Typed settings loader for the weather-text refresh pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import AnyUrl, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError
from .location.models import AuthorizationState


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_env: Literal["dev", "staging", "prod"] = Field(default="dev", alias="APP_ENV")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    weather_api_base_url: AnyUrl = Field(
        default="https://api.open-meteo.com/v1/forecast",
        alias="WEATHER_API_BASE_URL",
    )
    alerts_api_base_url: AnyUrl = Field(
        default="https://api.weather.gov/alerts/active",
        alias="ALERTS_API_BASE_URL",
    )
    alerts_enabled: bool = Field(default=True, alias="ALERTS_ENABLED")
    geocoder_base_url: AnyUrl = Field(
        default="https://nominatim.openstreetmap.org/reverse",
        alias="GEOCODER_BASE_URL",
    )
    http_user_agent: str = Field(
        default="weather-text/0.1 (contact: weather-text@example.com)",
        alias="HTTP_USER_AGENT",
    )
    weather_timeout_seconds: float = Field(default=15.0, alias="WEATHER_TIMEOUT_SECONDS")
    geocoder_timeout_seconds: float = Field(default=10.0, alias="GEOCODER_TIMEOUT_SECONDS")
    temperature_unit: Literal["fahrenheit", "celsius"] = Field(
        default="fahrenheit", alias="TEMPERATURE_UNIT"
    )
    forecast_days: int = Field(default=7, alias="FORECAST_DAYS")
    suppressed_alert_summary: str = Field(
        default="Test Message", alias="SUPPRESSED_ALERT_SUMMARY"
    )

    refresh_success_seconds: int = Field(default=3600, alias="REFRESH_SUCCESS_SECONDS")
    refresh_failure_seconds: int = Field(default=300, alias="REFRESH_FAILURE_SECONDS")
    cache_staleness_seconds: int = Field(default=86400, alias="CACHE_STALENESS_SECONDS")

    location_lat: float | None = Field(default=None, alias="LOCATION_LAT")
    location_lon: float | None = Field(default=None, alias="LOCATION_LON")
    location_authorization: AuthorizationState = Field(
        default=AuthorizationState.AUTHORIZED_ALWAYS,
        alias="LOCATION_AUTHORIZATION",
    )

    prefs_path: Path = Field(default=Path("./data/prefs.json"), alias="PREFS_PATH")
    journal_dir: Path = Field(default=Path("./data/journal"), alias="JOURNAL_DIR")
    journal_enabled: bool = Field(default=True, alias="JOURNAL_ENABLED")

    @field_validator("location_lat", "location_lon", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat empty env-string values as unset optional coordinates."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @model_validator(mode="after")
    def validate_ranges(self) -> Settings:
        """Validate numeric ranges and paired fields."""
        if not self.http_user_agent.strip():
            raise ValueError("HTTP_USER_AGENT must not be empty.")
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        if self.geocoder_timeout_seconds <= 0:
            raise ValueError("GEOCODER_TIMEOUT_SECONDS must be > 0.")
        if not (1 <= self.forecast_days <= 16):
            raise ValueError("FORECAST_DAYS must be between 1 and 16.")
        if self.refresh_success_seconds <= 0:
            raise ValueError("REFRESH_SUCCESS_SECONDS must be > 0.")
        if self.refresh_failure_seconds <= 0:
            raise ValueError("REFRESH_FAILURE_SECONDS must be > 0.")
        if self.cache_staleness_seconds < 0:
            raise ValueError("CACHE_STALENESS_SECONDS must be >= 0.")

        has_lat = self.location_lat is not None
        has_lon = self.location_lon is not None
        if has_lat != has_lon:
            raise ValueError("LOCATION_LAT and LOCATION_LON must be set together.")
        if has_lat and not (-90 <= self.location_lat <= 90):
            raise ValueError("LOCATION_LAT must be between -90 and 90.")
        if has_lon and not (-180 <= self.location_lon <= 180):
            raise ValueError("LOCATION_LON must be between -180 and 180.")
        return self

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for journaling (no coordinates)."""
        return {
            "app_env": self.app_env,
            "weather_api_base_url": str(self.weather_api_base_url),
            "alerts_api_base_url": str(self.alerts_api_base_url),
            "alerts_enabled": self.alerts_enabled,
            "geocoder_base_url": str(self.geocoder_base_url),
            "weather_timeout_seconds": self.weather_timeout_seconds,
            "geocoder_timeout_seconds": self.geocoder_timeout_seconds,
            "temperature_unit": self.temperature_unit,
            "forecast_days": self.forecast_days,
            "refresh_success_seconds": self.refresh_success_seconds,
            "refresh_failure_seconds": self.refresh_failure_seconds,
            "cache_staleness_seconds": self.cache_staleness_seconds,
            "location_configured": self.location_lat is not None,
            "location_authorization": self.location_authorization.value,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        settings = Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc

    if settings.journal_enabled:
        settings.journal_dir.mkdir(parents=True, exist_ok=True)
    settings.prefs_path.parent.mkdir(parents=True, exist_ok=True)
    return settings
