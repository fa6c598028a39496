"""WMO weather interpretation codes mapped to display symbols and text."""

from __future__ import annotations

from typing import NamedTuple


class ConditionInfo(NamedTuple):
    day_symbol: str
    night_symbol: str
    text: str


UNKNOWN_CONDITION = ConditionInfo("questionmark", "questionmark", "Unknown")

WMO_CONDITIONS: dict[int, ConditionInfo] = {
    0: ConditionInfo("sun.max", "moon.stars", "Clear"),
    1: ConditionInfo("sun.max", "moon", "Mostly Clear"),
    2: ConditionInfo("cloud.sun", "cloud.moon", "Partly Cloudy"),
    3: ConditionInfo("cloud", "cloud", "Cloudy"),
    45: ConditionInfo("cloud.fog", "cloud.fog", "Foggy"),
    48: ConditionInfo("cloud.fog", "cloud.fog", "Freezing Fog"),
    51: ConditionInfo("cloud.drizzle", "cloud.drizzle", "Light Drizzle"),
    53: ConditionInfo("cloud.drizzle", "cloud.drizzle", "Drizzle"),
    55: ConditionInfo("cloud.drizzle", "cloud.drizzle", "Heavy Drizzle"),
    56: ConditionInfo("cloud.sleet", "cloud.sleet", "Freezing Drizzle"),
    57: ConditionInfo("cloud.sleet", "cloud.sleet", "Freezing Drizzle"),
    61: ConditionInfo("cloud.rain", "cloud.rain", "Light Rain"),
    63: ConditionInfo("cloud.rain", "cloud.rain", "Rain"),
    65: ConditionInfo("cloud.heavyrain", "cloud.heavyrain", "Heavy Rain"),
    66: ConditionInfo("cloud.sleet", "cloud.sleet", "Freezing Rain"),
    67: ConditionInfo("cloud.sleet", "cloud.sleet", "Freezing Rain"),
    71: ConditionInfo("cloud.snow", "cloud.snow", "Light Snow"),
    73: ConditionInfo("cloud.snow", "cloud.snow", "Snow"),
    75: ConditionInfo("cloud.snow", "cloud.snow", "Heavy Snow"),
    77: ConditionInfo("cloud.snow", "cloud.snow", "Flurries"),
    80: ConditionInfo("cloud.sun.rain", "cloud.moon.rain", "Rain Showers"),
    81: ConditionInfo("cloud.rain", "cloud.rain", "Rain Showers"),
    82: ConditionInfo("cloud.heavyrain", "cloud.heavyrain", "Heavy Rain Showers"),
    85: ConditionInfo("cloud.snow", "cloud.snow", "Snow Showers"),
    86: ConditionInfo("wind.snow", "wind.snow", "Heavy Snow Showers"),
    95: ConditionInfo("cloud.bolt.rain", "cloud.bolt.rain", "Thunderstorms"),
    96: ConditionInfo("cloud.bolt.rain", "cloud.bolt.rain", "Thunderstorms with Hail"),
    99: ConditionInfo("cloud.bolt.rain", "cloud.bolt.rain", "Thunderstorms with Hail"),
}


def describe(code: int | None, *, is_day: bool = True) -> tuple[str, str]:
    """Return (symbol id, condition text) for a WMO code."""
    info = WMO_CONDITIONS.get(code, UNKNOWN_CONDITION) if code is not None else UNKNOWN_CONDITION
    return (info.day_symbol if is_day else info.night_symbol), info.text
