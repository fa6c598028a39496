"""Plain-text presentation of timeline entries for terminal hosts."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import NamedTuple

from .models import TimelineEntry
from .weather.models import AlertSeverity, SunEventKind, WeatherAlert, WeatherSnapshot


class SeverityStyle(NamedTuple):
    symbol: str
    color: str


SEVERITY_STYLES: dict[AlertSeverity, SeverityStyle] = {
    AlertSeverity.SEVERE: SeverityStyle("exclamationmark.circle.fill", "yellow"),
    AlertSeverity.EXTREME: SeverityStyle("exclamationmark.triangle.fill", "red"),
    AlertSeverity.UNKNOWN: SeverityStyle("questionmark.circle.fill", "purple"),
}


class Line(NamedTuple):
    """One rendered line with an optional rich style name."""

    text: str
    style: str | None = None


def format_temperature(value: float) -> str:
    return f"{value:.0f}°"


def format_time(value: datetime, tz: tzinfo | None = None) -> str:
    return value.astimezone(tz).strftime("%H:%M")


def visible_alert(snapshot: WeatherSnapshot, ignored_alert: str | None) -> WeatherAlert | None:
    """Return the snapshot alert unless the user silenced it."""
    alert = snapshot.alert
    if alert is None:
        return None
    if ignored_alert and alert.details_key == ignored_alert:
        return None
    return alert


def summary_lines(
    snapshot: WeatherSnapshot,
    *,
    ignored_alert: str | None = None,
    tz: tzinfo | None = None,
) -> list[Line]:
    """Headline, low/high, then either the alert or the next sun event."""
    lines = [
        Line(
            f"{snapshot.current_symbol_id} {format_temperature(snapshot.current_temperature)} "
            f"{snapshot.current_condition_text}",
            "bold",
        ),
        Line(
            f"Low: {format_temperature(snapshot.low_temperature)} "
            f"High: {format_temperature(snapshot.high_temperature)}"
        ),
    ]

    alert = visible_alert(snapshot, ignored_alert)
    if alert is not None:
        style = SEVERITY_STYLES[alert.severity]
        lines.append(Line(f"{style.symbol} {alert.summary}", style.color))
    elif snapshot.sun_event is not None:
        label = "Sunrise" if snapshot.sun_event.kind == SunEventKind.SUNRISE else "Sunset"
        lines.append(Line(f"{label}: {format_time(snapshot.sun_event.timestamp, tz)}", "dim"))
    return lines


def footer_line(entry: TimelineEntry, tz: tzinfo | None = None) -> Line:
    """Place name (if known) and the time the entry was produced."""
    stamp = format_time(entry.timestamp, tz)
    place_name = entry.snapshot.place_name if entry.snapshot is not None else None
    if place_name:
        return Line(f"{place_name} - {stamp}", "dim")
    return Line(stamp, "dim")


def unavailable_lines(error: Exception) -> list[Line]:
    return [
        Line("exclamationmark.triangle.fill Unavailable", "bold red"),
        Line(str(error) or type(error).__name__),
    ]


def entry_lines(
    entry: TimelineEntry,
    *,
    show_footer: bool = True,
    ignored_alert: str | None = None,
    tz: tzinfo | None = None,
) -> list[Line]:
    if entry.snapshot is not None:
        lines = summary_lines(entry.snapshot, ignored_alert=ignored_alert, tz=tz)
    elif entry.error is not None:
        lines = unavailable_lines(entry.error)
    else:
        raise ValueError("Timeline entry carries neither a snapshot nor an error.")
    if show_footer:
        lines.append(footer_line(entry, tz))
    return lines
