"""CLI host: run the refresh pipeline once or on its own refresh schedule."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import uuid
from datetime import UTC, datetime, timedelta

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .config import Settings, load_settings
from .exceptions import ConfigError, JournalError, PreferenceStoreError
from .journal import JournalWriter, entry_payload
from .location.models import Coordinate
from .location.provider import LocationProvider
from .location.static import StaticPositioning
from .log_setup import setup_logger
from .models import TimelineEntry
from .prefs import IGNORED_ALERT_KEY, SHOW_FOOTER_KEY, PreferenceStore
from .render import Line, entry_lines, summary_lines
from .scheduler import RefreshScheduler
from .weather.fixtures import placeholder
from .weather.loader import WeatherLoader
from .weather.nominatim import NominatimGeocoder
from .weather.nws import NWSAlertsClient
from .weather.open_meteo import OpenMeteoWeatherService


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse weather-text CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Show a one-glance weather summary for the current location."
    )
    parser.add_argument("--lat", type=float, default=None, help="Latitude override.")
    parser.add_argument("--lon", type=float, default=None, help="Longitude override.")
    parser.add_argument(
        "--placeholder",
        action="store_true",
        help="Print the static placeholder snapshot and exit.",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep refreshing, waiting the pipeline's refresh delay between runs.",
    )
    parser.add_argument(
        "--max-refreshes",
        type=int,
        default=None,
        help="Stop after this many refreshes in --watch mode.",
    )
    parser.add_argument(
        "--ignore-alert",
        type=str,
        default=None,
        metavar="KEY",
        help="Silence the alert with this details key (empty string clears it).",
    )
    footer = parser.add_mutually_exclusive_group()
    footer.add_argument(
        "--show-footer", dest="show_footer", action="store_const", const=True, default=None
    )
    footer.add_argument(
        "--hide-footer", dest="show_footer", action="store_const", const=False, default=None
    )
    return parser.parse_args(argv)


def _resolve_coordinate(args: argparse.Namespace, settings: Settings) -> Coordinate | None:
    lat = args.lat if args.lat is not None else settings.location_lat
    lon = args.lon if args.lon is not None else settings.location_lon
    if lat is None and lon is None:
        return None
    if lat is None or lon is None:
        raise ConfigError("Pass --lat and --lon together.")
    if not (-90 <= lat <= 90):
        raise ConfigError(f"Invalid latitude {lat}; expected between -90 and 90.")
    if not (-180 <= lon <= 180):
        raise ConfigError(f"Invalid longitude {lon}; expected between -180 and 180.")
    return Coordinate(latitude=lat, longitude=lon)


def _apply_preference_flags(args: argparse.Namespace, prefs: PreferenceStore) -> None:
    changed = False
    if args.show_footer is not None:
        prefs.set(SHOW_FOOTER_KEY, args.show_footer)
        changed = True
    if args.ignore_alert is not None:
        prefs.set(IGNORED_ALERT_KEY, args.ignore_alert)
        changed = True
    if changed:
        prefs.notify()


def _print_lines(console: Console, lines: list[Line], title: str) -> None:
    body = Text()
    for index, line in enumerate(lines):
        if index:
            body.append("\n")
        body.append(line.text, style=line.style or "")
    console.print(Panel(body, title=title, expand=False))


def build_scheduler(
    settings: Settings,
    coordinate: Coordinate | None,
    logger: logging.Logger,
) -> tuple[RefreshScheduler, OpenMeteoWeatherService, NominatimGeocoder]:
    """Wire the production pipeline from settings."""
    positioning = StaticPositioning(coordinate, authorization=settings.location_authorization)
    alerts_client = NWSAlertsClient(settings, logger) if settings.alerts_enabled else None
    weather_service = OpenMeteoWeatherService(settings, logger, alerts_client=alerts_client)
    geocoder = NominatimGeocoder(settings, logger)
    loader = WeatherLoader(
        weather_service,
        geocoder,
        logger,
        suppressed_alert_summary=settings.suppressed_alert_summary,
    )
    scheduler = RefreshScheduler(
        LocationProvider(positioning, logger),
        loader,
        logger,
        success_delay=timedelta(seconds=settings.refresh_success_seconds),
        failure_delay=timedelta(seconds=settings.refresh_failure_seconds),
        staleness_window=timedelta(seconds=settings.cache_staleness_seconds),
    )
    return scheduler, weather_service, geocoder


async def _run_refreshes(
    args: argparse.Namespace,
    scheduler: RefreshScheduler,
    prefs: PreferenceStore,
    console: Console,
    journal: JournalWriter | None,
    session_id: str,
) -> TimelineEntry:
    refreshes = 0
    while True:
        now = datetime.now(UTC)
        if journal is not None:
            journal.write_event(
                "refresh_start",
                payload={"now": now, "refresh_index": refreshes},
                metadata={"session_id": session_id},
            )
        entry = await scheduler.produce_entry(now)
        refreshes += 1
        masked = scheduler.is_masked(entry, now)
        delay = scheduler.next_refresh_delay(entry)
        if journal is not None:
            journal.write_event(
                "refresh_entry",
                payload={
                    **entry_payload(entry, masked=masked),
                    "next_delay_seconds": delay.total_seconds(),
                },
                metadata={"session_id": session_id},
            )

        title = "Weather Text (cached)" if masked else "Weather Text"
        _print_lines(
            console,
            entry_lines(
                entry,
                show_footer=prefs.show_footer,
                ignored_alert=prefs.ignored_alert,
            ),
            title=title,
        )

        if not args.watch or (args.max_refreshes is not None and refreshes >= args.max_refreshes):
            return entry
        console.print(f"Next refresh in {int(delay.total_seconds())}s")
        await asyncio.sleep(delay.total_seconds())


async def _run(
    args: argparse.Namespace,
    settings: Settings,
    prefs: PreferenceStore,
    console: Console,
    logger: logging.Logger,
    journal: JournalWriter | None,
    session_id: str,
) -> TimelineEntry:
    coordinate = _resolve_coordinate(args, settings)
    scheduler, weather_service, geocoder = build_scheduler(settings, coordinate, logger)
    try:
        return await _run_refreshes(args, scheduler, prefs, console, journal, session_id)
    finally:
        await weather_service.aclose()
        await geocoder.aclose()


def main(argv: list[str] | None = None) -> int:
    """Run the weather-text refresh host."""
    args = parse_args(argv)
    session_id = uuid.uuid4().hex[:12]
    logger = setup_logger(session_id=session_id)
    console = Console()

    if args.max_refreshes is not None and args.max_refreshes <= 0:
        logger.error("--max-refreshes must be > 0 when provided.")
        return 2

    try:
        settings = load_settings()
        logger.setLevel(settings.log_level)
        prefs = PreferenceStore(settings.prefs_path)
        _apply_preference_flags(args, prefs)
    except (ConfigError, PreferenceStoreError) as exc:
        logger.error("Configuration failure: %s", exc)
        return 2

    if args.placeholder:
        _print_lines(
            console,
            summary_lines(
                placeholder(datetime.now(UTC)),
                ignored_alert=prefs.ignored_alert,
            ),
            title="Weather Text (placeholder)",
        )
        return 0

    journal: JournalWriter | None = None
    if settings.journal_enabled:
        try:
            journal = JournalWriter(journal_dir=settings.journal_dir, session_id=session_id)
            journal.write_event(
                "startup",
                payload=settings.safe_summary(),
                metadata={"session_id": session_id},
            )
        except JournalError as exc:
            logger.error("Failed to initialize refresh journal: %s", exc)
            return 3

    exit_code = 0
    try:
        entry = asyncio.run(_run(args, settings, prefs, console, logger, journal, session_id))
        if not entry.is_success:
            exit_code = 4
    except ConfigError as exc:
        exit_code = 2
        logger.error("Configuration failure: %s", exc)
    except JournalError as exc:
        exit_code = 3
        logger.error("Refresh journal failure: %s", exc)
    except KeyboardInterrupt:
        logger.info("Interrupted; shutting down")
    finally:
        if journal is not None:
            try:
                journal.write_event(
                    "shutdown",
                    payload={"exit_code": exit_code},
                    metadata={"session_id": session_id},
                )
            except JournalError:
                logger.error("Failed to write shutdown event.")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
