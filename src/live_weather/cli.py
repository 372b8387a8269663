"""Command-line interface for live weather."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from live_weather import __version__
from live_weather.capabilities.connectivity import ProbeConnectivityMonitor
from live_weather.capabilities.location import StaticLocationService
from live_weather.config import Settings, get_settings
from live_weather.models.location import Coordinates, Position
from live_weather.models.state import Success
from live_weather.session import open_session
from live_weather.view import render_notification, render_state, render_tick

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Live Weather - current conditions for your location"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--api-key",
        help="OpenWeatherMap API key (default: OPENWEATHERMAP_API_KEY)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Logging level (default: LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    now_parser = subparsers.add_parser(
        "now", help="Print current weather once and exit"
    )
    now_parser.add_argument(
        "location",
        help="Location as lat,lon coordinates",
    )

    watch_parser = subparsers.add_parser(
        "watch", help="Keep showing weather, reacting to connectivity changes"
    )
    watch_parser.add_argument(
        "location",
        help="Location as lat,lon coordinates",
    )
    watch_parser.add_argument(
        "--no-clock",
        action="store_true",
        help="Do not print clock ticks",
    )

    return parser


def _print(text: str) -> None:
    if text:
        print(text, flush=True)


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    position = Position(coordinates=Coordinates.from_string(args.location))
    location = StaticLocationService(position)
    on_tick = None
    if args.command == "watch" and not args.no_clock:

        def on_tick(tick):
            _print(render_tick(tick))

    async with ProbeConnectivityMonitor(
        settings.connectivity_probe_url,
        interval_seconds=settings.connectivity_probe_interval_seconds,
    ) as connectivity:
        async with open_session(
            location,
            connectivity,
            notify=lambda n: _print(render_notification(n)),
            on_tick=on_tick,
            settings=settings,
        ) as session:
            if args.command == "now":
                state = await session.settle()
                _print(render_state(state))
                return 0 if isinstance(state, Success) else 1

            session.subscribe(lambda state: _print(render_state(state)))
            _print(render_state(session.current_state))
            try:
                await asyncio.Event().wait()
            finally:
                location.close()
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    settings = get_settings()
    if args.api_key:
        settings = settings.model_copy(update={"openweathermap_api_key": args.api_key})

    logging.basicConfig(
        level=args.log_level or settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        Coordinates.from_string(args.location)
    except ValueError as e:
        parser.error(str(e))

    try:
        return asyncio.run(_run(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
