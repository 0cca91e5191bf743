"""CLI entry point for the weather lookup tool."""

import argparse
import asyncio
import logging

from skycast.autocomplete.engine import AutocompleteEngine, Key
from skycast.config.loader import (
    dump_config,
    get_config_value,
    load_config,
    set_config_value,
)
from skycast.config.schema import SkycastConfig
from skycast.forecast.aggregator import summarize_forecast
from skycast.ingest.geolocation import StaticGeolocator
from skycast.ingest.weather_client import WeatherClient
from skycast.models.location import Coordinate
from skycast.reporting import formatters
from skycast.session import WeatherSession

DEFAULT_CONFIG = "skycast.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="skycast",
        description="Current weather and 5-day forecast lookup",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument(
        "--format", choices=["text", "json"], default="text", help="Output format"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # current / forecast
    for name, help_text in (
        ("current", "Show current conditions"),
        ("forecast", "Show current conditions and the 5-day forecast"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--city", help="City name, e.g. 'London,GB'")
        p.add_argument("--lat", type=float, help="Latitude")
        p.add_argument("--lon", type=float, help="Longitude")

    # search
    search_p = sub.add_parser("search", help="Autocomplete a city name")
    search_p.add_argument("query", help="Partial city name")
    search_p.add_argument(
        "--select", type=int, metavar="N",
        help="Pick the Nth suggestion (1-based) and show its forecast",
    )

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    if args.command in ("current", "forecast"):
        return _cmd_weather(config, args)
    elif args.command == "search":
        return _cmd_search(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _build_session(config: SkycastConfig) -> WeatherSession:
    client = WeatherClient(config.provider, config.geocoding)
    return WeatherSession(client, StaticGeolocator.from_config(config.location))


def _cmd_weather(config: SkycastConfig, args) -> int:
    if (args.lat is None) != (args.lon is None):
        print("Error: --lat and --lon must be given together")
        return 1

    session = _build_session(config)
    if args.city:
        session.search_city_name(args.city)
    elif args.lat is not None:
        try:
            coord = Coordinate(args.lat, args.lon)
        except ValueError as e:
            print(f"Error: {e}")
            return 1
        session.load_coordinate(coord)
    elif not session.start() and session.error is None:
        print("Location unavailable. Use --city, --lat/--lon or 'search'.")
        return 1

    return _render_session(session, config, args, with_forecast=args.command == "forecast")


def _cmd_search(config: SkycastConfig, args) -> int:
    session = _build_session(config)
    picked = []
    # Weather fetches block, so the pick is only recorded inside the loop.
    engine = AutocompleteEngine(
        session.client.search_cities,
        on_select=picked.append,
        config=config.autocomplete,
    )

    async def run() -> list:
        try:
            engine.on_input(args.query)
            await engine.settle()
            shown = list(engine.suggestions)
            if args.select is not None and 1 <= args.select <= len(shown):
                for _ in range(args.select):
                    engine.on_key(Key.ARROW_DOWN)
                engine.on_key(Key.ENTER)
            return shown
        finally:
            await engine.aclose()

    suggestions = asyncio.run(run())

    if args.select is None:
        if args.format == "json":
            print(formatters.format_json(formatters.suggestions_to_dict(suggestions)))
        else:
            print(formatters.format_suggestions_text(suggestions))
        return 0

    if not 1 <= args.select <= len(suggestions):
        print(f"Error: no suggestion #{args.select} ({len(suggestions)} found)")
        return 1
    session.select_city(picked[0])
    return _render_session(session, config, args, with_forecast=True)


def _render_session(
    session: WeatherSession, config: SkycastConfig, args, with_forecast: bool
) -> int:
    if session.error:
        print(f"Error: {session.error}")
        return 1
    current = session.current
    if current is None:
        print("Error: no weather data")
        return 1

    summary = None
    if with_forecast and session.forecast is not None:
        summary = summarize_forecast(
            session.forecast.points,
            max_days=config.forecast.max_days,
            hourly_points=config.forecast.hourly_points,
        )

    units = config.provider.units
    if args.format == "json":
        data = {"current": formatters.current_to_dict(current)}
        if with_forecast:
            data["forecast"] = (
                formatters.forecast_to_dict(summary) if summary is not None else None
            )
        print(formatters.format_json(data))
        return 0

    print(formatters.format_current_text(current, units))
    if with_forecast:
        print()
        if summary is None:
            print("Forecast data unavailable")
        else:
            print(formatters.format_forecast_text(summary, units))
    return 0


def _cmd_config(config: SkycastConfig, args) -> int:
    if args.config_command == "show":
        print(dump_config(config))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
            print(f"Set {key.strip()} = {get_config_value(new_config, key.strip())}")
            return 0
        except Exception as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config set key=value")
        return 1
