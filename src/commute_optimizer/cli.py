"""Command-line interface for finding the best time to leave."""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

import aiohttp

from commute_optimizer.adapters.api_rate_limiter import ApiRateLimiter
from commute_optimizer.adapters.config import AppConfig
from commute_optimizer.adapters.google_geocoding.geocoder import (
    GEOCODING_API_NAME,
    GoogleGeocoder,
)
from commute_optimizer.adapters.google_routes import (
    GoogleRoutesClient,
    GoogleRoutesTravelTimeEstimator,
    SpeedReadingTrafficClassifier,
)
from commute_optimizer.adapters.google_routes.constants import ROUTES_API_NAME
from commute_optimizer.adapters.system_clock import SystemClock
from commute_optimizer.application.services import DepartureOptimizer
from commute_optimizer.domain.errors import CommuteOptimizerError
from commute_optimizer.domain.models import OptimizationResult
from commute_optimizer.domain.time_utils import (
    default_arrival_time,
    format_clock,
    format_clock_24h,
    next_quarter_hour,
)

logger = logging.getLogger(__name__)

METERS_PER_MILE = 1609.344


def _configure_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _load_config() -> AppConfig:
    config = AppConfig()
    config.load_toml_overrides()
    return config


def format_duration(seconds: int) -> str:
    """Render a duration as "25 min" or "1 h 05 min"."""
    minutes = round(seconds / 60)
    if minutes < 60:
        return f"{minutes} min"
    return f"{minutes // 60} h {minutes % 60:02d} min"


def format_distance(meters: int) -> str:
    """Render a distance in miles."""
    return f"{meters / METERS_PER_MILE:.1f} mi"


def _print_result(result: OptimizationResult) -> None:
    """Print the optimal departure and all viable options."""
    print(f"\nBest time to leave: {format_clock(result.optimal_departure_time)}")
    print(f"Estimated arrival:  {format_clock(result.estimated_arrival_time)}")
    print(f"Travel time:        {format_duration(result.duration_seconds)}")
    print(f"Traffic:            {result.traffic_condition.value}")
    print(f"Distance:           {format_distance(result.distance_meters)}")

    print(f"\nAll options ({len(result.departure_time_options)}):")
    print("-" * 60)
    for option in result.departure_time_options:
        marker = "*" if option.departure_time == result.optimal_departure_time else " "
        print(
            f"{marker} {option.departure_clock}  ->  {option.arrival_clock}  "
            f"{format_duration(option.duration_seconds):>12}  {option.traffic_condition.value}"
        )
    if result.samples_failed:
        print(f"\n({result.samples_failed} of {result.samples_attempted} samples failed)")


async def _handle_optimize_command(args: argparse.Namespace, config: AppConfig) -> None:
    """Run the departure-time search."""
    clock = SystemClock(config.timezone)
    now = clock.now()
    earliest = args.earliest or format_clock_24h(next_quarter_hour(now))
    latest = args.latest or format_clock_24h(default_arrival_time(now))

    limiter_delay = config.sleep_ms_between_calls / 1000

    async with aiohttp.ClientSession() as session:
        origin, destination = args.origin, args.destination

        if args.validate_addresses:
            geocoder = GoogleGeocoder(
                session,
                config.google_maps_api_key,
                url=config.geocoding_api_url,
                timeout_seconds=config.api_timeout_seconds,
                rate_limiter=ApiRateLimiter.for_api(GEOCODING_API_NAME, limiter_delay),
            )
            origin = (await geocoder.geocode(origin)).formatted_address
            destination = (await geocoder.geocode(destination)).formatted_address
            if not args.json:
                print(f"From: {origin}")
                print(f"To:   {destination}")

        client = GoogleRoutesClient(
            session,
            config.google_maps_api_key,
            url=config.routes_api_url,
            timeout_seconds=config.api_timeout_seconds,
            rate_limiter=ApiRateLimiter.for_api(ROUTES_API_NAME, limiter_delay),
        )
        classifier = SpeedReadingTrafficClassifier(
            heavy_ratio=config.heavy_traffic_ratio,
            moderate_ratio=config.moderate_traffic_ratio,
        )
        estimator = GoogleRoutesTravelTimeEstimator(client, classifier)
        optimizer = DepartureOptimizer(estimator, clock, config.optimizer_settings())

        result = await optimizer.calculate_optimal_departure_time(
            origin, destination, earliest, latest
        )

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        _print_result(result)


async def _handle_geocode_command(args: argparse.Namespace, config: AppConfig) -> None:
    """Resolve an address and print it."""
    async with aiohttp.ClientSession() as session:
        geocoder = GoogleGeocoder(
            session,
            config.google_maps_api_key,
            url=config.geocoding_api_url,
            timeout_seconds=config.api_timeout_seconds,
        )
        resolved = await geocoder.geocode(args.address)

    if args.json:
        payload: dict[str, Any] = {
            "formatted_address": resolved.formatted_address,
            "location": {"lat": resolved.latitude, "lng": resolved.longitude},
        }
        print(json.dumps(payload, indent=2))
    else:
        print(resolved.formatted_address)
        print(f"  {resolved.latitude:.6f}, {resolved.longitude:.6f}")


def _handle_defaults_command(config: AppConfig) -> None:
    """Print the suggested departure window."""
    now = SystemClock(config.timezone).now()
    print(f"Earliest departure: {format_clock_24h(next_quarter_hour(now))}")
    print(f"Latest arrival:     {format_clock_24h(default_arrival_time(now))}")


def _setup_argparse() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find the best time to leave by sampling traffic-aware travel times",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  commute-optimizer optimize "1600 Amphitheatre Pkwy, Mountain View" "1 Infinite Loop, Cupertino" \\
      --earliest 07:30 --latest 09:00
  commute-optimizer geocode "1600 Amphitheatre Pkwy"
  commute-optimizer defaults

Configuration: GOOGLE_MAPS_API_KEY (required), CONFIG_FILE (optional TOML), see .env
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    optimize_parser = subparsers.add_parser("optimize", help="Find the optimal departure time")
    optimize_parser.add_argument("origin", help="Origin address")
    optimize_parser.add_argument("destination", help="Destination address")
    optimize_parser.add_argument(
        "--earliest", help="Earliest departure, HH:MM (default: next quarter hour)"
    )
    optimize_parser.add_argument(
        "--latest", help="Latest arrival, HH:MM (default: one hour from now)"
    )
    optimize_parser.add_argument("--json", action="store_true", help="Output as JSON")
    optimize_parser.add_argument(
        "--validate-addresses",
        action="store_true",
        help="Geocode both addresses before searching",
    )

    geocode_parser = subparsers.add_parser("geocode", help="Resolve an address")
    geocode_parser.add_argument("address", help="Address to resolve")
    geocode_parser.add_argument("--json", action="store_true", help="Output as JSON")

    subparsers.add_parser("defaults", help="Show the suggested departure window")

    return parser


async def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point. Returns the process exit code."""
    parser = _setup_argparse()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = _load_config()
    except (ValueError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    _configure_logging(config.logging_level())

    try:
        if args.command == "optimize":
            await _handle_optimize_command(args, config)
        elif args.command == "geocode":
            await _handle_geocode_command(args, config)
        elif args.command == "defaults":
            _handle_defaults_command(config)
    except CommuteOptimizerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 1

    return 0


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli_main()
