"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import logging
import sys
from functools import partial
from pathlib import Path

from shelter_stats import __version__
from shelter_stats.analysis.correlation import build_correlation_matrix
from shelter_stats.analysis.geocoding import GeocodeCache, LocationResolver
from shelter_stats.analysis.locations import (
    aggregate_by_location,
    filter_events,
    locations_for_breed,
)
from shelter_stats.config import get_settings
from shelter_stats.datasources.care import METRICS, load_yearly_records
from shelter_stats.datasources.nominatim import geocode_place
from shelter_stats.datasources.strays import load_intake_events
from shelter_stats.errors import InvalidInputError
from shelter_stats.flows.build import build_all, resolve_locations


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="shelter-stats",
        description="Analytics backend for animal-shelter statistics dashboards",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")

    # 'build' command - run the Prefect flow
    build_parser = subparsers.add_parser("build", help="Build all dashboard payloads")
    _add_filter_args(build_parser)
    build_parser.add_argument(
        "--no-geocode",
        action="store_true",
        help="Skip Nominatim lookups for the location map",
    )

    # 'correlate' command - print the metric correlation matrix
    corr_parser = subparsers.add_parser("correlate", help="Print the metric correlation matrix")
    corr_parser.add_argument(
        "--csv",
        type=Path,
        default=None,
        help="Care summary CSV (default: care_csv from settings)",
    )
    corr_parser.add_argument(
        "--metrics",
        type=str,
        default=None,
        help="Comma-separated metric names (default: all tracked metrics)",
    )

    # 'locations' command - per-location stats
    loc_parser = subparsers.add_parser("locations", help="Summarise intake by location")
    loc_parser.add_argument(
        "--csv",
        type=Path,
        default=None,
        help="Stray-animals CSV (default: strays_csv from settings)",
    )
    _add_filter_args(loc_parser)
    loc_parser.add_argument(
        "--breed",
        type=str,
        default=None,
        help="Only locations where this breed was taken in",
    )
    loc_parser.add_argument(
        "--top",
        type=int,
        default=10,
        help="Number of locations to show, busiest first (default: 10)",
    )
    loc_parser.add_argument(
        "--geocode",
        action="store_true",
        help="Resolve coordinates through Nominatim",
    )

    return parser


def _add_filter_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--year", type=int, default=None, help="Intake year")
    parser.add_argument("--species", type=str, default=None, help='Species ("All" for any)')
    parser.add_argument("--outcome", type=str, default=None, help='Movement type ("All" for any)')


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Care CSV: {settings.care_csv}")
    print(f"Strays CSV: {settings.strays_csv}")
    print(f"Geocoder: {settings.geocoder_url}")
    return 0


def cmd_build(args: argparse.Namespace) -> int:
    """Handle the 'build' command: run the build flow."""
    result = build_all(
        year=args.year,
        species=args.species,
        outcome=args.outcome,
        geocode=not args.no_geocode,
    )
    print(f"Built payloads: {result}")
    return 0


def cmd_correlate(args: argparse.Namespace) -> int:
    """Handle the 'correlate' command."""
    settings = get_settings()
    path = args.csv or settings.care_csv
    metrics = [m.strip() for m in args.metrics.split(",")] if args.metrics else list(METRICS)

    try:
        records = load_yearly_records(path)
        matrix = build_correlation_matrix(records, metrics)
    except (FileNotFoundError, InvalidInputError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    width = max(len(m) for m in matrix.metrics)
    print(" " * width + " " + " ".join(f"{i:>6}" for i in range(len(matrix.metrics))))
    for i, (metric, row) in enumerate(zip(matrix.metrics, matrix.values, strict=True)):
        cells = " ".join(f"{v:6.2f}" for v in row)
        print(f"{metric:<{width}} {cells}  [{i}]")
    return 0


def cmd_locations(args: argparse.Namespace) -> int:
    """Handle the 'locations' command."""
    settings = get_settings()
    path = args.csv or settings.strays_csv

    try:
        events = load_intake_events(path)
    except (FileNotFoundError, InvalidInputError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    selected = filter_events(events, year=args.year, species=args.species, outcome=args.outcome)
    stats = aggregate_by_location(selected)
    if args.breed:
        carrying = locations_for_breed(selected, args.breed)
        stats = {loc: stats[loc] for loc in carrying}
    busiest = sorted(stats.values(), key=lambda s: s.total, reverse=True)[: args.top]

    coords = {}
    if args.geocode:
        lookup = partial(
            geocode_place,
            base_url=settings.geocoder_url,
            accept_language=settings.accept_language,
        )
        resolver = LocationResolver(
            GeocodeCache(),
            lookup,
            timeout=settings.geocode_timeout,
            max_concurrency=settings.geocode_concurrency,
        )
        coords = resolve_locations(resolver, [s.location for s in busiest])

    print(f"{len(selected)} events across {len(stats)} locations")
    for s in busiest:
        breeds = ", ".join(f"{b} ({n})" for b, n in s.top_breeds(3))
        line = (
            f"{s.location}: total={s.total} adopted={s.adopted} "
            f"avg_stay={s.average_stay:.1f}d top=[{breeds}]"
        )
        if args.geocode:
            c = coords.get(s.location)
            line += f" @ {c.lat:.4f},{c.lon:.4f}" if c else " @ unresolved"
        print(line)
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(args.debug or get_settings().debug)

    commands = {
        "info": cmd_info,
        "build": cmd_build,
        "correlate": cmd_correlate,
        "locations": cmd_locations,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
