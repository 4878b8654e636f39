"""
Station Groups - Main entry point.

Usage:
    python -m src.main build --stops data/stops.json
    python -m src.main search "paris"
    python -m src.main suggest "marseile"
    python -m src.main --help
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from src import config
from src.geo import load_stops
from src.grouping import (
    GroupArtifactError,
    group_stations,
    load_station_groups,
    save_station_groups,
)
from src.grouping.groups import group_to_dict
from src.search import search_station_groups, suggest_station_groups


def run_build(args: argparse.Namespace) -> int:
    """Build the station groups file from a stops export."""
    if not args.stops.exists():
        print(f"Error: Stops file not found: {args.stops}", file=sys.stderr)
        return 1

    try:
        stations = load_stops(args.stops)
    except (ValueError, OSError) as e:
        print(f"Error: Could not read stops from {args.stops}: {e}", file=sys.stderr)
        return 1

    try:
        groups = group_stations(
            stations,
            max_distance_km=args.max_distance,
            min_name_length=config.MIN_GROUP_NAME_LENGTH,
            progress=args.progress,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    save_station_groups(groups, args.output)

    multi = sum(1 for g in groups if g.is_group)
    print(f"Stations: {len(stations)}")
    print(f"Groups: {len(groups)} ({multi} with several stations)")
    print(f"Saved to {args.output}")
    return 0


def _load_groups(path: Path):
    if not path.exists():
        print(f"Error: Station groups file not found: {path}", file=sys.stderr)
        return None
    try:
        return load_station_groups(path)
    except GroupArtifactError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None


def run_search(args: argparse.Namespace) -> int:
    """Print groups matching a query, most relevant first."""
    groups = _load_groups(args.groups)
    if groups is None:
        return 1

    results = search_station_groups(groups, args.query, limit=args.limit)

    if args.json:
        print(json.dumps([group_to_dict(g) for g in results], ensure_ascii=False, indent=2))
        return 0

    for group in results:
        country = f" [{group.country}]" if group.country else ""
        print(f"{group.display_name}{country}")
    return 0


def run_suggest(args: argparse.Namespace) -> int:
    """Print fuzzy suggestions for a possibly misspelled query."""
    groups = _load_groups(args.groups)
    if groups is None:
        return 1

    suggestions = suggest_station_groups(
        groups, args.query, limit=args.limit, threshold=config.SUGGEST_THRESHOLD
    )
    for group, score in suggestions:
        print(f"{score:3d}  {group.display_name}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Station Groups - Cluster nearby stations and search them"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Build station groups from stops")
    build.add_argument(
        "--stops",
        type=Path,
        default=config.STOPS_FILE,
        help="Path to stops JSON or CSV",
    )
    build.add_argument(
        "--output",
        type=Path,
        default=config.GROUPS_FILE,
        help="Path of the station groups JSON to write",
    )
    build.add_argument(
        "--max-distance",
        type=float,
        default=config.MAX_DISTANCE_KM,
        help=f"Maximum distance in km inside a group (default: {config.MAX_DISTANCE_KM:g})",
    )
    build.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while clustering",
    )
    build.set_defaults(func=run_build)

    search = subparsers.add_parser("search", help="Search station groups")
    search.add_argument("query", help="Search term")
    search.add_argument(
        "--groups",
        type=Path,
        default=config.GROUPS_FILE,
        help="Path to station groups JSON",
    )
    search.add_argument(
        "--limit",
        type=int,
        default=config.SEARCH_LIMIT,
        help=f"Maximum number of results (default: {config.SEARCH_LIMIT})",
    )
    search.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON records",
    )
    search.set_defaults(func=run_search)

    suggest = subparsers.add_parser("suggest", help="Suggest groups for a misspelled name")
    suggest.add_argument("query", help="Search term")
    suggest.add_argument(
        "--groups",
        type=Path,
        default=config.GROUPS_FILE,
        help="Path to station groups JSON",
    )
    suggest.add_argument(
        "--limit",
        type=int,
        default=5,
        help="Maximum number of suggestions (default: 5)",
    )
    suggest.set_defaults(func=run_suggest)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
