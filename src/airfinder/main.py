"""AirFinder - airport search and distance tool.

Command line front end over the airport query engine. Reads a GeoJSON
feature collection produced by the airport data pipeline, then filters it,
measures between points, or lists known filter values.

Typical usage:
    airfinder query data/airports.geojson --q boston
    airfinder query data/airports.geojson --country usa --size large --rwy-min 10000
    airfinder query data/airports.geojson --radius-center KJFK --radius-nm 50
    airfinder distance data/airports.geojson KJFK "n42.36 w71.01"
    airfinder enumerate data/airports.geojson country
"""

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from airfinder.airports import FeatureIndex, FilterEvaluator, QuerySpec, load_feature_collection
from airfinder.airports.feature import Feature
from airfinder.airports.index import GroupingField
from airfinder.core.config import ConfigError, ConfigLoader
from airfinder.core.logging_system import (
    LoggingError,
    get_logger,
    initialize_logging,
    shutdown_logging,
)
from airfinder.navigation.measure import measure

ENUMERABLE_FIELDS = (GroupingField.COUNTRY, GroupingField.STATE, GroupingField.SURFACE_TYPE)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="AirFinder - airport search and distance tool")
    parser.add_argument("--config", type=Path, help="Settings YAML file")

    commands = parser.add_subparsers(dest="command", required=True)

    query = commands.add_parser("query", help="Filter airports")
    query.add_argument("data", type=Path, nargs="?", help="GeoJSON feature collection")
    query.add_argument("--q", default="", help="Free-text query (code, city, country, name)")
    query.add_argument("--country", action="append", default=[], help="Country (repeatable)")
    query.add_argument("--state", action="append", default=[], help="State or region (repeatable)")
    query.add_argument("--type", action="append", default=[], help="Airport type (repeatable)")
    query.add_argument("--surface", action="append", default=[], help="Surface type (repeatable)")
    query.add_argument(
        "--size",
        action="append",
        default=[],
        choices=["small", "medium", "large"],
        help="Size bucket (repeatable)",
    )
    query.add_argument("--services", action="append", default=[], help="Services code (repeatable)")
    query.add_argument("--rwy-min", type=float, help="Minimum longest runway (ft)")
    query.add_argument("--rwy-max", type=float, help="Maximum longest runway (ft)")
    query.add_argument("--radius-center", help="ICAO code or coordinates for radius filter")
    query.add_argument("--radius-nm", type=float, help="Radius in nautical miles")

    distance = commands.add_parser("distance", help="Distance and bearing between two points")
    distance.add_argument("data", type=Path, nargs="?", help="GeoJSON feature collection")
    distance.add_argument("origin", help="Origin ICAO code or coordinates")
    distance.add_argument("destination", help="Destination ICAO code or coordinates")

    enumerate_cmd = commands.add_parser("enumerate", help="List known values of a field")
    enumerate_cmd.add_argument("data", type=Path, nargs="?", help="GeoJSON feature collection")
    enumerate_cmd.add_argument(
        "field",
        choices=[field.value for field in ENUMERABLE_FIELDS],
        help="Field to enumerate",
    )

    return parser.parse_args(argv)


def format_feature(feature: Feature) -> str:
    """Format a feature as one output line."""
    props = feature.properties
    place = ", ".join(part for part in (props.city, props.country) if part)
    return f"{(props.icao or '-'):<6}{props.name or ''}  {place}".rstrip()


def run_query(args: argparse.Namespace, search: FilterEvaluator, config: ConfigLoader) -> int:
    """Run the query command and print the results."""
    radius_nm = args.radius_nm
    if args.radius_center and radius_nm is None:
        radius_nm = config.get("query.default_radius_nm")

    spec = QuerySpec(
        q=args.q,
        country_sel=args.country,
        state_sel=args.state,
        type_sel=args.type,
        surface_sel=args.surface,
        size_sel=args.size,
        services_sel=args.services,
        rwy_min=args.rwy_min,
        rwy_max=args.rwy_max,
        radius_center=args.radius_center,
        radius_nm=radius_nm,
    )

    if spec.has_radius and search.resolve_center(spec.radius_center) is None:
        print(
            f"warning: radius center {spec.radius_center!r} not recognized, radius ignored",
            file=sys.stderr,
        )

    results = search.filter(spec)
    for feature in results:
        print(format_feature(feature))
    print(f"{len(results)} airport(s)")
    return 0


def run_distance(args: argparse.Namespace, index: FeatureIndex) -> int:
    """Run the distance command and print the measurement."""
    result = measure(index, args.origin, args.destination)
    if result is None:
        print("Could not resolve one or both endpoints.", file=sys.stderr)
        return 1

    print(result.describe())
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point.

    Args:
        argv: Arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success).
    """
    args = parse_args(argv)

    try:
        config = ConfigLoader.load(args.config) if args.config else ConfigLoader()
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    try:
        initialize_logging(
            config.get("logging.config"),
            use_platform_dir=config.get("logging.use_platform_dir", True),
        )
    except LoggingError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    logger = get_logger(__name__)

    try:
        data_path = args.data or config.get("data.features_path")
        if not data_path:
            print("error: no feature collection given", file=sys.stderr)
            return 1

        try:
            features = load_feature_collection(data_path)
        except (FileNotFoundError, ValueError) as e:
            logger.error("Cannot load features: %s", e)
            print(f"error: {e}", file=sys.stderr)
            return 1

        index = FeatureIndex()
        index.build(features)
        logger.info("Running %s on %d features", args.command, len(index))

        if args.command == "query":
            return run_query(args, FilterEvaluator(index), config)
        if args.command == "distance":
            return run_distance(args, index)

        for value in index.enumerate(args.field):
            print(value)
        return 0

    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.exception("Fatal error: %s", e)
        return 1
    finally:
        shutdown_logging()


if __name__ == "__main__":
    sys.exit(main())
