"""Command-line interface for the sports tracker."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from sports_tracker.config import get_settings

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from sports_tracker.api import create_app

    settings = get_settings()
    uvicorn.run(
        create_app(),
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


async def _init_db(seed: bool) -> None:
    from sports_tracker.auth.accounts import AccountService
    from sports_tracker.database.connection import close_db, create_tables, get_db, init_db

    await init_db()
    try:
        await create_tables()
        if seed:
            async with get_db() as session:
                user = await AccountService(session).seed_demo_account()
            if user is None:
                logger.info("Demo account already exists; nothing seeded")
    finally:
        await close_db()


def _nearest_station(args: argparse.Namespace) -> int:
    from sports_tracker.models.location import Coordinates
    from sports_tracker.weather.stations import get_station_registry, haversine_km

    try:
        station = get_station_registry().nearest(args.lat, args.lon)
    except ValueError as e:
        print(f"Invalid coordinates: {e}", file=sys.stderr)
        return 2

    distance = haversine_km(Coordinates(latitude=args.lat, longitude=args.lon), station.coordinates)
    print(f"{station.name}\t{station.coordinates}\t{distance:.1f} km")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Sports Tracker - log activities, share them and check the weather"
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Bind address (default: HOST setting)")
    serve_parser.add_argument("--port", type=int, help="Port (default: PORT setting)")

    # Init-db command
    init_parser = subparsers.add_parser("init-db", help="Create database tables")
    init_parser.add_argument(
        "--seed",
        action="store_true",
        help="Also create the demo account with a sample activity",
    )

    # Nearest-station command
    station_parser = subparsers.add_parser(
        "nearest-station", help="Show the weather station closest to a point"
    )
    station_parser.add_argument("lat", type=float, help="Latitude in decimal degrees")
    station_parser.add_argument("lon", type=float, help="Longitude in decimal degrees")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "nearest-station":
        return _nearest_station(args)

    _configure_logging(get_settings().log_level)

    if args.command == "serve":
        return _serve(args)

    asyncio.run(_init_db(args.seed))
    return 0


if __name__ == "__main__":
    sys.exit(main())
