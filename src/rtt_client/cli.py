from __future__ import annotations

import argparse
import asyncio
import datetime as dt
import json
import logging
import sys
from typing import Optional, Sequence

import httpx
import structlog
from dotenv import load_dotenv

from .config import RttSettings
from .formatter import format_lineup, format_service
from .models import Lineup, Service
from .rtt_api import RailDataApi, create_rtt_client


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rtt-client", description="Query the RealTimeTrains API."
    )
    parser.add_argument("--json", action="store_true", help="print the raw decoded JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="log HTTP requests")
    commands = parser.add_subparsers(dest="command", required=True)

    departures = commands.add_parser("departures", help="services departing a station")
    departures.add_argument("origin")

    between = commands.add_parser("between", help="services from one station to another")
    between.add_argument("origin")
    between.add_argument("destination")

    on_date = commands.add_parser("on-date", help="services at a station on a date")
    on_date.add_argument("origin")
    on_date.add_argument("date", type=dt.date.fromisoformat, help="YYYY-MM-DD")

    at_time = commands.add_parser("at-time", help="services at a station around a time")
    at_time.add_argument("origin")
    at_time.add_argument("when", type=dt.datetime.fromisoformat, help="YYYY-MM-DDTHH:MM")

    service = commands.add_parser("service", help="stopping pattern of one service")
    service.add_argument("service_id")
    service.add_argument("when", type=dt.datetime.fromisoformat, help="YYYY-MM-DDTHH:MM")

    return parser


async def run_command(api: RailDataApi, args: argparse.Namespace) -> Lineup | Service:
    """Dispatch parsed arguments to the matching API query."""

    if args.command == "departures":
        return await api.get_departures(args.origin)
    if args.command == "between":
        return await api.get_departures_between(args.origin, args.destination)
    if args.command == "on-date":
        return await api.get_services_on_date(args.origin, args.date)
    if args.command == "at-time":
        return await api.get_services_at_time(args.origin, args.when)
    if args.command == "service":
        return await api.get_service_info(args.service_id, args.when)
    raise ValueError(f"Unknown command: {args.command}")


def render(result: Lineup | Service, *, as_json: bool) -> str:
    if as_json:
        return json.dumps(result.to_dict(), indent=2)
    if isinstance(result, Service):
        return format_service(result)
    return format_lineup(result)


async def _query(settings: RttSettings, args: argparse.Namespace) -> Lineup | Service:
    async with create_rtt_client(settings) as client:
        return await run_command(client, args)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the ``rtt-client`` command."""

    load_dotenv()
    args = build_parser().parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.WARNING
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))

    try:
        settings = RttSettings.from_env()
        result = asyncio.run(_query(settings, args))
    except (RuntimeError, httpx.HTTPError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(render(result, as_json=args.json))
    return 0


def run() -> None:  # pragma: no cover - console script
    sys.exit(main())
