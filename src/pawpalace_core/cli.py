"""
Command line entry point: ``pawpalace-reminders``.

Commands:
    run-once [--as-of YYYY-MM-DD]   run a single reminder pass and exit
    serve [--host] [--port]         run the HTTP service with the scheduler
    schedule                        run the scheduler without HTTP
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import date
from typing import List, Optional

from .exceptions import ConfigurationException
from .runtime import ReminderRuntime
from .utils.config import AppSettings, LoggingConfigurator
from .utils.datetime_utils import parse_calendar_date

logger = logging.getLogger(__name__)


def _as_of(value: str) -> date:
    parsed = parse_calendar_date(value) if len(value.strip()) == 10 else None
    if parsed is None:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got '{value}'")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pawpalace-reminders",
        description="PawPalace vaccination reminder service",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override LOG_LEVEL",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run-once", help="Run one reminder pass and exit")
    run_parser.add_argument(
        "--as-of",
        type=_as_of,
        help="Reference date; reminders go out for vaccines due the next day",
    )

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=5000, help="Bind port")

    subparsers.add_parser("schedule", help="Run the daily scheduler without HTTP")

    return parser


async def run_once(settings: AppSettings, as_of: Optional[date] = None) -> int:
    """Run a single pass, wait for queued mail, print a JSON summary."""
    runtime = ReminderRuntime.from_settings(settings)
    try:
        result = await runtime.scheduler.trigger(as_of, reason="cli")
    finally:
        await runtime.close()

    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.success else 1


async def run_schedule(settings: AppSettings) -> int:
    """Run the scheduler until interrupted."""
    runtime = ReminderRuntime.from_settings(settings)
    try:
        await runtime.scheduler.run_forever()
    finally:
        await runtime.close()
    return 0


def serve(settings: AppSettings, host: str, port: int) -> int:
    """Run the HTTP app (and its scheduler) under uvicorn."""
    import uvicorn

    from .api import create_app

    uvicorn.run(
        create_app(settings=settings),
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI function."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        settings = AppSettings.from_environment()
    except ConfigurationException as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 2

    LoggingConfigurator.configure_structured_logging(
        level=args.log_level or settings.log_level
    )

    try:
        if args.command == "run-once":
            return asyncio.run(run_once(settings, args.as_of))
        if args.command == "schedule":
            return asyncio.run(run_schedule(settings))
        if args.command == "serve":
            return serve(settings, args.host, args.port)
    except ConfigurationException as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130

    parser.error(f"unknown command {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
