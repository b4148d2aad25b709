"""
CLI Module

Architectural Intent:
- Command-line interface for Ferry
- Entry point for all user interactions
- Delegates to application use cases via composition root
- Maps domain errors onto printed messages and process exit statuses
- Supports --verbose/--debug flags for log level control
"""

import argparse
import asyncio
import logging
import sys
import traceback
from typing import NoReturn, Optional

from ferry import composition_root
from ferry.domain.exceptions import FerryError, UsageError
from ferry.infrastructure.config import load_config
from ferry.infrastructure.logging import configure_logging, resolve_level
from ferry.presentation.cli.commands import (
    CommandSpec,
    add_commands,
    build_command_table,
    lookup,
)

logger = logging.getLogger(__name__)


def build_parser(table: dict[str, CommandSpec]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ferry",
        description="Ferry: Marathon application deployment engine",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug output with tracebacks"
    )
    parser.add_argument(
        "--json-logs", action="store_true", help="Emit structured JSON logs on stderr"
    )
    parser.add_argument("--config", default=None, help="Path to ferry.json")
    parser.add_argument(
        "--host", default=None, help="Marathon URL, eg. http://marathon.local:8080"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    app_parser = subparsers.add_parser("app", help="Marathon application management")
    app_parser.set_defaults(help_parser=app_parser)
    app_commands = app_parser.add_subparsers(dest="app_command", metavar="COMMAND")
    add_commands(app_commands, table)
    return parser


def _fail(error: FerryError, verbose: bool) -> NoReturn:
    print(f"[-] {error.message}")
    if error.hint:
        print(f"    {error.hint}")
    if verbose and error.__traceback__ is not None:
        traceback.print_exception(error)
    sys.exit(error.exit_code)


async def async_main(argv: Optional[list[str]] = None) -> None:
    table = build_command_table()
    parser = build_parser(table)
    args = parser.parse_args(argv)
    verbose = args.verbose or args.debug

    try:
        config = load_config(args.config).with_marathon_url(args.host)
    except FerryError as e:
        _fail(e, verbose)

    # Configure logging based on flags
    if args.debug:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    else:
        level = resolve_level(config.log_level)
    configure_logging(level=level, json_format=args.json_logs)

    if args.command is None:
        parser.print_help()
        return

    spec = lookup(table, getattr(args, "command_name", None))
    if spec is None:
        args.help_parser.print_help()
        _fail(UsageError(f"'{args.help_parser.prog}' needs a command"), verbose)

    try:
        container = composition_root.create_container(config)
        await spec.handler(container, args)
    except FerryError as e:
        _fail(e, verbose)
    except Exception as e:
        logger.error("Command %s failed: %s", spec.name, e)
        print(f"[-] {spec.name.capitalize()} failed: {e}")
        if verbose:
            traceback.print_exc()
        sys.exit(1)


def main():
    try:
        asyncio.run(async_main())
    except KeyboardInterrupt:
        print("\n[*] Interrupted. Any deployment already started continues on the cluster.")
        sys.exit(130)


if __name__ == "__main__":
    main()
