"""Entry point for the console CLI (python -m maaconsole)."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import pydantic

from .catalog import CONTROL_ACTIONS
from .commands import EXIT_FAILURE, EXIT_USAGE, CommandContext, execute
from .config.models import ConsoleSettings, expand_path
from .config.setup import setup_logging, verbosity_level
from .presentation import AlwaysConfirm, TerminalConfirm

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="maaconsole",
        description="Control console for the emulator and MAA backend",
    )

    parser.add_argument(
        "-c", "--config-path",
        type=Path,
        default=None,
        help="Path to the console configuration file (YAML/JSON)"
    )
    parser.add_argument(
        "--logging-config",
        type=Path,
        default=None,
        help="Path to logging configuration file (.ini)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Verbosity level: -v (INFO), -vv (DEBUG)"
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.add_parser("actions", help="List the available control actions")
    subparsers.add_parser("status", help="Show the status of every component")

    logs = subparsers.add_parser("logs", help="Show buffered backend logs")
    logs.add_argument(
        "--level",
        choices=("all", "info", "warn", "error"),
        default="all",
        help="Only show entries of this level"
    )

    run = subparsers.add_parser("run", help="Run a control action")
    run.add_argument(
        "action",
        metavar="ACTION",
        help="Action key: " + ", ".join(a.key for a in CONTROL_ACTIONS)
    )
    run.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")
    run.add_argument("--copy", action="store_true", help="Copy the command output to the clipboard")

    subparsers.add_parser("watch", help="Follow logs and status changes live")

    return parser


def show_version() -> int:
    """Show version information."""
    try:
        from importlib.metadata import version
        ver = version("maaconsole")
    except Exception:
        ver = "unknown"
    print(f"maaconsole version {ver}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.version:
        return show_version()

    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = ConsoleSettings.load(args.config_path)
    except pydantic.ValidationError as e:
        print(f"Invalid console settings: {e}", file=sys.stderr)
        return EXIT_USAGE

    logging_config = expand_path(args.logging_config) if args.logging_config else None
    level = verbosity_level(args.verbose) if args.verbose else settings.log_level
    setup_logging(level, logging_config=logging_config)

    options = {
        key: value for key, value in vars(args).items()
        if key not in ("command", "config_path", "logging_config", "verbose", "version")
    }
    ctx = CommandContext(
        command=args.command,
        settings=settings,
        options=options,
        confirm=AlwaysConfirm() if options.get("yes") else TerminalConfirm(),
    )

    try:
        return asyncio.run(execute(ctx))
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    except Exception:
        logger.exception("Error executing command")
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
