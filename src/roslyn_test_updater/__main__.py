"""Entry point for running the Roslyn test updater.

This module provides the command line interface. It handles:
- Configuration loading and CLI overrides
- Logging setup
- File system selection (real or dry run)
- Reading the test output from stdin or a file

Typical use, from the root of a Roslyn checkout:

    dotnet test ... | roslyn-test-updater
    roslyn-test-updater --input TestOutput.txt --dry-run
"""

import argparse
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

from roslyn_test_updater._version import __version__
from roslyn_test_updater.utils.errors import UpdaterError

log = structlog.get_logger()


def setup_logging(debug: bool = False, log_format: str = "console") -> None:
    """Configure structured logging.

    Args:
        debug: Enable debug logging if True
        log_format: Output format ("json" or "console")
    """
    from roslyn_test_updater.utils.logging import LogFormat, LogLevel, configure_logging

    level = LogLevel.DEBUG if debug else LogLevel.INFO
    configure_logging(level=level, log_format=LogFormat(log_format.lower()))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed argument namespace
    """
    parser = argparse.ArgumentParser(
        prog="roslyn-test-updater",
        description="Accept the actual diagnostics of failed Roslyn tests as the new baseline",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-i",
        "--input",
        type=Path,
        default=None,
        help="Read test output from this file instead of standard input",
    )

    parser.add_argument(
        "--no-playlist",
        action="store_true",
        help="Do not write the playlist of updated test classes",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print unified diffs instead of rewriting files",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to a YAML configuration file",
    )

    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--format",
        choices=["json", "console"],
        default=None,
        help="Log output format (default: console)",
    )

    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> int:
    """Run the updater with parsed arguments.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    from roslyn_test_updater.adapters.filesystem import DryRunFileSystem, LocalFileSystem
    from roslyn_test_updater.config.loader import load_config
    from roslyn_test_updater.core.updater import BaselineUpdater
    from roslyn_test_updater.utils.logging import LogEventNames, configure_logging

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        log.error("configuration_file_not_found", path=str(args.config), error=str(e))
        return 1
    except (ValueError, ValidationError) as e:
        log.error("configuration_invalid", error=str(e))
        return 1

    # Configured logging settings apply unless overridden on the command line.
    configure_logging(
        level="DEBUG" if args.debug else config.logging.level,
        log_format=args.format or config.logging.format,
    )

    if args.no_playlist:
        config.output.playlist_enabled = False

    fs = DryRunFileSystem(sys.stdout) if args.dry_run else LocalFileSystem()
    updater = BaselineUpdater(fs, config)

    try:
        if args.input is None:
            updater.run(sys.stdin)
        else:
            with args.input.open(encoding="utf-8-sig") as stream:
                updater.run(stream)
    except FileNotFoundError as e:
        log.error("input_file_not_found", path=str(args.input), error=str(e))
        return 1
    except UpdaterError as e:
        log.error(LogEventNames.RUN_ABORTED, error=str(e), error_type=type(e).__name__)
        return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    setup_logging(debug=args.debug, log_format=args.format or "console")

    try:
        return run(args)
    except KeyboardInterrupt:
        log.info("interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
