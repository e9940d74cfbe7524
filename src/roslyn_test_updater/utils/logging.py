"""Structured logging configuration.

This module provides logging configuration for the updater:
- Configurable log levels and output formats (JSON/console)
- Context injection for correlation (service, version, bound test context)

Log output goes to stderr so that ``--dry-run`` patches on stdout stay clean.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from enum import StrEnum
from typing import Any

import structlog


class LogFormat(StrEnum):
    """Log output format options."""

    JSON = "json"
    CONSOLE = "console"


class LogLevel(StrEnum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def add_context_processor(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Add contextual information to all log entries.

    Adds standard fields for correlation and debugging:
    - service: Always "roslyn-test-updater"
    - version: Current application version (if available)

    Args:
        logger: Logger instance (unused)
        method_name: Log method name (unused)
        event_dict: Event dictionary to process

    Returns:
        Event dictionary with added context
    """
    event_dict["service"] = "roslyn-test-updater"

    try:
        from roslyn_test_updater._version import __version__

        event_dict["version"] = __version__
    except (ImportError, RuntimeError):
        pass

    return event_dict


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    log_format: LogFormat | str = LogFormat.CONSOLE,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)

    Example:
        # Interactive use (colored console output)
        configure_logging(level="DEBUG", log_format="console")

        # CI pipelines (JSON for log aggregation)
        configure_logging(level="INFO", log_format="json")
    """
    if isinstance(level, str):
        level = LogLevel(level.upper())
    if isinstance(log_format, str):
        log_format = LogFormat(log_format.lower())

    numeric_level = getattr(logging, level.value)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_context_processor,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == LogFormat.JSON:
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(), exception_formatter=structlog.dev.plain_traceback
            )
        )

    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)

    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
        handlers=[console_handler],
        force=True,
    )


def bind_context(**kwargs: Any) -> None:
    """Bind contextual variables for all subsequent log calls.

    Example:
        bind_context(test="Ns.Class.Method", file="Class.cs")
        log.warning("block_not_found")  # Includes test and file
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove contextual variables.

    Args:
        *keys: Keys to unbind
    """
    structlog.contextvars.unbind_contextvars(*keys)


class LogEventNames:
    """Standard log event names for consistency."""

    # Run lifecycle
    RUN_STARTING = "run_starting"
    RUN_RESTARTED = "test_run_restarted"
    RUN_COMPLETE = "run_complete"
    RUN_ABORTED = "run_aborted"

    # Log parsing
    FAILED_TEST_FOUND = "failed_test_found"
    FAILED_TEST_WITHOUT_DIAGNOSTICS = "failed_test_without_diagnostics"
    FAILED_TEST_PARSED = "failed_test_parsed"

    # Block location
    DUPLICATE_TEST_SKIPPED = "duplicate_test_skipped"
    SOURCE_UNREADABLE = "source_file_unreadable"
    BLOCK_NOT_FOUND = "expected_block_not_found"
    BLOCK_LOCATED = "expected_block_located"
    REPLACEMENT_CONFLICT = "replacement_conflict"

    # Output
    FILE_WRITTEN = "file_written"
    DRY_RUN_PATCH_WRITTEN = "dry_run_patch_written"
    PLAYLIST_WRITTEN = "playlist_written"
    PLAYLIST_SKIPPED = "playlist_skipped"
