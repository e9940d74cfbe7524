"""Utility functions and helpers.

This module provides:
- errors: Exception hierarchy (fatal vs. recoverable)
- logging: Structured logging configuration
"""

from roslyn_test_updater.utils.errors import (
    BlockLocatorError,
    LogFormatError,
    ParserStateError,
    ReplacementConflictError,
    UpdaterError,
)
from roslyn_test_updater.utils.logging import (
    LogEventNames,
    LogFormat,
    LogLevel,
    bind_context,
    configure_logging,
    unbind_context,
)

__all__ = [
    # Errors
    "BlockLocatorError",
    "LogFormatError",
    "ParserStateError",
    "ReplacementConflictError",
    "UpdaterError",
    # Logging
    "LogEventNames",
    "LogFormat",
    "LogLevel",
    "bind_context",
    "configure_logging",
    "unbind_context",
]
