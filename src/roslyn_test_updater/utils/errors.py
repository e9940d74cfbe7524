"""Exception hierarchy for the updater.

Two tiers exist:
- Fatal errors (``LogFormatError``, ``ParserStateError``) mean the log is not
  in a format the parser understands; they abort the whole run.
- Recoverable errors (``BlockLocatorError``) affect a single failed test; the
  updater logs them and moves on to the next one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from roslyn_test_updater.models.failure import SourceLocation


class UpdaterError(Exception):
    """Base exception for all updater errors."""


class LogFormatError(UpdaterError):
    """The test output contains a structurally invalid record."""


class ParserStateError(UpdaterError):
    """The log parser reached a state outside its state set."""


class BlockLocatorError(UpdaterError):
    """The expected block for a failed test could not be located.

    Attributes:
        source: Location of the failed assertion, when known.
    """

    def __init__(self, message: str, source: SourceLocation | None = None) -> None:
        super().__init__(message)
        self.source = source


class ReplacementConflictError(UpdaterError):
    """Two replacements for the same file overlap."""
