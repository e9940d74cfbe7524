"""Snapshot update pipeline orchestrator.

This module implements the BaselineUpdater class that coordinates a run:
1. Parse failed tests from the test output
2. Skip tests already seen in this run
3. Read (and cache) the test source file
4. Locate the expected block and compute its replacement
5. Once the whole log is consumed, rewrite every touched file
6. Write the playlist of touched classes

Recoverable problems with a single test are logged and skipped; only a log
the parser cannot understand aborts the run.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING

import structlog

from roslyn_test_updater.config.schema import UpdaterConfig
from roslyn_test_updater.core.block_locator import BlockLocator
from roslyn_test_updater.core.log_parser import LogParser
from roslyn_test_updater.core.playlist import PlaylistWriter
from roslyn_test_updater.core.rewriter import RewriteApplier
from roslyn_test_updater.models.failure import FailedTestId, ParsingResult
from roslyn_test_updater.models.replacement import Replacement
from roslyn_test_updater.utils.errors import BlockLocatorError
from roslyn_test_updater.utils.logging import LogEventNames, bind_context, unbind_context

if TYPE_CHECKING:
    from roslyn_test_updater.interfaces.filesystem import FileSystem

log = structlog.get_logger()


@dataclass
class UpdateSummary:
    """Counters describing one run."""

    failed_tests: int = 0
    updated: int = 0
    skipped: int = 0
    duplicates: int = 0
    files_written: int = 0
    playlist_path: str | None = None

    def as_dict(self) -> dict[str, int | str | None]:
        return asdict(self)


@dataclass
class RunContext:
    """State that lives for the duration of one run.

    The file cache survives ``reset`` because nothing has been written yet
    when a new test run starts in the same log.
    """

    cache: dict[str, str] = field(default_factory=dict)
    replacements: dict[str, list[Replacement]] = field(default_factory=dict)
    seen_tests: set[FailedTestId] = field(default_factory=set)
    touched_classes: dict[str, None] = field(default_factory=dict)
    summary: UpdateSummary = field(default_factory=UpdateSummary)

    def reset(self) -> None:
        """Forget everything collected from a previous test run."""
        self.replacements.clear()
        self.seen_tests.clear()
        self.touched_classes.clear()
        self.summary = UpdateSummary()

    def add_replacement(self, path: str, replacement: Replacement) -> bool:
        """Collect a replacement unless it overlaps one already collected.

        Returns:
            True if the replacement was added
        """
        pending = self.replacements.setdefault(path, [])
        if any(existing.overlaps(replacement) for existing in pending):
            return False
        pending.append(replacement)
        return True


class BaselineUpdater:
    """Rewrites failed tests' expected diagnostics to the actual ones.

    Example:
        updater = BaselineUpdater(LocalFileSystem())
        summary = updater.run(sys.stdin)
        print(f"{summary.updated} tests updated")
    """

    def __init__(self, fs: FileSystem, config: UpdaterConfig | None = None) -> None:
        """Initialize the BaselineUpdater.

        Args:
            fs: File system used for all reads and writes
            config: Updater configuration (defaults if omitted)
        """
        self._fs = fs
        self._config = config or UpdaterConfig()
        self._parser = LogParser(self._config.markers)
        self._locator = BlockLocator(self._config.locator)
        self._applier = RewriteApplier(fs, self._config.output.encoding)
        self._playlist = PlaylistWriter(fs, self._config.output.playlist_name)

    def run(self, lines: Iterable[str]) -> UpdateSummary:
        """Process a whole test output and rewrite the affected files.

        Args:
            lines: Test output lines (a text stream works)

        Returns:
            Summary of the last test run found in the output

        Raises:
            LogFormatError: If the test output is malformed
            ParserStateError: If the parser reaches an unknown state
        """
        context = RunContext()
        log.info(LogEventNames.RUN_STARTING)

        for result in self._parser.parse(lines, on_new_run=context.reset):
            self.process(result, context)

        context.summary.files_written = self._applier.write_all(
            context.replacements, context.cache
        )

        if self._config.output.playlist_enabled:
            context.summary.playlist_path = self._playlist.write(context.touched_classes)

        log.info(LogEventNames.RUN_COMPLETE, **context.summary.as_dict())
        return context.summary

    def process(self, result: ParsingResult, context: RunContext) -> Replacement | None:
        """Turn one failed test into a pending replacement.

        Args:
            result: Parsed failed test
            context: Current run state

        Returns:
            The collected replacement, or None if the test was skipped
        """
        source = result.source
        context.summary.failed_tests += 1

        if source.test_id in context.seen_tests:
            log.warning(LogEventNames.DUPLICATE_TEST_SKIPPED, test=source.qualified_name)
            context.summary.duplicates += 1
            return None
        context.seen_tests.add(source.test_id)

        bind_context(test=source.qualified_name, location=str(source))
        try:
            try:
                contents = self._read_cached(source.file_path, context)
            except OSError as e:
                log.warning(LogEventNames.SOURCE_UNREADABLE, error=str(e))
                context.summary.skipped += 1
                return None

            try:
                replacement = self._locator.locate(result, contents)
            except BlockLocatorError as e:
                log.warning(LogEventNames.BLOCK_NOT_FOUND, reason=str(e))
                context.summary.skipped += 1
                return None

            if not context.add_replacement(source.file_path, replacement):
                log.warning(
                    LogEventNames.REPLACEMENT_CONFLICT,
                    start=replacement.start,
                    end=replacement.end,
                )
                context.summary.skipped += 1
                return None
        finally:
            unbind_context("test", "location")

        context.touched_classes[source.qualified_class_name] = None
        context.summary.updated += 1
        return replacement

    def _read_cached(self, path: str, context: RunContext) -> str:
        if path not in context.cache:
            context.cache[path] = self._fs.read_text(path)
        return context.cache[path]
