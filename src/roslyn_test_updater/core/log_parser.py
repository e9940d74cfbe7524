"""Parser for xUnit console output.

This module implements the LogParser class that scans the console output of
a test run and extracts, for every failed diagnostics assertion:
- The expected diagnostics as printed by the assertion helper
- The actual diagnostics, ready to be pasted into the test source
- The test source location, taken from the stack trace

The parser is a generator driven state machine, so it works equally well on
a log piped in while the test run is still going and on a saved log file.

Example log excerpt (prefixes shortened):

    [xUnit.net 00:00:07.38]     Ns.RefFieldTests.AssignValueTo_RefReadonlyField [FAIL]
    [xUnit.net 00:00:07.38]       Expected:
    [xUnit.net 00:00:07.38]                       Diagnostic(ErrorCode.ERR_X, "F").WithLocation(7, 9)
    [xUnit.net 00:00:07.38]       Actual:
    [xUnit.net 00:00:07.38]                       // (7,9): error CS8329: ...
    [xUnit.net 00:00:07.38]                       Diagnostic(ErrorCode.ERR_Y, "F").WithLocation(7, 9)
    [xUnit.net 00:00:07.38]       Diff:
    [xUnit.net 00:00:07.38]       ...
    [xUnit.net 00:00:07.38]       Stack Trace:
    [xUnit.net 00:00:07.38]         C:\\...\\DiagnosticExtensions.cs(98,0): at Microsoft.CodeAnalysis.DiagnosticExtensions.Verify(...)
    [xUnit.net 00:00:07.38]         C:\\...\\RefFieldTests.cs(3946,0): at Ns.RefFieldTests.AssignValueTo_RefReadonlyField()
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator
from enum import Enum, auto

import structlog

from roslyn_test_updater.config.schema import MarkersConfig
from roslyn_test_updater.core.line_reader import LineReader
from roslyn_test_updater.models.failure import ParsingResult, SourceLocation
from roslyn_test_updater.utils.errors import LogFormatError, ParserStateError
from roslyn_test_updater.utils.logging import LogEventNames

log = structlog.get_logger()


class ParserState(Enum):
    """States of the log parser."""

    SEARCHING = auto()
    FOUND_FAILED_TEST = auto()
    FOUND_EXPECTED = auto()
    FOUND_ACTUAL = auto()
    AFTER_ACTUAL = auto()
    FOUND_STACK_TRACE = auto()


class LogParser:
    """Extracts failed diagnostics assertions from test output.

    Responsibilities:
    - Strip the test runner's line prefix and indentation
    - Collect the expected and actual diagnostics of each failed test
    - Pick the test method frame out of the stack trace
    - Signal when a new test run starts in a concatenated log

    Example:
        parser = LogParser()
        for result in parser.parse(sys.stdin):
            print(result.source.qualified_name)
    """

    STACK_FRAME_PATTERN = re.compile(
        r"^(?P<path>.+?)\((?P<line>[^(),\s]+),(?P<column>[^(),\s]+)\): at "
        r"(?P<member>(?:[^\s.(]+\.)+[^\s.(]+)\("
    )
    GENERIC_ARGUMENTS_PATTERN = re.compile(r"\[[^\]]*\]$")

    def __init__(self, markers: MarkersConfig | None = None) -> None:
        """Initialize the LogParser.

        Args:
            markers: Line markers to look for (xUnit defaults if omitted)
        """
        self._markers = markers or MarkersConfig()

    def strip_prefix(self, line: str) -> str:
        """Remove the runner's line prefix and leading whitespace.

        Args:
            line: Raw log line

        Returns:
            The meaningful part of the line
        """
        prefix = self._markers.line_prefix
        if prefix and line.startswith(prefix):
            bracket = line.find("]")
            if bracket >= 0:
                line = line[bracket + 1 :]
        return line.lstrip()

    def parse_frame(self, line: str) -> SourceLocation | None:
        """Parse a single stack trace line.

        Args:
            line: Raw log line

        Returns:
            SourceLocation, or None if the line is not a stack frame

        Raises:
            LogFormatError: If the line/column fields are not integers
        """
        match = self.STACK_FRAME_PATTERN.match(self.strip_prefix(line))
        if not match:
            return None

        try:
            line_number = int(match.group("line"))
            column = int(match.group("column"))
        except ValueError as e:
            raise LogFormatError(f"Malformed stack trace location: {line.strip()}") from e

        *namespace, class_name, method_name = match.group("member").split(".")
        return SourceLocation(
            file_path=match.group("path").strip(),
            line=line_number,
            column=column,
            namespace=".".join(namespace),
            class_name=class_name,
            method_name=self.GENERIC_ARGUMENTS_PATTERN.sub("", method_name),
        )

    def parse(
        self,
        lines: Iterable[str],
        on_new_run: Callable[[], None] | None = None,
    ) -> Iterator[ParsingResult]:
        """Lazily extract failed assertions from test output.

        Args:
            lines: Log lines, with or without line terminators
            on_new_run: Called whenever the log announces a new test run

        Yields:
            One ParsingResult per failed assertion with a stack trace

        Raises:
            LogFormatError: If a stack frame has non-numeric fields
            ParserStateError: If the state machine is corrupted
        """
        markers = self._markers
        state = ParserState.SEARCHING
        failed_test = ""
        expected: list[str] | None = None
        actual: list[str] = []
        last_frame: SourceLocation | None = None

        iterator = iter(lines)
        pending: str | None = None
        while True:
            # The line that ended a stack trace is looked at again while searching.
            if pending is not None:
                line, pending = pending, None
            else:
                raw = next(iterator, None)
                if raw is None:
                    break
                line = raw.rstrip("\r\n")
            marker_line = line.rstrip()

            if state is ParserState.SEARCHING:
                if markers.run_started and marker_line.endswith(markers.run_started):
                    log.info(LogEventNames.RUN_RESTARTED)
                    if on_new_run is not None:
                        on_new_run()
                    continue
                if marker_line.endswith(markers.failed_test):
                    failed_test = self.strip_prefix(marker_line)[: -len(markers.failed_test)]
                    log.debug(LogEventNames.FAILED_TEST_FOUND, test=failed_test)
                    expected = None
                    state = ParserState.FOUND_FAILED_TEST

            elif state is ParserState.FOUND_FAILED_TEST:
                if marker_line.endswith(markers.failed_test):
                    log.debug(LogEventNames.FAILED_TEST_WITHOUT_DIAGNOSTICS, test=failed_test)
                    failed_test = self.strip_prefix(marker_line)[: -len(markers.failed_test)]
                    log.debug(LogEventNames.FAILED_TEST_FOUND, test=failed_test)
                elif marker_line.endswith(markers.expected):
                    expected = []
                    state = ParserState.FOUND_EXPECTED
                elif marker_line.endswith(markers.actual):
                    actual = []
                    state = ParserState.FOUND_ACTUAL

            elif state is ParserState.FOUND_EXPECTED:
                if marker_line.endswith(markers.actual):
                    actual = []
                    state = ParserState.FOUND_ACTUAL
                elif expected is not None:
                    text = self.strip_prefix(marker_line)
                    if text:
                        expected.append(text)

            elif state is ParserState.FOUND_ACTUAL:
                if marker_line.endswith(markers.diff):
                    state = ParserState.AFTER_ACTUAL
                else:
                    actual.append(self.strip_prefix(marker_line))

            elif state is ParserState.AFTER_ACTUAL:
                if marker_line.endswith(markers.stack_trace):
                    last_frame = None
                    state = ParserState.FOUND_STACK_TRACE

            elif state is ParserState.FOUND_STACK_TRACE:
                frame = self.parse_frame(line)
                if frame is not None:
                    last_frame = frame
                    continue
                if last_frame is not None:
                    yield self._build_result(expected, actual, last_frame)
                last_frame = None
                pending = line
                state = ParserState.SEARCHING

            else:
                raise ParserStateError(f"Unexpected state: {state}")

        if state is ParserState.FOUND_STACK_TRACE and last_frame is not None:
            yield self._build_result(expected, actual, last_frame)

    def parse_text(
        self,
        text: str,
        on_new_run: Callable[[], None] | None = None,
    ) -> Iterator[ParsingResult]:
        """Parse test output that is already in memory."""
        return self.parse(LineReader(text).lines(), on_new_run)

    def _build_result(
        self,
        expected: list[str] | None,
        actual: list[str],
        source: SourceLocation,
    ) -> ParsingResult:
        result = ParsingResult(
            expected_lines=tuple(expected) if expected is not None else None,
            actual_text="".join(f"{line}\n" for line in actual),
            source=source,
        )
        log.debug(
            LogEventNames.FAILED_TEST_PARSED,
            test=source.qualified_name,
            location=str(source),
            expected=len(expected) if expected is not None else None,
        )
        return result
