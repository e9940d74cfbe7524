"""Locates the expected diagnostics block in a test source file.

This module implements the BlockLocator class that, given a failed test's
source location and the original file contents, finds the argument list of
the verification call and computes the Replacement that swaps the expected
diagnostics for the actual ones.

There is no C# parser involved. The locator relies on a handful of line
heuristics that hold for the way Roslyn tests are written:
- The verification call is found by a textual clue (``.VerifyDiagnostics(``)
  at or after the line reported in the stack trace.
- The expected diagnostics start on the line after the call and share one
  indentation level; the first line that is less (or more) indented ends them.
- The call's closing ``)`` / ``);`` is either appended to the last diagnostic
  or stands alone on the last line of the block.

Supported call shapes:

    comp.VerifyDiagnostics();          comp.VerifyDiagnostics(
                                           );

    comp.VerifyDiagnostics(            comp.VerifyDiagnostics(
        // (5,34): error CS1065: ...           Diagnostic(...).WithLocation(5, 31));
        Diagnostic(...).WithLocation(5, 34)
        );
"""

from __future__ import annotations

import re
from collections import deque

import structlog

from roslyn_test_updater.config.schema import LocatorConfig
from roslyn_test_updater.core.line_reader import Line, LineReader
from roslyn_test_updater.models.failure import ParsingResult, SourceLocation
from roslyn_test_updater.models.replacement import Replacement
from roslyn_test_updater.utils.errors import BlockLocatorError
from roslyn_test_updater.utils.logging import LogEventNames

log = structlog.get_logger()

CLOSING_ONLY = re.compile(r"\)+;?")
EMPTY_ARGUMENTS = re.compile(r"\(\s*\)")


def scan_code(line: str) -> tuple[str, int]:
    """Split off a trailing ``//`` comment and count unmatched ``)``.

    String and char literals are skipped, including verbatim strings.

    Args:
        line: A line of C# source

    Returns:
        Tuple of (code without comment, number of unmatched closing parentheses)
    """
    depth = unmatched = 0
    quote: str | None = None
    verbatim = False
    i = 0
    while i < len(line):
        ch = line[i]
        if quote is not None:
            if ch == "\\" and not verbatim:
                i += 1
            elif ch == quote:
                if verbatim and line.startswith(quote, i + 1):
                    i += 1
                else:
                    quote = None
        elif ch in "\"'":
            quote = ch
            verbatim = ch == '"' and "@" in line[max(i - 2, 0) : i]
        elif line.startswith("//", i):
            return line[:i], unmatched
        elif ch == "(":
            depth += 1
        elif ch == ")":
            if depth:
                depth -= 1
            else:
                unmatched += 1
        i += 1
    return line, unmatched


def normalize_diagnostic(line: str) -> str:
    """Reduce a diagnostic line to a form comparable with the logged one.

    Whitespace, trailing comments, separators and the call's own closing
    parentheses are removed.
    """
    code, unmatched = scan_code(line)
    code = "".join(code.split()).rstrip(";,")
    while unmatched and code.endswith(")"):
        code = code[:-1]
        unmatched -= 1
    return code.rstrip(",")


def is_comment(text: str) -> bool:
    return text.lstrip().startswith("//")


def closing_of(text: str) -> tuple[str, bool]:
    """Compute the closing punctuation a block line carries for its call.

    Returns:
        Tuple of (closing text such as ``);``, whether it stands alone on the line)
    """
    code, unmatched = scan_code(text)
    code = code.strip()
    closing = ")" * unmatched + (";" if code.endswith(";") else "")
    return closing, bool(closing) and CLOSING_ONLY.fullmatch(code) is not None


class _ExpectedMatcher:
    """Checks block lines against the logged expected diagnostics."""

    def __init__(self, expected: tuple[str, ...] | None, source: SourceLocation) -> None:
        self._source = source
        self._pending: deque[str] | None = None
        if expected is not None:
            self._pending = deque(
                normalize_diagnostic(line)
                for line in expected
                if line.strip() and not is_comment(line)
            )

    def feed(self, line: Line) -> None:
        if self._pending is None:
            return
        if not self._pending:
            raise BlockLocatorError(
                f"Unexpected line {line.number} after all expected diagnostics: "
                f"{line.text.strip()}",
                self._source,
            )
        wanted = self._pending.popleft()
        if normalize_diagnostic(line.text) != wanted:
            raise BlockLocatorError(
                f"Line {line.number} does not match the expected diagnostic: "
                f"{line.text.strip()}",
                self._source,
            )

    def finish(self, line_number: int) -> None:
        if self._pending:
            raise BlockLocatorError(
                f"Block ends at line {line_number} with {len(self._pending)} "
                "expected diagnostic(s) not found",
                self._source,
            )


class BlockLocator:
    """Finds the expected block of a failed test and builds its Replacement.

    Responsibilities:
    - Find the verification call at or after the reported line
    - Decide the call's shape (empty call or indented argument block)
    - Verify the block matches the logged expected diagnostics
    - Render the actual diagnostics with the file's indentation and newlines

    Example:
        locator = BlockLocator()
        replacement = locator.locate(result, contents)
    """

    def __init__(self, config: LocatorConfig | None = None) -> None:
        """Initialize the BlockLocator.

        Args:
            config: Locator heuristics (defaults if omitted)
        """
        self._config = config or LocatorConfig()

    def locate(self, result: ParsingResult, contents: str) -> Replacement:
        """Compute the replacement for one failed test.

        Args:
            result: Parsed failed test
            contents: Original contents of the test source file

        Returns:
            Replacement against ``contents``

        Raises:
            BlockLocatorError: If the file does not have the expected shape
        """
        source = result.source
        reader = LineReader(contents)

        skipped = reader.skip(source.line - 1)
        if skipped < source.line - 1:
            raise BlockLocatorError(
                f"Cannot find {source}; the file ends on line {skipped}", source
            )

        clue_index = self._find_clue(reader, source)
        call = reader.current
        open_index = call.text.find("(", clue_index)

        empty = EMPTY_ARGUMENTS.match(call.text, open_index)
        if empty is not None:
            # Verify(  ) -> replace what is between the parentheses.
            replacement = Replacement(
                call.start + empty.start() + 1,
                call.start + empty.end() - 2,
                self._empty_call_body(result, call),
            )
        elif call.text[open_index + 1 :].strip():
            raise BlockLocatorError(
                f"Arguments start on the call line {call.number}; unsupported shape", source
            )
        else:
            following = reader.peek_line()
            if following is not None and CLOSING_ONLY.fullmatch(following.text.strip()):
                # Verify(\n    ); -> pull the closing text up behind the last diagnostic.
                replacement = Replacement(
                    call.start + len(call.text.rstrip()),
                    following.end - 1,
                    self._empty_call_body(result, call) + following.text.strip(),
                )
            else:
                replacement = self._replace_block(result, reader)

        log.debug(
            LogEventNames.BLOCK_LOCATED,
            location=str(source),
            call_line=call.number,
            start=replacement.start,
            end=replacement.end,
        )
        return replacement

    def _find_clue(self, reader: LineReader, source: SourceLocation) -> int:
        """Advance to the verification call and return the clue's column."""
        while reader.read_line():
            text = reader.current.text
            if is_comment(text):
                continue
            found = [index for clue in self._config.clues if (index := text.find(clue)) >= 0]
            if found:
                return min(found)
        raise BlockLocatorError(
            f"Unexpected EOF while searching for the verification call after {source}",
            source,
        )

    def _empty_call_body(self, result: ParsingResult, call: Line) -> str:
        """Render the actual diagnostics for a call without arguments."""
        source = result.source
        if result.expected_lines is not None and not result.expects_nothing:
            raise BlockLocatorError(
                f"Call on line {call.number} has no arguments, but "
                f"{len(result.expected_lines)} expected line(s) were logged",
                source,
            )
        if result.actual_is_empty:
            raise BlockLocatorError(
                f"Nothing to update; call on line {call.number} already expects nothing",
                source,
            )

        newline = call.newline or "\n"
        return newline + self._render(result.actual_text, self._nested_indent(call), newline)

    def _replace_block(self, result: ParsingResult, reader: LineReader) -> Replacement:
        """Replace the indented argument block following the call line."""
        source = result.source
        call = reader.current

        if not reader.read_line():
            raise BlockLocatorError(f"Unexpected EOF just after {source}", source)
        first = reader.current
        indent = first.indent
        if not indent:
            raise BlockLocatorError(
                f"No indentation found on line {first.number}; unsupported shape", source
            )
        newline = first.newline or call.newline or "\n"

        matcher = _ExpectedMatcher(
            result.expected_lines if self._config.verify_expected else None, source
        )
        last_line: Line | None = None
        last_code: Line | None = None
        line = first
        while True:
            if not line.is_blank:
                last_line = line
                if not is_comment(line.text):
                    last_code = line
                    if not CLOSING_ONLY.fullmatch(scan_code(line.text)[0].strip()):
                        matcher.feed(line)
            if not reader.read_line():
                raise BlockLocatorError(
                    f"Unexpected EOF while scanning the block at {source}", source
                )
            line = reader.current
            if not self._continues_block(line, indent):
                break
        matcher.finish(line.number)

        if last_line is None:
            raise BlockLocatorError(f"Cannot locate the expected block at {source}", source)

        closing, standalone = closing_of(last_code.text) if last_code else ("", False)

        if result.actual_is_empty:
            # The test now expects nothing: collapse the call to Verify().
            start = call.start + len(call.text.rstrip())
            end = last_line.end - 1
            if not closing and CLOSING_ONLY.fullmatch(line.text.strip()):
                closing = line.text.strip()
                end = line.end - 1
            return Replacement(start, end, closing)

        target = self._render(result.actual_text, indent, newline)
        if standalone:
            target += newline + indent + closing
        else:
            target += closing
        return Replacement(first.start, last_line.end - 1, target)

    @staticmethod
    def _continues_block(line: Line, indent: str) -> bool:
        if line.is_blank:
            return True
        return line.text.startswith(indent) and not line.text[len(indent)].isspace()

    def _nested_indent(self, call: Line) -> str:
        """Indentation one level deeper than the call line."""
        unit = "\t" if "\t" in call.indent else self._config.indent_unit
        return call.indent + unit

    @staticmethod
    def _render(actual_text: str, indent: str, newline: str) -> str:
        """Re-indent the logged actual text for insertion into the source."""
        lines = actual_text.splitlines()
        while lines and not lines[-1].strip():
            lines.pop()
        while lines and not lines[0].strip():
            lines.pop(0)
        return newline.join(indent + line.strip() if line.strip() else "" for line in lines)
