"""Line cursor over an in-memory text buffer."""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import NamedTuple


class Line(NamedTuple):
    """A single line of a text buffer.

    ``start`` and ``end`` are offsets into the buffer; ``end`` points at the
    line terminator (or the end of the buffer), so ``text == buffer[start:end]``.
    """

    text: str
    start: int
    end: int
    newline: str  # "" for a final line without terminator
    number: int  # 1-based

    @property
    def indent(self) -> str:
        """Leading whitespace of the line."""
        return self.text[: len(self.text) - len(self.text.lstrip())]

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


class LineReader:
    """Forward-only cursor over the lines of a string.

    Offsets are kept so that callers can build replacements against the
    original buffer. All of ``\\r\\n``, ``\\r`` and ``\\n`` end a line.

    Example:
        reader = LineReader(contents)
        while reader.read_line():
            print(reader.current.number, reader.current.text)
    """

    END_OF_LINE = re.compile(r"\r\n|\r|\n")

    def __init__(self, text: str) -> None:
        self._text = text
        self._position = 0
        self._number = 0
        self._current: Line | None = None

    @property
    def current(self) -> Line:
        """The line returned by the last successful ``read_line``."""
        if self._current is None:
            raise ValueError("No line has been read yet")
        return self._current

    @property
    def at_end(self) -> bool:
        return self._position >= len(self._text)

    def _line_at(self, position: int, number: int) -> Line | None:
        if position >= len(self._text):
            return None
        match = self.END_OF_LINE.search(self._text, position)
        if match is None:
            return Line(self._text[position:], position, len(self._text), "", number)
        return Line(
            self._text[position : match.start()],
            position,
            match.start(),
            match.group(),
            number,
        )

    def read_line(self) -> bool:
        """Advance to the next line.

        Returns:
            False when the buffer is exhausted, True otherwise
        """
        line = self._line_at(self._position, self._number + 1)
        if line is None:
            return False
        self._current = line
        self._position = line.end + len(line.newline)
        self._number = line.number
        return True

    def peek_line(self) -> Line | None:
        """Return the next line without consuming it."""
        return self._line_at(self._position, self._number + 1)

    def skip(self, count: int) -> int:
        """Read up to ``count`` lines and return how many were read."""
        skipped = 0
        while skipped < count and self.read_line():
            skipped += 1
        return skipped

    def lines(self) -> Iterator[str]:
        """Yield the text of every remaining line."""
        while self.read_line():
            yield self.current.text
