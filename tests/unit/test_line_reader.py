"""Tests for LineReader functionality."""

import pytest

from roslyn_test_updater.core.line_reader import Line, LineReader


class TestReadLine:
    """Tests for read_line and the current line."""

    def test_reads_lines_with_offsets(self) -> None:
        """Test offsets point at the line text and its terminator."""
        text = "first\nsecond\n"
        reader = LineReader(text)

        assert reader.read_line() is True
        assert reader.current == Line("first", 0, 5, "\n", 1)
        assert reader.read_line() is True
        assert reader.current == Line("second", 6, 12, "\n", 2)
        assert text[reader.current.start : reader.current.end] == "second"
        assert reader.read_line() is False

    def test_mixed_terminators(self) -> None:
        """Test CRLF, CR and LF all end a line."""
        reader = LineReader("a\r\nb\rc\nd")
        newlines = []
        while reader.read_line():
            newlines.append(reader.current.newline)

        assert newlines == ["\r\n", "\r", "\n", ""]

    def test_last_line_without_terminator(self) -> None:
        """Test the final unterminated line is still a line."""
        reader = LineReader("a\nb")
        reader.read_line()
        reader.read_line()

        assert reader.current.text == "b"
        assert reader.current.newline == ""
        assert reader.at_end is True

    def test_empty_buffer_has_no_lines(self) -> None:
        """Test an empty buffer yields nothing."""
        reader = LineReader("")
        assert reader.read_line() is False
        assert reader.at_end is True

    def test_current_before_read_raises(self) -> None:
        """Test accessing current before reading is an error."""
        with pytest.raises(ValueError, match="No line has been read"):
            _ = LineReader("a").current

    def test_blank_lines_are_kept(self) -> None:
        """Test consecutive terminators produce empty lines."""
        assert list(LineReader("a\n\n\nb\n").lines()) == ["a", "", "", "b"]


class TestPeekAndSkip:
    """Tests for peek_line and skip."""

    def test_peek_does_not_consume(self) -> None:
        """Test peek returns the next line but keeps the cursor."""
        reader = LineReader("a\nb\n")
        reader.read_line()

        peeked = reader.peek_line()
        assert peeked is not None
        assert peeked.text == "b"
        assert peeked.number == 2
        assert reader.current.text == "a"
        assert reader.read_line() is True
        assert reader.current == peeked

    def test_peek_at_end(self) -> None:
        """Test peek returns None after the last line."""
        reader = LineReader("a")
        reader.read_line()
        assert reader.peek_line() is None

    def test_skip_counts_lines(self) -> None:
        """Test skip reports how many lines were actually read."""
        reader = LineReader("1\n2\n3\n")
        assert reader.skip(2) == 2
        assert reader.current.number == 2
        assert reader.skip(5) == 1
        assert reader.skip(0) == 0


class TestLine:
    """Tests for Line helpers."""

    def test_indent(self) -> None:
        """Test indent is the leading whitespace."""
        assert Line("\t  code  ", 0, 9, "\n", 1).indent == "\t  "
        assert Line("code", 0, 4, "\n", 1).indent == ""

    def test_is_blank(self) -> None:
        """Test whitespace-only lines are blank."""
        assert Line("   ", 0, 3, "\n", 1).is_blank is True
        assert Line(" x ", 0, 3, "\n", 1).is_blank is False
