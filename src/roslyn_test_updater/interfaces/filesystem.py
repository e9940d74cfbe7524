"""Abstract interface for file system access."""

from typing import Protocol, TextIO


class FileSystem(Protocol):
    """Minimal file system capability used by the updater.

    The updater never touches the disk directly, so tests and ``--dry-run``
    can substitute their own implementation.
    """

    def read_text(self, path: str) -> str:
        """
        Read a whole text file.

        Implementations must strip a UTF-8 byte-order mark and must not
        translate line terminators, since replacement offsets are computed
        on the exact contents.

        Args:
            path: Path as reported in the test output

        Returns:
            File contents

        Raises:
            OSError: If the file cannot be read
        """
        ...

    def write_text(self, path: str, contents: str, encoding: str) -> None:
        """
        Replace a text file's contents.

        Args:
            path: Path as reported in the test output
            contents: New contents, line terminators already in place
            encoding: Python codec name (``utf-8-sig`` writes a BOM)
        """
        ...

    def create_text(self, path: str) -> TextIO:
        """
        Create (or truncate) a UTF-8 text file and return a writable stream.

        The caller closes the stream, usually with a ``with`` block.
        """
        ...

    def get_full_path(self, path: str) -> str:
        """Resolve a path relative to the current working directory."""
        ...
