"""Applies replacements to file contents and persists the result."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from operator import attrgetter
from typing import TYPE_CHECKING

import structlog

from roslyn_test_updater.models.replacement import Replacement
from roslyn_test_updater.utils.errors import ReplacementConflictError
from roslyn_test_updater.utils.logging import LogEventNames

if TYPE_CHECKING:
    from roslyn_test_updater.interfaces.filesystem import FileSystem

log = structlog.get_logger()


def apply_replacements(contents: str, replacements: Iterable[Replacement]) -> str:
    """Apply replacements computed against the original ``contents``.

    Replacements are applied in ascending start order; a running delta shifts
    each one by the size change of those applied before it.

    Args:
        contents: Original file contents
        replacements: Non-overlapping replacements in any order

    Returns:
        The rewritten contents

    Raises:
        ReplacementConflictError: If two replacements overlap
    """
    ordered = sorted(replacements, key=attrgetter("start"))
    for previous, current in zip(ordered, ordered[1:]):
        if previous.overlaps(current):
            raise ReplacementConflictError(
                f"Replacements at {previous.start}..{previous.end} and "
                f"{current.start}..{current.end} overlap"
            )

    delta = 0
    for replacement in ordered:
        start = replacement.start + delta
        end = replacement.end + delta
        contents = contents[:start] + replacement.target + contents[end + 1 :]
        delta += len(replacement.target) - replacement.length
    return contents


class RewriteApplier:
    """Writes every file that has pending replacements.

    Example:
        applier = RewriteApplier(LocalFileSystem())
        applier.write_all(replacements_by_file, cache)
    """

    def __init__(self, fs: FileSystem, encoding: str = "utf-8-sig") -> None:
        """Initialize the RewriteApplier.

        Args:
            fs: File system used to persist the files
            encoding: Encoding of the rewritten files (UTF-8 with BOM by default)
        """
        self._fs = fs
        self._encoding = encoding

    def write_all(
        self,
        replacements: Mapping[str, list[Replacement]],
        cache: Mapping[str, str],
    ) -> int:
        """Apply and persist the replacements of every file.

        Args:
            replacements: Replacements grouped by file path
            cache: Original contents by file path

        Returns:
            Number of files written
        """
        written = 0
        for path, file_replacements in replacements.items():
            if not file_replacements:
                continue
            contents = apply_replacements(cache[path], file_replacements)
            self._fs.write_text(path, contents, self._encoding)
            written += 1
            log.info(LogEventNames.FILE_WRITTEN, path=path, replacements=len(file_replacements))
        return written
