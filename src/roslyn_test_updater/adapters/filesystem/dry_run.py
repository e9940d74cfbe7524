"""File system adapter that previews changes instead of writing them."""

from __future__ import annotations

import difflib
import io
import sys
from typing import TextIO

import structlog

from roslyn_test_updater.utils.logging import LogEventNames

from .local import LocalFileSystem

log = structlog.get_logger()


class _PreviewBuffer(io.StringIO):
    """Collects a would-be file and prints it when closed."""

    def __init__(self, path: str, out: TextIO) -> None:
        super().__init__()
        self._path = path
        self._out = out

    def close(self) -> None:
        if not self.closed:
            self._out.write(f"=== {self._path} (new file)\n")
            self._out.write(self.getvalue())
            if not self.getvalue().endswith("\n"):
                self._out.write("\n")
        super().close()


class DryRunFileSystem(LocalFileSystem):
    """Reads from disk but prints unified diffs instead of rewriting files.

    Example:
        fs = DryRunFileSystem()
        BaselineUpdater(fs).run(sys.stdin)  # prints patches, changes nothing
    """

    def __init__(self, out: TextIO | None = None) -> None:
        self._out = out if out is not None else sys.stdout

    def write_text(self, path: str, contents: str, encoding: str) -> None:
        original = self.read_text(path)
        diff = difflib.unified_diff(
            original.splitlines(keepends=True),
            contents.splitlines(keepends=True),
            fromfile=f"a/{path}",
            tofile=f"b/{path}",
        )
        for line in diff:
            self._out.write(line if line.endswith(("\n", "\r")) else line + "\n")
        log.debug(LogEventNames.DRY_RUN_PATCH_WRITTEN, path=path, encoding=encoding)

    def create_text(self, path: str) -> TextIO:
        return _PreviewBuffer(path, self._out)
