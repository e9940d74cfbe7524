"""File system adapter backed by the local disk."""

import os
from typing import TextIO


class LocalFileSystem:
    """Reads and writes files on the local disk."""

    def read_text(self, path: str) -> str:
        with open(path, encoding="utf-8-sig", newline="") as f:
            return f.read()

    def write_text(self, path: str, contents: str, encoding: str) -> None:
        with open(path, "w", encoding=encoding, newline="") as f:
            f.write(contents)

    def create_text(self, path: str) -> TextIO:
        return open(path, "w", encoding="utf-8")

    def get_full_path(self, path: str) -> str:
        return os.path.abspath(path)
