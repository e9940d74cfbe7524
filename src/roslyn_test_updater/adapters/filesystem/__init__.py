"""File system adapters."""

from .dry_run import DryRunFileSystem
from .local import LocalFileSystem

__all__ = ["DryRunFileSystem", "LocalFileSystem"]
