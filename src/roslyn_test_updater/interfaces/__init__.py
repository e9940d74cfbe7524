"""Abstract interfaces for external collaborators."""

from .filesystem import FileSystem

__all__ = ["FileSystem"]
