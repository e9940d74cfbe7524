"""Data models and transfer objects."""

from .failure import FailedTestId, ParsingResult, SourceLocation
from .replacement import Replacement

__all__ = [
    "FailedTestId",
    "ParsingResult",
    "Replacement",
    "SourceLocation",
]
