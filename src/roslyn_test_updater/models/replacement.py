"""Data model for a pending text edit."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Replacement:
    """Replace ``contents[start:end + 1]`` with ``target``.

    ``end`` is inclusive. A pure insertion at ``start`` is expressed as
    ``end == start - 1``. Offsets always refer to the original file contents.
    """

    start: int
    end: int
    target: str

    @property
    def length(self) -> int:
        """Number of original characters being replaced."""
        return self.end - self.start + 1

    def overlaps(self, other: "Replacement") -> bool:
        """Check whether two replacements touch the same original characters.

        Two insertions at the same offset also count as overlapping, since
        their relative order would be ambiguous.
        """
        if self.start == other.start:
            return True
        return self.start <= other.end and other.start <= self.end
