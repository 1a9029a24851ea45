"""Source location tracking for error messages and debugging.

Provides SourceLocation dataclass for tracking positions in BibTeX source.
Used by tokens, declaration nodes and errors.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Position of a syntactic element in BibTeX source.

    All positions are 1-indexed. A location of ``0:0`` means the position
    is unknown (synthetic nodes, deserialized nodes).

    Attributes:
        lineno: Line number (1-indexed)
        col_offset: Column offset (1-indexed)
        source_file: Source file path (optional)

    Examples:
            >>> loc = SourceLocation(lineno=3, col_offset=1, source_file="refs.bib")
            >>> str(loc)
            'refs.bib:3:1'

    """

    lineno: int
    col_offset: int
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location for error messages.

        Returns:
            Formatted string like "refs.bib:10:5" or "10:5"
        """
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    @property
    def is_known(self) -> bool:
        """Whether this location points into real source text."""
        return self.lineno > 0

    @classmethod
    def unknown(cls) -> SourceLocation:
        """Create an unknown/placeholder location."""
        return cls(lineno=0, col_offset=0)
