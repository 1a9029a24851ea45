"""RuneBuffer for O(n) accumulation of scanned text.

Appends characters to a list and joins once when the token is emitted,
instead of repeated string concatenation. Also remembers where the first
non-whitespace character was read, which becomes the token's position
after trimming.

Thread Safety:
RuneBuffer instances are local to one Scanner.
No shared mutable state.

"""

from __future__ import annotations


class RuneBuffer:
    """Character accumulator with a start position.

    Usage:
            >>> buf = RuneBuffer()
            >>> _ = buf.append(" ", 1, 1).append("b", 1, 2).append("1", 1, 3)
            >>> buf.trimmed()
            'b1'
            >>> buf.start
            (1, 2)

    """

    __slots__ = ("_parts", "_start")

    def __init__(self) -> None:
        """Initialize empty RuneBuffer."""
        self._parts: list[str] = []
        self._start: tuple[int, int] | None = None

    def append(self, char: str, lineno: int = 0, col: int = 0) -> RuneBuffer:
        """Append a character read at (lineno, col).

        Args:
            char: Character to append
            lineno: Line of the character
            col: Column of the character

        Returns:
            self for method chaining
        """
        if self._start is None and not char.isspace():
            self._start = (lineno, col)
        self._parts.append(char)
        return self

    @property
    def start(self) -> tuple[int, int]:
        """Position of the first non-whitespace character, or (0, 0)."""
        return self._start if self._start is not None else (0, 0)

    def build(self) -> str:
        """Join all parts into the raw accumulated text."""
        return "".join(self._parts)

    def trimmed(self) -> str:
        """Accumulated text without surrounding whitespace."""
        return self.build().strip()

    def clear(self) -> RuneBuffer:
        """Drop all accumulated characters and the start position.

        Returns:
            self for method chaining
        """
        self._parts.clear()
        self._start = None
        return self

    def __len__(self) -> int:
        """Return number of characters appended."""
        return len(self._parts)

    def __bool__(self) -> bool:
        """Return True if any characters have been appended."""
        return bool(self._parts)
