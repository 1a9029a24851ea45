"""Token and TokenType definitions for the bibx scanner.

The scanner produces a stream of Token objects that the parser consumes.
Each Token has a type, value, and source position.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenType is an enum (inherently immutable).

"""

from dataclasses import dataclass, field
from enum import Enum, auto

from bibx.location import SourceLocation


class TokenType(Enum):
    """Token types produced by the scanner."""

    # Terminal
    ERROR = auto()  # value holds the diagnostic message
    EOF = auto()

    # Declaration structure
    ENTRY_DELIM = auto()  # @
    LEFT_DELIM = auto()  # { or (
    RIGHT_DELIM = auto()  # } or )
    EQ_SIGN = auto()  # =
    COMMA = auto()  # ,

    # Declaration keywords
    ENTRY_TYPE = auto()  # article, book, ...
    ABBREV = auto()  # string
    PREAMBLE = auto()  # preamble

    # Body content
    CITE_KEY = auto()
    FIELD_TYPE = auto()  # author, title, ...
    FIELD_TEXT = auto()  # {...}, "...", 1999
    COMMENT = auto()


# Kinds after which the scanner produces nothing new
TERMINAL_TYPES = frozenset({TokenType.ERROR, TokenType.EOF})


@dataclass(frozen=True, slots=True)
class Token:
    """A token produced by the scanner.

    Tokens compare by type and value only, so a test can write
    ``Token(TokenType.COMMA, ",")`` without knowing where the comma was.

    Attributes:
        type: The token type (from TokenType enum)
        value: The raw string value from source
        lineno: Start line number (1-indexed, 0 if unknown)
        col: Start column offset (1-indexed, 0 if unknown)
        source_file: Optional source file path

    """

    type: TokenType
    value: str
    lineno: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)
    source_file: str | None = field(default=None, compare=False)

    @property
    def location(self) -> SourceLocation:
        """Source location of the first character of this token."""
        return SourceLocation(
            lineno=self.lineno,
            col_offset=self.col,
            source_file=self.source_file,
        )

    @property
    def is_terminal(self) -> bool:
        """Whether this is an EOF or ERROR token."""
        return self.type in TERMINAL_TYPES

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        val = self.value
        if len(val) > 20:
            val = val[:17] + "..."
        return f"Token({self.type.name}, {val!r}, {self.lineno}:{self.col})"
