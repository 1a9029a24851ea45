"""Scanner states and declaration kinds.

This module defines the finite state machine states for the scanner
and the tables that route between the entry, preamble and abbreviation
sub-grammars.
"""

from __future__ import annotations

from enum import Enum, auto

from bibx.tokens import TokenType


class ScannerState(Enum):
    """Scanner states.

    Each state has one handler that reads characters, optionally emits
    tokens, and returns the next state. EOF and ERROR are sinks.

    """

    START = auto()
    TOP_LEVEL = auto()  # Between declarations, collecting comment text
    ENTRY_DELIM = auto()  # @
    ENTRY_TYPE = auto()  # article / string / preamble
    LEFT_BODY_DELIM = auto()  # { or (
    CITE_KEY = auto()
    COMMA = auto()
    TYPE_OR_CLOSE = auto()  # After a comma: field name, closer or comment
    INLINE_COMMENT = auto()  # % ... inside a body
    FIELD_TYPE = auto()
    EQ_SIGN = auto()
    FIELD_TEXT = auto()
    RIGHT_BODY_DELIM = auto()  # } or )
    EOF = auto()
    ERROR = auto()


class DeclKind(Enum):
    """Sub-grammar selected by the declaration type name."""

    ENTRY = auto()  # @article{key, field = value, ...}
    PREAMBLE = auto()  # @preamble{value}
    ABBREV = auto()  # @string{name = value}


# Token emitted for the type name of each declaration kind
KEYWORD_TOKEN: dict[DeclKind, TokenType] = {
    DeclKind.ENTRY: TokenType.ENTRY_TYPE,
    DeclKind.PREAMBLE: TokenType.PREAMBLE,
    DeclKind.ABBREV: TokenType.ABBREV,
}

# First state inside the body of each declaration kind
BODY_START_STATE: dict[DeclKind, ScannerState] = {
    DeclKind.ENTRY: ScannerState.CITE_KEY,
    DeclKind.PREAMBLE: ScannerState.FIELD_TEXT,
    DeclKind.ABBREV: ScannerState.FIELD_TYPE,
}
