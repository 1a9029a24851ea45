"""State-machine scanner turning BibTeX characters into tokens.

The scanner is a pull producer: every call to next_token() runs state
handlers until at least one token is queued, then hands back the oldest.
Suspension between calls is fully described by the current state plus a
few counters, so no call stack is kept alive between tokens.

Thread Safety:
Scanner instances are single-use. Create one per source.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterator
from typing import IO

from bibx.charsets import CLOSER_FOR
from bibx.config import ParseConfig, get_parse_config
from bibx.errors import LexicalError
from bibx.reader import CharStatus, RuneReader
from bibx.scanner.modes import DeclKind, ScannerState
from bibx.scanner.states import (
    BodyStatesMixin,
    CommentStatesMixin,
    DeclarationStatesMixin,
    FieldStatesMixin,
)
from bibx.tokens import Token, TokenType
from bibx.utils.logger import get_logger

logger = get_logger(__name__)


class Scanner(
    DeclarationStatesMixin,
    BodyStatesMixin,
    FieldStatesMixin,
    CommentStatesMixin,
):
    """State-machine scanner for BibTeX.

    Usage:
            >>> scanner = Scanner("@string{x = \\"Y\\"}")
            >>> for token in scanner.tokenize():
            ...     print(token)
        Token(ENTRY_DELIM, '@', 1:1)
        Token(ABBREV, 'string', 1:2)
        Token(LEFT_DELIM, '{', 1:8)
        Token(FIELD_TYPE, 'x', 1:9)
        Token(EQ_SIGN, '=', 1:11)
        Token(FIELD_TEXT, '"Y"', 1:13)
        Token(RIGHT_DELIM, '}', 1:16)
        Token(EOF, '', 1:16)

    After EOF or ERROR the scanner keeps returning the same terminal token.

    Thread Safety:
        Scanner instances are single-use. Create one per source.

    """

    __slots__ = (
        "_reader",
        "_config",
        "_state",
        "_handlers",
        "_pending",
        "_depth",
        "_decl_kind",
        "_opener",
        "_in_declaration",
        "_error",
    )

    def __init__(
        self,
        source: RuneReader | str | bytes | IO[str] | IO[bytes],
        source_file: str | None = None,
    ) -> None:
        """Initialize scanner over a character source.

        Configuration is read from ContextVar once, here.

        Args:
            source: A RuneReader, or anything RuneReader accepts
            source_file: Optional source file path (ignored for a RuneReader,
                which carries its own)
        """
        if isinstance(source, RuneReader):
            self._reader = source
        else:
            self._reader = RuneReader(source, source_file)
        self._config: ParseConfig = get_parse_config()
        self._state = ScannerState.START
        self._pending: deque[Token] = deque()

        # Body state
        self._depth = 0
        self._decl_kind = DeclKind.ENTRY
        self._opener = ""
        self._in_declaration = False

        self._error: LexicalError | None = None

        self._handlers: dict[ScannerState, Callable[[], ScannerState]] = {
            ScannerState.START: self._scan_start,
            ScannerState.TOP_LEVEL: self._scan_top_level,
            ScannerState.ENTRY_DELIM: self._scan_entry_delim,
            ScannerState.ENTRY_TYPE: self._scan_entry_type,
            ScannerState.LEFT_BODY_DELIM: self._scan_left_body_delim,
            ScannerState.CITE_KEY: self._scan_cite_key,
            ScannerState.COMMA: self._scan_comma,
            ScannerState.TYPE_OR_CLOSE: self._scan_type_or_close,
            ScannerState.INLINE_COMMENT: self._scan_inline_comment,
            ScannerState.FIELD_TYPE: self._scan_field_type,
            ScannerState.EQ_SIGN: self._scan_eq_sign,
            ScannerState.FIELD_TEXT: self._scan_field_text,
            ScannerState.RIGHT_BODY_DELIM: self._scan_right_body_delim,
            ScannerState.EOF: self._scan_eof,
            ScannerState.ERROR: self._scan_error,
        }

    @property
    def state(self) -> ScannerState:
        """Current state of the machine."""
        return self._state

    @property
    def error(self) -> LexicalError | None:
        """The error that stopped the scanner, if any."""
        return self._error

    @property
    def depth(self) -> int:
        """Open body plus open braces inside the current field value."""
        return self._depth

    def next_token(self) -> Token:
        """Return the next token, running states until one is available."""
        while not self._pending:
            self._state = self._handlers[self._state]()
        return self._pending.popleft()

    def tokenize(self) -> Iterator[Token]:
        """Yield tokens up to and including the terminal EOF or ERROR token.

        Yields:
            Token objects one at a time
        """
        while True:
            token = self.next_token()
            yield token
            if token.is_terminal:
                return

    # =========================================================================
    # Sinks
    # =========================================================================

    def _scan_eof(self) -> ScannerState:
        self._emit(TokenType.EOF, "")
        return ScannerState.EOF

    def _scan_error(self) -> ScannerState:
        message = self._error.message if self._error is not None else "scan error"
        lineno = self._error.lineno if self._error is not None else None
        col = self._error.col_offset if self._error is not None else None
        self._emit(TokenType.ERROR, message, (lineno or 0, col or 0))
        return ScannerState.ERROR

    # =========================================================================
    # Helpers used by the state mixins
    # =========================================================================

    @property
    def _closer(self) -> str:
        return CLOSER_FOR.get(self._opener, "")

    def _read(self) -> tuple[str, CharStatus]:
        return self._reader.next()

    def _pushback(self) -> None:
        self._reader.pushback()

    def _emit(
        self,
        token_type: TokenType,
        value: str,
        position: tuple[int, int] | None = None,
    ) -> None:
        """Queue a token positioned at position (default: last character read)."""
        if position is None or position[0] == 0:
            position = self._reader.position
        lineno, col = position
        self._pending.append(
            Token(
                type=token_type,
                value=value,
                lineno=lineno,
                col=col,
                source_file=self._reader.source_file,
            )
        )

    def _halt(self, status: CharStatus) -> ScannerState:
        """Route a failed read to the EOF or ERROR sink.

        Running out of input inside a declaration is a lexical error;
        between declarations it is a clean end.
        """
        if status is CharStatus.ERROR:
            return self._fail("cannot read source", self._reader.next_position)
        if self._in_declaration:
            return self._fail("premature end of input inside declaration")
        return ScannerState.EOF

    def _fail(self, message: str, position: tuple[int, int] | None = None) -> ScannerState:
        """Record a lexical error and enter the ERROR sink."""
        if position is None or position[0] == 0:
            position = self._reader.position
        lineno, col = position
        self._error = LexicalError(message, lineno, col, self._reader.source_file)
        logger.debug("Scanner stopped: %s", self._error)
        return ScannerState.ERROR
