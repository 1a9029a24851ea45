"""State-machine parser producing typed declarations.

Consumes the Scanner's token stream and assembles EntryDecl, AbbrevDecl
and PreambleDecl nodes, attaching the comments seen before and inside
each declaration.

Like the scanner, the parser is a pull producer: next() runs state
handlers until one declaration is complete. Errors are terminal: once a
lexical or syntax fault is seen the parser reports BadDecl forever and
keeps the fault in Parser.error.

Thread Safety:
- Parser instances are single-use and not thread-safe
- Emitted declarations are immutable (frozen dataclasses)

"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterator
from enum import Enum, auto
from typing import IO

from bibx.errors import BibSyntaxError, LexicalError, ParseError
from bibx.location import SourceLocation
from bibx.nodes import (
    AbbrevDecl,
    BadDecl,
    CommentGroup,
    Declaration,
    EntryDecl,
    FieldStmt,
    PreambleDecl,
)
from bibx.reader import RuneReader
from bibx.scanner import Scanner
from bibx.tokens import Token, TokenType
from bibx.utils.logger import get_logger

logger = get_logger(__name__)


class ParserState(Enum):
    """Parser states. EOF and ERROR are sinks."""

    START = auto()
    COMMENTS = auto()  # Between declarations
    DECLARATION = auto()  # After @, expecting the type name
    ENTRY = auto()
    PREAMBLE = auto()
    ABBREV = auto()
    EOF = auto()
    ERROR = auto()


# State entered for each declaration keyword token
_DECLARATION_STATES: dict[TokenType, ParserState] = {
    TokenType.ENTRY_TYPE: ParserState.ENTRY,
    TokenType.PREAMBLE: ParserState.PREAMBLE,
    TokenType.ABBREV: ParserState.ABBREV,
}


class Parser:
    """Token-to-declaration state machine.

    Usage:
            >>> parser = Parser("@book{b1, author = {A. Author}, year = 1999}")
            >>> decl, more = parser.next()
            >>> decl.cite_key, decl.get("year")
            ('b1', '1999')
            >>> parser.next()
            (None, False)

    Iterating a Parser yields declarations and raises the recorded
    ParseError if the input turned out to be malformed.

    """

    __slots__ = (
        "_scanner",
        "_state",
        "_handlers",
        "_pending",
        "_comments",
        "_decl_token",
        "_type_name",
        "_error",
    )

    def __init__(
        self,
        source: Scanner | RuneReader | str | bytes | IO[str] | IO[bytes],
        source_file: str | None = None,
    ) -> None:
        """Initialize parser over a token source.

        Args:
            source: A Scanner, or anything Scanner accepts
            source_file: Optional source file path for error messages
        """
        if isinstance(source, Scanner):
            self._scanner = source
        else:
            self._scanner = Scanner(source, source_file)
        self._state = ParserState.START
        self._pending: deque[Declaration] = deque()

        # Pending comment group, handed to the next emitted declaration
        self._comments: list[str] = []

        # Declaration being assembled
        self._decl_token: Token | None = None
        self._type_name = ""

        self._error: ParseError | None = None

        self._handlers: dict[ParserState, Callable[[], ParserState]] = {
            ParserState.START: self._parse_start,
            ParserState.COMMENTS: self._parse_comments,
            ParserState.DECLARATION: self._parse_declaration,
            ParserState.ENTRY: self._parse_entry,
            ParserState.PREAMBLE: self._parse_preamble,
            ParserState.ABBREV: self._parse_abbrev,
        }

    @property
    def state(self) -> ParserState:
        """Current state of the machine."""
        return self._state

    @property
    def error(self) -> ParseError | None:
        """The lexical or syntax error that stopped the parser, if any."""
        return self._error

    @property
    def trailing_comments(self) -> CommentGroup:
        """Comments collected after the last declaration.

        Only meaningful once the parser has reached a clean end of input.
        """
        return CommentGroup(tuple(self._comments))

    def next(self) -> tuple[Declaration | None, bool]:
        """Return the next declaration.

        Returns:
            (declaration, True) while declarations remain; (None, False) after
            a clean end of input; (BadDecl(), False) after an error. Terminal
            results repeat on every later call.
        """
        while not self._pending:
            if self._state is ParserState.EOF:
                return None, False
            if self._state is ParserState.ERROR:
                return BadDecl(), False
            self._state = self._handlers[self._state]()
        return self._pending.popleft(), True

    def __iter__(self) -> Iterator[Declaration]:
        """Yield declarations until the end of input.

        Raises:
            LexicalError: The scanner rejected the input
            BibSyntaxError: The token sequence did not form a declaration
        """
        while True:
            decl, more = self.next()
            if not more:
                break
            yield decl  # type: ignore[misc]
        if self._error is not None:
            raise self._error

    # =========================================================================
    # State handlers
    # =========================================================================

    def _parse_start(self) -> ParserState:
        return ParserState.COMMENTS

    def _parse_comments(self) -> ParserState:
        """Collect comments until the next ``@``."""
        while True:
            token = self._scanner.next_token()
            if (state := self._terminal(token)) is not None:
                return state
            if token.type is TokenType.COMMENT:
                self._comments.append(token.value)
            elif token.type is TokenType.ENTRY_DELIM:
                self._decl_token = token
                return ParserState.DECLARATION
            else:
                self._comments.clear()
                return self._syntax_error(
                    f"unexpected {token.type.name} between declarations", token
                )

    def _parse_declaration(self) -> ParserState:
        """Pick the declaration variant from the keyword token."""
        token = self._scanner.next_token()
        if (state := self._terminal(token)) is not None:
            return state
        next_state = _DECLARATION_STATES.get(token.type)
        if next_state is None:
            return self._syntax_error(f"expected declaration type, got {token.type.name}", token)
        self._type_name = token.value
        return next_state

    def _parse_entry(self) -> ParserState:
        """Assemble ``@type{key, name = value, ...}``."""
        if (state := self._expect_body()) is not None:
            return state

        token = self._scanner.next_token()
        if (state := self._terminal(token)) is not None:
            return state
        if token.type is not TokenType.CITE_KEY:
            return self._syntax_error(f"missing cite key in @{self._type_name}", token)
        cite_key = token.value

        fields: list[FieldStmt] = []
        key: Token | None = None
        while True:
            token = self._scanner.next_token()
            if (state := self._terminal(token)) is not None:
                return state
            match token.type:
                case TokenType.COMMENT:
                    self._comments.append(token.value)
                case TokenType.FIELD_TYPE:
                    key = token
                case TokenType.EQ_SIGN | TokenType.COMMA:
                    pass
                case TokenType.FIELD_TEXT:
                    if key is None or not key.value or not token.value:
                        return self._syntax_error("field value without a key", token)
                    fields.append(FieldStmt(key.value, token.value, key.location))
                    key = None
                case TokenType.RIGHT_DELIM:
                    if key is not None:
                        return self._syntax_error(f"field {key.value!r} has no value", token)
                    return self._emit(
                        EntryDecl(
                            type_name=self._type_name,
                            cite_key=cite_key,
                            fields=tuple(fields),
                            comments=self._take_comments(),
                            location=self._decl_location(),
                        )
                    )
                case _:
                    return self._syntax_error(
                        f"unexpected {token.type.name} in @{self._type_name}", token
                    )

    def _parse_preamble(self) -> ParserState:
        """Assemble ``@preamble{value}``."""
        if (state := self._expect_body()) is not None:
            return state

        value: str | None = None
        while True:
            token = self._scanner.next_token()
            if (state := self._terminal(token)) is not None:
                return state
            match token.type:
                case TokenType.COMMENT:
                    self._comments.append(token.value)
                case TokenType.FIELD_TEXT:
                    if value is not None:
                        return self._syntax_error("preamble has more than one value", token)
                    value = token.value
                case TokenType.RIGHT_DELIM:
                    if not value:
                        return self._syntax_error("preamble closed without a value", token)
                    return self._emit(
                        PreambleDecl(
                            value=value,
                            comments=self._take_comments(),
                            location=self._decl_location(),
                        )
                    )
                case _:
                    return self._syntax_error(f"unexpected {token.type.name} in preamble", token)

    def _parse_abbrev(self) -> ParserState:
        """Assemble ``@string{name = value}``."""
        if (state := self._expect_body()) is not None:
            return state

        key: Token | None = None
        field: FieldStmt | None = None
        while True:
            token = self._scanner.next_token()
            if (state := self._terminal(token)) is not None:
                return state
            match token.type:
                case TokenType.COMMENT:
                    self._comments.append(token.value)
                case TokenType.FIELD_TYPE:
                    # Reached after "name = value % comment" with no comma
                    if key is not None or field is not None:
                        return self._syntax_error(
                            "string declaration defines more than one field", token
                        )
                    key = token
                case TokenType.COMMA:
                    return self._syntax_error(
                        "string declaration defines more than one field", token
                    )
                case TokenType.EQ_SIGN:
                    pass
                case TokenType.FIELD_TEXT:
                    if key is None or not key.value or not token.value:
                        return self._syntax_error("string value without a name", token)
                    field = FieldStmt(key.value, token.value, key.location)
                case TokenType.RIGHT_DELIM:
                    if field is None:
                        return self._syntax_error("string declaration closed without a field", token)
                    return self._emit(
                        AbbrevDecl(
                            field=field,
                            comments=self._take_comments(),
                            location=self._decl_location(),
                        )
                    )
                case _:
                    return self._syntax_error(
                        f"unexpected {token.type.name} in string declaration", token
                    )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _expect_body(self) -> ParserState | None:
        """Consume the body's opening delimiter."""
        token = self._scanner.next_token()
        if (state := self._terminal(token)) is not None:
            return state
        if token.type is not TokenType.LEFT_DELIM:
            return self._syntax_error(f"expected body delimiter, got {token.type.name}", token)
        return None

    def _terminal(self, token: Token) -> ParserState | None:
        """Map a terminal token to the matching sink state, else None."""
        if token.type is TokenType.ERROR:
            self._error = self._scanner.error or LexicalError(
                token.value, token.lineno, token.col, token.source_file
            )
            logger.debug("Parser stopped on scan error: %s", self._error)
            return ParserState.ERROR
        if token.type is TokenType.EOF:
            return ParserState.EOF
        return None

    def _syntax_error(self, message: str, token: Token) -> ParserState:
        self._error = BibSyntaxError(message, token.lineno, token.col, token.source_file)
        logger.debug("Parser stopped: %s", self._error)
        return ParserState.ERROR

    def _take_comments(self) -> CommentGroup:
        """Hand the pending comment group over and start a new one."""
        group = CommentGroup(tuple(self._comments))
        self._comments = []
        return group

    def _decl_location(self) -> SourceLocation:
        if self._decl_token is None:
            return SourceLocation.unknown()
        return self._decl_token.location

    def _emit(self, decl: Declaration) -> ParserState:
        self._pending.append(decl)
        self._decl_token = None
        self._type_name = ""
        logger.debug("Parsed %s at %s", type(decl).__name__, getattr(decl, "location", None))
        return ParserState.COMMENTS
