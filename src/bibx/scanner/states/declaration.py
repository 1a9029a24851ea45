"""Declaration-level state handlers.

Covers everything outside a field list: text between declarations, the
``@`` delimiter, the type name that picks the sub-grammar, and the body
delimiters.
"""

from bibx.buffer import RuneBuffer
from bibx.charsets import (
    ABBREV_KEYWORD,
    CLOSER_FOR,
    CLOSERS,
    ENTRY_DELIMITER,
    OPENERS,
    PREAMBLE_KEYWORD,
    is_letters,
    is_valid_name,
)
from bibx.reader import CharStatus
from bibx.scanner.modes import BODY_START_STATE, KEYWORD_TOKEN, DeclKind, ScannerState
from bibx.scanner.states.base import StateHandlerBase
from bibx.tokens import TokenType


class DeclarationStatesMixin(StateHandlerBase):
    """Handlers for top-level text, ``@``, type names and body delimiters."""

    def _scan_start(self) -> ScannerState:
        """Default startup state."""
        return ScannerState.TOP_LEVEL

    def _scan_top_level(self) -> ScannerState:
        """Collect text up to the next ``@`` as a comment.

        The text is emitted raw (trimmed), so a ``% note`` line keeps its
        percent sign. Text left over at end of input is still emitted.
        """
        buf = RuneBuffer()
        while True:
            char, status = self._read()
            if status is not CharStatus.OK:
                if status is CharStatus.EOF and (text := buf.trimmed()):
                    self._emit(TokenType.COMMENT, text, buf.start)
                return self._halt(status)
            if char == ENTRY_DELIMITER:
                self._pushback()
                if text := buf.trimmed():
                    self._emit(TokenType.COMMENT, text, buf.start)
                return ScannerState.ENTRY_DELIM
            buf.append(char, *self._reader.position)

    def _scan_entry_delim(self) -> ScannerState:
        """Consume the ``@`` that opens a declaration."""
        while True:
            char, status = self._read()
            if status is not CharStatus.OK:
                return self._halt(status)
            if char == ENTRY_DELIMITER:
                self._in_declaration = True
                self._emit(TokenType.ENTRY_DELIM, char)
                return ScannerState.ENTRY_TYPE

    def _scan_entry_type(self) -> ScannerState:
        """Read the declaration type name up to the body delimiter.

        ``preamble`` and ``string`` are matched case-insensitively and
        switch to their own sub-grammar; any other name is an entry type.
        The name is emitted as written.
        """
        buf = RuneBuffer()
        while True:
            char, status = self._read()
            if status is not CharStatus.OK:
                return self._halt(status)
            if char in OPENERS:
                name = buf.trimmed()
                kind = _decl_kind_for(name)
                if not self._is_valid_type_name(name):
                    return self._fail(f"invalid declaration type {name!r}", buf.start)
                self._decl_kind = kind
                self._emit(KEYWORD_TOKEN[kind], name, buf.start)
                self._pushback()
                return ScannerState.LEFT_BODY_DELIM
            buf.append(char, *self._reader.position)

    def _scan_left_body_delim(self) -> ScannerState:
        """Open the body and hand over to the declaration's sub-grammar."""
        while True:
            char, status = self._read()
            if status is not CharStatus.OK:
                return self._halt(status)
            if char in OPENERS:
                if self._depth > 0:
                    return self._fail("nested declaration inside an open body")
                self._opener = char
                self._depth += 1
                self._emit(TokenType.LEFT_DELIM, char)
                return BODY_START_STATE[self._decl_kind]

    def _scan_right_body_delim(self) -> ScannerState:
        """Close the body; the closer must match the opener's flavor."""
        while True:
            char, status = self._read()
            if status is not CharStatus.OK:
                return self._halt(status)
            if char in CLOSERS:
                if char != CLOSER_FOR.get(self._opener):
                    return self._fail(
                        f"body opened with {self._opener!r} closed with {char!r}"
                    )
                self._emit(TokenType.RIGHT_DELIM, char)
                self._depth -= 1
                self._opener = ""
                self._in_declaration = False
                return ScannerState.TOP_LEVEL

    def _is_valid_type_name(self, name: str) -> bool:
        if self._config.strict_type_names:
            return is_letters(name)
        return is_valid_name(name)


def _decl_kind_for(name: str) -> DeclKind:
    lower = name.lower()
    if lower == PREAMBLE_KEYWORD:
        return DeclKind.PREAMBLE
    if lower == ABBREV_KEYWORD:
        return DeclKind.ABBREV
    return DeclKind.ENTRY
