"""Body state handlers: cite key, separators and field names."""

from bibx.buffer import RuneBuffer
from bibx.charsets import CLOSERS, COMMENT_MARKER, ENTRY_DELIMITER, is_name_char, is_valid_name
from bibx.reader import CharStatus
from bibx.scanner.modes import ScannerState
from bibx.scanner.states.base import StateHandlerBase
from bibx.tokens import TokenType


class BodyStatesMixin(StateHandlerBase):
    """Handlers for the structural parts of an entry or abbreviation body."""

    def _scan_cite_key(self) -> ScannerState:
        """Read the cite key up to the first comma.

        An entry without fields (``@book{key}``) ends the key at the
        body's closer instead.
        """
        buf = RuneBuffer()
        while True:
            char, status = self._read()
            if status is not CharStatus.OK:
                return self._halt(status)
            if char == "," or char == self._closer:
                key = buf.trimmed()
                if not is_valid_name(key):
                    return self._fail(f"invalid cite key {key!r}", buf.start)
                self._emit(TokenType.CITE_KEY, key, buf.start)
                self._pushback()
                if char == ",":
                    return ScannerState.COMMA
                return ScannerState.RIGHT_BODY_DELIM
            buf.append(char, *self._reader.position)

    def _scan_comma(self) -> ScannerState:
        while True:
            char, status = self._read()
            if status is not CharStatus.OK:
                return self._halt(status)
            if char == ",":
                self._emit(TokenType.COMMA, char)
                return ScannerState.TYPE_OR_CLOSE

    def _scan_type_or_close(self) -> ScannerState:
        """Decide what follows a comma: a field name, the closer or a comment.

        Whitespace and stray separators are skipped.
        """
        while True:
            char, status = self._read()
            if status is not CharStatus.OK:
                return self._halt(status)
            if char in CLOSERS:
                self._pushback()
                return ScannerState.RIGHT_BODY_DELIM
            if char == COMMENT_MARKER:
                return ScannerState.INLINE_COMMENT
            if char == ENTRY_DELIMITER:
                return self._fail("nested declaration inside an open body")
            if is_name_char(char):
                self._pushback()
                return ScannerState.FIELD_TYPE

    def _scan_field_type(self) -> ScannerState:
        """Read a field name up to the equals sign."""
        buf = RuneBuffer()
        while True:
            char, status = self._read()
            if status is not CharStatus.OK:
                return self._halt(status)
            if char == "=":
                name = buf.trimmed()
                if not is_valid_name(name):
                    return self._fail(f"invalid field name {name!r}", buf.start)
                self._emit(TokenType.FIELD_TYPE, name, buf.start)
                self._pushback()
                return ScannerState.EQ_SIGN
            buf.append(char, *self._reader.position)

    def _scan_eq_sign(self) -> ScannerState:
        while True:
            char, status = self._read()
            if status is not CharStatus.OK:
                return self._halt(status)
            if char == "=":
                self._emit(TokenType.EQ_SIGN, char)
                return ScannerState.FIELD_TEXT
