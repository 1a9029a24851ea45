"""Inline comment state handler."""

from bibx.buffer import RuneBuffer
from bibx.charsets import CLOSERS, COMMENT_MARKER, ENTRY_DELIMITER, OPENERS, is_name_char
from bibx.reader import CharStatus
from bibx.scanner.modes import ScannerState
from bibx.scanner.states.base import StateHandlerBase
from bibx.tokens import TokenType


class CommentStatesMixin(StateHandlerBase):
    """Handler for ``%`` comments inside a declaration body."""

    def _scan_inline_comment(self) -> ScannerState:
        """Emit the rest of the line as a comment, then resume the body.

        The ``%`` has already been consumed by the state that saw it.
        """
        buf = RuneBuffer()
        while True:
            char, status = self._read()
            if status is not CharStatus.OK:
                return self._halt(status)
            if char == "\n":
                break
            buf.append(char, *self._reader.position)

        if text := buf.trimmed():
            self._emit(TokenType.COMMENT, text, buf.start)
        return self._resume_after_comment()

    def _resume_after_comment(self) -> ScannerState:
        """Peek past whitespace for what the comment interrupted."""
        while True:
            char, status = self._read()
            if status is not CharStatus.OK:
                return self._halt(status)
            if char == COMMENT_MARKER:
                return ScannerState.INLINE_COMMENT
            if char in CLOSERS:
                self._pushback()
                return ScannerState.RIGHT_BODY_DELIM
            if char in OPENERS or char == ENTRY_DELIMITER:
                return self._fail(f"unexpected {char!r} after comment")
            if is_name_char(char):
                self._pushback()
                return ScannerState.FIELD_TYPE
