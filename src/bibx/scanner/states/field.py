"""Field text state handler.

The most delicate state: it has to tell a literal ``}`` or ``,`` inside a
value from the body's closer or a field separator.

Depth accounting uses the scanner-wide depth, which is 1 while only the
body is open. Every ``{`` in the value increments it and every ``}`` above
depth 1 decrements it, so a closer is recognised at depth 1. A closer of
the wrong flavor outside quotes also ends the value, leaving the mismatch
to be reported by the body-delimiter state.
Quote parity decides whether a comma at depth 1 separates fields; a quote
directly after a backslash does not count.
"""

from bibx.buffer import RuneBuffer
from bibx.charsets import CLOSERS, COMMENT_MARKER, ESCAPE, QUOTE, is_valid_field_text
from bibx.reader import CharStatus
from bibx.scanner.modes import ScannerState
from bibx.scanner.states.base import StateHandlerBase
from bibx.tokens import TokenType


class FieldStatesMixin(StateHandlerBase):
    """Handler for field values (and the single preamble value)."""

    def _scan_field_text(self) -> ScannerState:
        """Read a field value until the closer, a separator or a comment.

        Terminators:
            - the body's closer at depth 1 (left for RIGHT_BODY_DELIM)
            - the other closer at depth 1 with even quote parity (left for
              RIGHT_BODY_DELIM, which rejects the mismatch)
            - ``,`` at depth 1 with even quote parity (left for COMMA)
            - unescaped ``%`` at depth 1 with even quote parity (consumed)
        """
        buf = RuneBuffer()
        quotes = 0
        prev = ""
        while True:
            char, status = self._read()
            if status is not CharStatus.OK:
                return self._halt(status)

            if char == "{":
                self._depth += 1
            elif char == QUOTE:
                if prev != ESCAPE:
                    quotes += 1
            elif self._depth == 1 and (
                char == self._closer or (char in CLOSERS and quotes % 2 == 0)
            ):
                self._pushback()
                return self._finish_field_text(buf, ScannerState.RIGHT_BODY_DELIM)
            elif char == "}":
                if self._depth == 1:
                    # Inside a parenthesised body with a quote still open
                    return self._fail("unbalanced closing brace in field text")
                self._depth -= 1
            elif self._depth == 1 and quotes % 2 == 0:
                if char == ",":
                    self._pushback()
                    return self._finish_field_text(buf, ScannerState.COMMA)
                if char == COMMENT_MARKER and prev != ESCAPE:
                    return self._finish_field_text(buf, ScannerState.INLINE_COMMENT)

            buf.append(char, *self._reader.position)
            prev = char

    def _finish_field_text(self, buf: RuneBuffer, next_state: ScannerState) -> ScannerState:
        """Validate and emit the collected value, then move to next_state."""
        text = buf.trimmed()
        if not is_valid_field_text(text, strict=self._config.strict_field_values):
            return self._fail(f"malformed field text {text!r}", buf.start)
        self._emit(TokenType.FIELD_TEXT, text, buf.start)
        return next_state
