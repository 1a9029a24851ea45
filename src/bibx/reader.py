"""Character source with one-level pushback.

RuneReader hands the scanner one decoded character at a time together
with a status, and can undo exactly one read. It accepts strings, bytes,
text streams and binary streams. Bytes are decoded as strict UTF-8 one
character at a time, so a bad byte is reported where it occurs and
everything before it is still readable.

The reader never closes a stream it was given.

Thread Safety:
RuneReader instances are single-use and owned by one Scanner.

"""

from __future__ import annotations

import codecs
import io
from enum import Enum, auto
from typing import IO


class CharStatus(Enum):
    """Outcome of a single read."""

    OK = auto()
    EOF = auto()
    ERROR = auto()


class RuneReader:
    """Pull adapter over BibTeX source.

    Usage:
            >>> reader = RuneReader("@book")
            >>> reader.next()
            ('@', <CharStatus.OK: 1>)
            >>> reader.pushback()
            True
            >>> reader.next()
            ('@', <CharStatus.OK: 1>)

    """

    __slots__ = (
        "_stream",
        "_decoder",
        "_source_file",
        "_last",
        "_pushed_back",
        "_position",
        "_next_position",
        "_saved",
    )

    def __init__(
        self,
        source: str | bytes | IO[str] | IO[bytes],
        source_file: str | None = None,
    ) -> None:
        """Initialize reader over source.

        Args:
            source: BibTeX text, UTF-8 bytes, or a text/binary stream
            source_file: Optional source file path for diagnostics
        """
        self._stream, self._decoder = _open_source(source)
        self._source_file = source_file
        self._last: str = ""
        self._pushed_back = False

        # (lineno, col) of the last character read, and of the next one
        self._position: tuple[int, int] = (1, 0)
        self._next_position: tuple[int, int] = (1, 1)
        # Both positions as they were before the last read, for pushback
        self._saved: tuple[tuple[int, int], tuple[int, int]] = (
            self._position,
            self._next_position,
        )

    @property
    def source_file(self) -> str | None:
        """Source file path given at construction."""
        return self._source_file

    @property
    def position(self) -> tuple[int, int]:
        """(lineno, col) of the most recently read character."""
        return self._position

    @property
    def next_position(self) -> tuple[int, int]:
        """(lineno, col) the next character will have.

        After an ERROR read this is where the unreadable input starts.
        """
        return self._next_position

    def next(self) -> tuple[str, CharStatus]:
        """Read the next character.

        Returns:
            (char, CharStatus.OK), or ("", CharStatus.EOF) at end of input,
            or ("", CharStatus.ERROR) when the stream cannot be read or decoded.
        """
        if self._pushed_back:
            self._pushed_back = False
            self._advance(self._last)
            return self._last, CharStatus.OK

        try:
            char = self._read_char()
        except (OSError, UnicodeDecodeError, ValueError):
            return "", CharStatus.ERROR

        if not char:
            return "", CharStatus.EOF

        self._last = char
        self._advance(char)
        return char, CharStatus.OK

    def pushback(self) -> bool:
        """Undo the most recent successful next().

        Returns:
            False if there is nothing to undo (no read yet, or already pushed back).
        """
        if self._pushed_back or not self._last:
            return False
        self._pushed_back = True
        self._position, self._next_position = self._saved
        return True

    def _read_char(self) -> str:
        """Read one character, feeding the decoder a byte at a time.

        Raises:
            UnicodeDecodeError: Invalid UTF-8, or a sequence cut off by end of input
            OSError: The underlying stream failed
        """
        if self._decoder is None:
            return self._stream.read(1)
        while True:
            byte = self._stream.read(1)
            if not byte:
                return self._decoder.decode(b"", final=True)
            if char := self._decoder.decode(byte):
                return char

    def _advance(self, char: str) -> None:
        self._saved = (self._position, self._next_position)
        self._position = self._next_position
        lineno, col = self._next_position
        if char == "\n":
            self._next_position = (lineno + 1, 1)
        else:
            self._next_position = (lineno, col + 1)


def _open_source(
    source: str | bytes | IO[str] | IO[bytes],
) -> tuple[IO, codecs.IncrementalDecoder | None]:
    """Return a stream with read(1) and the decoder its bytes need, if any."""
    if isinstance(source, str):
        return io.StringIO(source), None
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(bytes(source)), _utf8_decoder()
    if isinstance(source, (io.RawIOBase, io.BufferedIOBase)):
        return source, _utf8_decoder()
    return source, None


def _utf8_decoder() -> codecs.IncrementalDecoder:
    return codecs.getincrementaldecoder("utf-8")(errors="strict")
