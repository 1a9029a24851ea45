"""Host contract shared by the scanner state mixins."""

from bibx.config import ParseConfig
from bibx.reader import CharStatus, RuneReader
from bibx.scanner.modes import DeclKind, ScannerState
from bibx.tokens import TokenType


class StateHandlerBase:
    """Attributes and helpers the state mixins expect from the Scanner.

    Required Host Attributes:
        - _reader: RuneReader
        - _config: ParseConfig
        - _depth: int (open body plus open braces inside a field value)
        - _decl_kind: DeclKind
        - _opener: str ("{" or "(" while a body is open, else "")
        - _in_declaration: bool (between "@" and the body's closer)

    """

    _reader: RuneReader
    _config: ParseConfig
    _depth: int
    _decl_kind: DeclKind
    _opener: str
    _in_declaration: bool

    @property
    def _closer(self) -> str:
        """Closing delimiter matching the open body. Implemented by Scanner."""
        raise NotImplementedError

    def _read(self) -> tuple[str, CharStatus]:
        """Read one character. Implemented by Scanner."""
        raise NotImplementedError

    def _pushback(self) -> None:
        """Undo the last read. Implemented by Scanner."""
        raise NotImplementedError

    def _emit(
        self,
        token_type: TokenType,
        value: str,
        position: tuple[int, int] | None = None,
    ) -> None:
        """Queue a token for the caller. Implemented by Scanner."""
        raise NotImplementedError

    def _halt(self, status: CharStatus) -> ScannerState:
        """Route a failed read to a sink state. Implemented by Scanner."""
        raise NotImplementedError

    def _fail(self, message: str, position: tuple[int, int] | None = None) -> ScannerState:
        """Record a lexical error and enter the ERROR sink. Implemented by Scanner."""
        raise NotImplementedError
