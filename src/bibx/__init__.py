"""
bibx: Streaming BibTeX scanner and parser

Turns BibTeX source into typed declarations (entries, @string
abbreviations, @preamble blocks) with their comments attached. Scanning and
parsing are pull-based state machines: declarations are produced one at a
time, never over a materialized document. Zero runtime dependencies.

Quick Start:
    >>> from bibx import parse
    >>> (book,) = parse("@book{b1, author = {A. Author}, year = 1999}")
    >>> book.type_name, book.cite_key
    ('book', 'b1')
    >>> [(f.key, f.value) for f in book.fields]
    [('author', '{A. Author}'), ('year', '1999')]

    >>> # Lazily, over a file
    >>> from bibx import iter_declarations
    >>> with open("refs.bib", "rb") as f:
    ...     for decl in iter_declarations(f, source_file="refs.bib"):
    ...         print(decl)

    >>> # Or use the high-level BibTeX class with custom settings
    >>> from bibx import BibTeX
    >>> bib = BibTeX(strict_field_values=False)
    >>> decls = bib.parse("@misc{m1, month = jan}")

Malformed input raises LexicalError or BibSyntaxError (both ParseError);
the declarations before the fault are still yielded by iter_declarations.
"""

from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import IO, TypeAlias

from bibx.config import (
    ParseConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from bibx.errors import BibSyntaxError, BibxError, LexicalError, ParseError
from bibx.location import SourceLocation
from bibx.nodes import (
    AbbrevDecl,
    BadDecl,
    CommentGroup,
    Declaration,
    EntryDecl,
    FieldStmt,
    Node,
    PreambleDecl,
)
from bibx.parser import Parser, ParserState
from bibx.reader import CharStatus, RuneReader
from bibx.scanner import DeclKind, Scanner, ScannerState
from bibx.serialization import from_dict, from_json, to_dict, to_json
from bibx.tokens import Token, TokenType

__version__ = "0.1.0"

Source: TypeAlias = str | bytes | IO[str] | IO[bytes]


def iter_declarations(
    source: Source,
    *,
    source_file: str | None = None,
    config: ParseConfig | None = None,
) -> Iterator[Declaration]:
    """Lazily parse BibTeX source into declarations.

    Args:
        source: BibTeX text, UTF-8 bytes, or a text/binary stream
        source_file: Optional source file path for error messages
        config: Parse configuration (uses the current context's if None)

    Yields:
        Declarations in source order

    Raises:
        ParseError: On malformed input, after the valid declarations before it
    """
    if config is None:
        parser = Parser(source, source_file)
    else:
        with parse_config_context(config):
            parser = Parser(source, source_file)
    yield from parser


def parse(
    source: Source,
    *,
    source_file: str | None = None,
    config: ParseConfig | None = None,
) -> tuple[Declaration, ...]:
    """Parse BibTeX source into a tuple of declarations.

    Args:
        source: BibTeX text, UTF-8 bytes, or a text/binary stream
        source_file: Optional source file path for error messages
        config: Parse configuration (uses the current context's if None)

    Returns:
        Declarations in source order

    Raises:
        LexicalError: The scanner rejected the input
        BibSyntaxError: The token sequence did not form valid declarations

    Example:
        >>> parse('@string{x = "Y"}')
        (AbbrevDecl(field=FieldStmt(key='x', value='"Y"'), comments=CommentGroup(values=())),)
    """
    return tuple(iter_declarations(source, source_file=source_file, config=config))


class BibTeX:
    """High-level BibTeX processor holding an immutable configuration.

    Usage:
        >>> bib = BibTeX(strict_type_names=True)
        >>> decls = bib.parse("@book{b1, year = 1999}")
        >>> decls[0].get("year")
        '1999'

        >>> # Batch
        >>> results = bib.parse_many(["@book{a, year = 1}", "@misc{b, year = 2}"])

    Thread Safety:
        Uses ContextVar for thread-local configuration. Safe to use multiple
        BibTeX instances concurrently from different threads.

    """

    __slots__ = ("_config",)

    def __init__(
        self,
        *,
        strict_type_names: bool = False,
        strict_field_values: bool = True,
    ) -> None:
        """Initialize BibTeX processor.

        Args:
            strict_type_names: Require letters-only declaration type names
            strict_field_values: Require digit runs or delimited field values
        """
        self._config = ParseConfig(
            strict_type_names=strict_type_names,
            strict_field_values=strict_field_values,
        )

    @property
    def config(self) -> ParseConfig:
        """Configuration applied to every parse."""
        return self._config

    def parse(self, source: Source, *, source_file: str | None = None) -> tuple[Declaration, ...]:
        """Parse BibTeX source into declarations.

        Raises:
            ParseError: On malformed input
        """
        return parse(source, source_file=source_file, config=self._config)

    def iter(self, source: Source, *, source_file: str | None = None) -> Iterator[Declaration]:
        """Lazily parse BibTeX source into declarations."""
        return iter_declarations(source, source_file=source_file, config=self._config)

    def parse_file(self, path: str | Path) -> tuple[Declaration, ...]:
        """Parse a .bib file (read as UTF-8).

        Raises:
            OSError: The file cannot be opened
            ParseError: On malformed input
        """
        path = Path(path)
        with path.open("rb") as f:
            return self.parse(f, source_file=str(path))

    def parse_many(self, sources: Iterable[Source]) -> list[tuple[Declaration, ...]]:
        """Parse several sources with the same configuration.

        Sets config once, parses all, restores once.
        """
        with parse_config_context(self._config):
            return [tuple(Parser(source)) for source in sources]


__all__ = [  # noqa: RUF022 - grouped by category for maintainability
    # Version
    "__version__",
    # Core API
    "parse",
    "iter_declarations",
    "BibTeX",
    # Nodes
    "Node",
    "Declaration",
    "EntryDecl",
    "AbbrevDecl",
    "PreambleDecl",
    "BadDecl",
    "FieldStmt",
    "CommentGroup",
    # Pipeline components
    "RuneReader",
    "CharStatus",
    "Scanner",
    "ScannerState",
    "DeclKind",
    "Parser",
    "ParserState",
    # Tokens
    "Token",
    "TokenType",
    # Errors
    "BibxError",
    "ParseError",
    "LexicalError",
    "BibSyntaxError",
    # Serialization
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Configuration (ContextVar-based)
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
    # Location
    "SourceLocation",
]
