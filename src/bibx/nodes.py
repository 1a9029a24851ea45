"""Typed declaration nodes for bibx.

All nodes are frozen dataclasses with slots for:
- Immutability: a declaration never changes after the parser emits it
- Memory efficiency: __slots__ reduces memory footprint
- Pattern matching: match statements work naturally

Node Hierarchy:
Node (base)
├── Declaration
│   ├── EntryDecl      @article{key, ...}
│   ├── AbbrevDecl     @string{name = ...}
│   ├── PreambleDecl   @preamble{...}
│   └── BadDecl        error sentinel
├── FieldStmt          key = value
└── CommentGroup       comments attached to a declaration

Every node's location is excluded from equality, so nodes built by hand in
tests compare equal to parsed ones.

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from collections.abc import Iterator
from dataclasses import dataclass, field

from bibx.location import SourceLocation

_UNKNOWN = SourceLocation.unknown()


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all declaration nodes."""


@dataclass(frozen=True, slots=True)
class CommentGroup(Node):
    """Ordered comment texts preceding or inside a declaration.

    Top-level comments keep their raw text (including any leading ``%``);
    comments inside a body are stored without the ``%`` marker.

    """

    values: tuple[str, ...] = ()

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __bool__(self) -> bool:
        return bool(self.values)


@dataclass(frozen=True, slots=True)
class FieldStmt(Node):
    """A ``key = value`` pair.

    The value keeps its delimiters verbatim: ``{A. Author}``, ``"50"`` or
    ``1999``.

    """

    key: str
    value: str
    location: SourceLocation = field(default=_UNKNOWN, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class Declaration(Node):
    """Base class for top-level ``@`` declarations."""


@dataclass(frozen=True, slots=True)
class EntryDecl(Declaration):
    """A bibliography entry.

    BibTeX: @book{b1, author = {A. Author}, year = 1999}

    """

    type_name: str
    cite_key: str
    fields: tuple[FieldStmt, ...] = ()
    comments: CommentGroup = CommentGroup()
    location: SourceLocation = field(default=_UNKNOWN, compare=False, repr=False)

    def get(self, key: str, default: str | None = None) -> str | None:
        """Value of the first field named key (case-insensitive)."""
        wanted = key.lower()
        for stmt in self.fields:
            if stmt.key.lower() == wanted:
                return stmt.value
        return default

    def keys(self) -> tuple[str, ...]:
        """Field keys in source order."""
        return tuple(stmt.key for stmt in self.fields)


@dataclass(frozen=True, slots=True)
class AbbrevDecl(Declaration):
    """A string abbreviation.

    BibTeX: @string{goossens = "Goossens, Michel"}

    """

    field: FieldStmt
    comments: CommentGroup = CommentGroup()
    location: SourceLocation = field(default=_UNKNOWN, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class PreambleDecl(Declaration):
    """A preamble passed through to LaTeX.

    BibTeX: @preamble{"\\makeatletter"}

    """

    value: str
    comments: CommentGroup = CommentGroup()
    location: SourceLocation = field(default=_UNKNOWN, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class BadDecl(Declaration):
    """Sentinel returned by the parser once it has stopped on an error."""
