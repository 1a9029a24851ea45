"""Character-level state-machine scanner for bibx.

Architecture:
scanner/
├── __init__.py          # Re-exports Scanner, ScannerState, DeclKind
├── core.py              # Scanner class (driver, dispatch table, helpers)
├── modes.py             # ScannerState and DeclKind enums, routing tables
└── states/              # State handler mixins
    ├── base.py          # Host contract shared by the mixins
    ├── declaration.py   # Top-level text, @, type name, body delimiters
    ├── body.py          # Cite key, comma, type-or-close, field name, =
    ├── field.py         # Field text
    └── comment.py       # % comments inside a body

Usage:
    >>> from bibx.scanner import Scanner
    >>> scanner = Scanner("@book{b1, year = 1999}")
    >>> [token.type.name for token in scanner.tokenize()][:4]
    ['ENTRY_DELIM', 'ENTRY_TYPE', 'LEFT_DELIM', 'CITE_KEY']

"""

from bibx.scanner.core import Scanner
from bibx.scanner.modes import DeclKind, ScannerState

__all__ = ["DeclKind", "Scanner", "ScannerState"]
