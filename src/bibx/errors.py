"""Exception classes for bibx.

The scanner and parser never raise while running: faults surface as a
terminal ERROR token or BadDecl. These exceptions carry those faults across
the public API boundary (``parse``, ``iter_declarations``, iteration over a
Parser).
"""

from __future__ import annotations


class BibxError(Exception):
    """Base exception for all bibx errors."""

    pass


class ParseError(BibxError):
    """Malformed BibTeX input.

    Base for the lexical and syntactic error kinds.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            lineno: Line number where error occurred (1-indexed)
            col_offset: Column offset where error occurred (1-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file

        location = ""
        if source_file:
            location = f"{source_file}:"
        if lineno is not None:
            location += f"{lineno}:"
            if col_offset is not None:
                location += f"{col_offset}:"
        if location:
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")


class LexicalError(ParseError):
    """Character-level fault found by the scanner.

    Invalid NAME characters, unbalanced quotes or braces in field text,
    mismatched body delimiters, nested declarations, premature end of input
    inside a declaration, or a failure reading the source.
    """

    pass


class BibSyntaxError(ParseError):
    """Token-level fault found by the parser.

    Unexpected token kind for the current state, missing cite key, empty
    field key or value, or a declaration closed incomplete.
    """

    pass
