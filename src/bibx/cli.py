"""Command line front end: print the declarations of BibTeX files.

Usage:
    bibx refs.bib [more.bib ...] [--json] [--strict-type-names] [--allow-bare-values]
    cat refs.bib | python -m bibx
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterator, Sequence
from typing import IO, TextIO

from bibx import __version__, iter_declarations
from bibx.config import ParseConfig
from bibx.errors import ParseError
from bibx.nodes import AbbrevDecl, CommentGroup, Declaration, EntryDecl, PreambleDecl
from bibx.serialization import to_json


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bibx",
        description="Parse BibTeX files and print their declarations",
    )
    parser.add_argument(
        "files",
        nargs="*",
        help="BibTeX files to parse (standard input when omitted)",
    )
    parser.add_argument("--json", action="store_true", help="Print a JSON array per file")
    parser.add_argument(
        "--strict-type-names",
        action="store_true",
        help="Require letters-only declaration type names",
    )
    parser.add_argument(
        "--allow-bare-values",
        action="store_true",
        help="Accept undelimited field values such as month = jan",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log scanner/parser debug output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _print_comments(comments: CommentGroup, out: TextIO) -> None:
    print("Comments:", file=out)
    for i, comment in enumerate(comments):
        print(f"{i}: {comment}", file=out)


def print_declaration(decl: Declaration, out: TextIO) -> None:
    """Print one declaration in the plain-text layout."""
    match decl:
        case EntryDecl():
            print(f"Type: {decl.type_name}", file=out)
            print(f"Cite key: {decl.cite_key}", file=out)
            _print_comments(decl.comments, out)
            print("Fields:", file=out)
            for stmt in decl.fields:
                print(f"{stmt.key} = {stmt.value}", file=out)
        case PreambleDecl():
            print("Type: preamble", file=out)
            _print_comments(decl.comments, out)
            print("Value:", file=out)
            print(decl.value, file=out)
        case AbbrevDecl():
            print("Type: string", file=out)
            _print_comments(decl.comments, out)
            print("Field:", file=out)
            print(f"{decl.field.key} = {decl.field.value}", file=out)
        case _:
            print(decl, file=out)
    print(file=out)


def _sources(files: Sequence[str]) -> Iterator[tuple[str, IO[bytes] | IO[str]]]:
    if not files:
        yield "<stdin>", sys.stdin
        return
    for name in files:
        with open(name, "rb") as f:
            yield name, f


def main(argv: Sequence[str] | None = None, out: TextIO | None = None) -> int:
    """Run the CLI.

    Returns:
        Process exit status: 0 on success, 1 on malformed input, 2 on I/O failure.
    """
    args = _build_parser().parse_args(argv)
    out = out if out is not None else sys.stdout

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    config = ParseConfig(
        strict_type_names=args.strict_type_names,
        strict_field_values=not args.allow_bare_values,
    )

    try:
        for name, stream in _sources(args.files):
            decls = iter_declarations(stream, source_file=name, config=config)
            if args.json:
                print(to_json(decls, indent=2), file=out)
            else:
                for decl in decls:
                    print_declaration(decl, out)
    except ParseError as e:
        print(e, file=sys.stderr)
        return 1
    except OSError as e:
        print(f"bibx: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
