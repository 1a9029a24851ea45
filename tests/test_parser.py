"""Tests for the declaration parser."""

import pytest

from bibx.errors import BibSyntaxError, LexicalError
from bibx.nodes import (
    AbbrevDecl,
    BadDecl,
    CommentGroup,
    EntryDecl,
    FieldStmt,
    PreambleDecl,
)
from bibx.parser import Parser, ParserState
from bibx.scanner import Scanner

BOOK_EXAMPLE = """
% This is an example of a book entry type.
@book{bookExample,
  author    = {Peter Babington},
  title     = {The title of the work},
  publisher = {The name of the publisher},
  year      = 1993,
  volume    = 4,
  series    = 10,
  address   = {The address},
  edition   = 3,
  month     = 7,
  note      = {An optional note}
}
"""

MISC_EXAMPLE = """
% This is an example of a misc entry type.
@misc{miscExample,
  author       = {Peter Isley},
  title        = {The title of the work},
  howpublished = {How it was published},
  month        = 7,
  year         = 1993,
  note         = {An optional note}
}
"""

ABBREV_EXAMPLE = r"""
% This is a comment on the abbreviation.
@string{btx = "{\textsc{Bib}\TeX}" }
"""

PREAMBLE_EXAMPLE = r"""
% This is a comment on the preamble.
@PREAMBLE{"\makeatletter"}
"""


def _first(source: str):
    decl, more = Parser(source).next()
    assert more, "expected a declaration"
    return decl


class TestDeclarations:
    """One declaration of each kind."""

    def test_book_entry(self) -> None:
        assert _first(BOOK_EXAMPLE) == EntryDecl(
            type_name="book",
            cite_key="bookExample",
            comments=CommentGroup(("% This is an example of a book entry type.",)),
            fields=(
                FieldStmt("author", "{Peter Babington}"),
                FieldStmt("title", "{The title of the work}"),
                FieldStmt("publisher", "{The name of the publisher}"),
                FieldStmt("year", "1993"),
                FieldStmt("volume", "4"),
                FieldStmt("series", "10"),
                FieldStmt("address", "{The address}"),
                FieldStmt("edition", "3"),
                FieldStmt("month", "7"),
                FieldStmt("note", "{An optional note}"),
            ),
        )

    def test_misc_entry(self) -> None:
        decl = _first(MISC_EXAMPLE)
        assert isinstance(decl, EntryDecl)
        assert decl.type_name == "misc"
        assert decl.cite_key == "miscExample"
        assert decl.keys() == ("author", "title", "howpublished", "month", "year", "note")
        assert decl.get("HowPublished") == "{How it was published}"

    def test_abbreviation(self) -> None:
        assert _first(ABBREV_EXAMPLE) == AbbrevDecl(
            field=FieldStmt("btx", r'"{\textsc{Bib}\TeX}"'),
            comments=CommentGroup(("% This is a comment on the abbreviation.",)),
        )

    def test_preamble(self) -> None:
        assert _first(PREAMBLE_EXAMPLE) == PreambleDecl(
            value=r'"\makeatletter"',
            comments=CommentGroup(("% This is a comment on the preamble.",)),
        )

    def test_simple_book(self) -> None:
        assert _first("@book{b1, author = {A. Author}, year = 1999}") == EntryDecl(
            type_name="book",
            cite_key="b1",
            fields=(FieldStmt("author", "{A. Author}"), FieldStmt("year", "1999")),
        )

    def test_simple_string(self) -> None:
        assert _first('@string{x = "Y"}') == AbbrevDecl(field=FieldStmt("x", '"Y"'))

    def test_entry_type_case_preserved(self) -> None:
        assert _first("@Article{a1, year = 2001}").type_name == "Article"

    def test_entry_without_fields(self) -> None:
        assert _first("@book{lonely}") == EntryDecl(type_name="book", cite_key="lonely")

    def test_parenthesised_body(self) -> None:
        decl = _first("@book(b1, title = {T})")
        assert decl == EntryDecl("book", "b1", (FieldStmt("title", "{T}"),))

    def test_nested_braces_one_value(self) -> None:
        decl = _first('@book{d, title = {The {Death} of an "Author"}}')
        assert decl.get("title") == '{The {Death} of an "Author"}'


class TestComments:
    """Comment groups attach to the following declaration."""

    def test_inline_comments_attach_in_order(self) -> None:
        decl = _first("% before\n@book{k, % inside\n year = 1 % after value\n}")
        assert decl.comments == CommentGroup(("% before", "inside", "after value"))
        assert decl.get("year") == "1"

    def test_comments_do_not_leak_into_next(self) -> None:
        parser = Parser("% one\n@book{a}\n% two\n@book{b}")
        first, _ = parser.next()
        second, _ = parser.next()
        assert first.comments.values == ("% one",)
        assert second.comments.values == ("% two",)

    def test_trailing_comments(self) -> None:
        parser = Parser("@book{a}\n% the end\n")
        assert [d.cite_key for d in parser] == ["a"]
        assert parser.trailing_comments == CommentGroup(("% the end",))

    def test_location_points_at_at_sign(self) -> None:
        parser = Parser("\n\n  @book{k}", source_file="refs.bib")
        decl, _ = parser.next()
        assert str(decl.location) == "refs.bib:3:3"
        assert decl.location.is_known


class TestTerminalResults:
    """(None, False) after a clean end, (BadDecl(), False) after an error."""

    def test_clean_end_repeats(self) -> None:
        parser = Parser("@book{a}")
        assert parser.next()[1] is True
        assert parser.next() == (None, False)
        assert parser.next() == (None, False)
        assert parser.state is ParserState.EOF
        assert parser.error is None

    def test_empty_input(self) -> None:
        assert Parser("").next() == (None, False)

    def test_error_repeats(self) -> None:
        parser = Parser("@book(b1, title = {T}")
        assert parser.next() == (BadDecl(), False)
        assert parser.next() == (BadDecl(), False)
        assert parser.state is ParserState.ERROR
        assert isinstance(parser.error, LexicalError)

    def test_declarations_before_error_are_returned(self) -> None:
        parser = Parser("@book{a}\n@book{b, x = }")
        decl, more = parser.next()
        assert more and decl.cite_key == "a"
        assert parser.next() == (BadDecl(), False)

    def test_iteration_raises_recorded_error(self) -> None:
        parser = Parser("@book{a}\n@book{b, x = }")
        seen = []
        with pytest.raises(LexicalError):
            for decl in parser:
                seen.append(decl.cite_key)
        assert seen == ["a"]

    def test_accepts_existing_scanner(self) -> None:
        parser = Parser(Scanner("@book{a}"))
        assert [d.cite_key for d in parser] == ["a"]


class TestErrors:
    """Malformed input never yields a declaration."""

    @pytest.mark.parametrize(
        "source",
        [
            "@book{b1, title = {T})",
            "@book(b1, title = {T}}",
            "@book{b1, title = {T},)",
            "@book(b1, title = {T}",
            "@book{b1, title = {T}",
        ],
    )
    def test_mismatched_or_missing_closer(self, source: str) -> None:
        decl, more = Parser(source).next()
        assert decl == BadDecl()
        assert more is False

    def test_lexical_error_keeps_position(self) -> None:
        parser = Parser("@book{k,\n  bad key = 1}", source_file="x.bib")
        parser.next()
        assert isinstance(parser.error, LexicalError)
        assert str(parser.error).startswith("x.bib:2:3 ")

    @pytest.mark.parametrize(
        ("source", "fragment"),
        [
            ('@string{x = "Y", y = "Z"}', "more than one field"),
            ('@string{x = "Y" % no comma\n y = "Z"}', "more than one field"),
            ("@string{}", "premature end of input"),
            ('@preamble{"a", "b"}', "unexpected COMMA"),
            ("@preamble{}", "malformed field text"),
        ],
    )
    def test_malformed_declarations(self, source: str, fragment: str) -> None:
        parser = Parser(source)
        assert parser.next() == (BadDecl(), False)
        assert fragment in parser.error.message

    def test_string_with_only_a_comment_rejected(self) -> None:
        parser = Parser("@string{ % nothing here\n}")
        parser.next()
        assert parser.error is not None

    def test_syntax_error_type(self) -> None:
        parser = Parser('@string{x = "Y", y = "Z"}')
        parser.next()
        assert isinstance(parser.error, BibSyntaxError)


class TestRepeatability:
    def test_two_runs_identical(self) -> None:
        source = BOOK_EXAMPLE + MISC_EXAMPLE + ABBREV_EXAMPLE + PREAMBLE_EXAMPLE
        assert list(Parser(source)) == list(Parser(source))
        assert len(list(Parser(source))) == 4
