"""Tests for exception formatting and hierarchy."""

import pytest

from bibx.errors import BibSyntaxError, BibxError, LexicalError, ParseError


class TestHierarchy:
    def test_parse_errors_are_bibx_errors(self) -> None:
        assert issubclass(ParseError, BibxError)
        assert issubclass(LexicalError, ParseError)
        assert issubclass(BibSyntaxError, ParseError)

    def test_kinds_are_distinct(self) -> None:
        assert not issubclass(LexicalError, BibSyntaxError)
        assert not issubclass(BibSyntaxError, LexicalError)


class TestFormatting:
    """str() is ``file:line:col message``, omitting unknown parts."""

    @pytest.mark.parametrize(
        ("args", "expected"),
        [
            (("bad", 3, 7, "refs.bib"), "refs.bib:3:7 bad"),
            (("bad", 3, 7), "3:7 bad"),
            (("bad", 3), "3 bad"),
            (("bad", None, None, "refs.bib"), "refs.bib bad"),
            (("bad",), "bad"),
        ],
    )
    def test_str(self, args: tuple, expected: str) -> None:
        assert str(ParseError(*args)) == expected

    def test_attributes(self) -> None:
        err = LexicalError("invalid cite key", 2, 5, "a.bib")
        assert err.message == "invalid cite key"
        assert (err.lineno, err.col_offset, err.source_file) == (2, 5, "a.bib")
