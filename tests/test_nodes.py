"""Tests for declaration nodes, tokens and source locations."""

import dataclasses

import pytest

from bibx.location import SourceLocation
from bibx.nodes import AbbrevDecl, BadDecl, CommentGroup, EntryDecl, FieldStmt, PreambleDecl
from bibx.tokens import TERMINAL_TYPES, Token, TokenType


class TestEntryDecl:
    def _entry(self) -> EntryDecl:
        return EntryDecl(
            type_name="article",
            cite_key="a1",
            fields=(FieldStmt("Title", "{T}"), FieldStmt("year", "2001"), FieldStmt("title", "{dup}")),
        )

    def test_get_is_case_insensitive_first_match(self) -> None:
        entry = self._entry()
        assert entry.get("TITLE") == "{T}"
        assert entry.get("missing") is None
        assert entry.get("missing", "-") == "-"

    def test_keys_in_source_order(self) -> None:
        assert self._entry().keys() == ("Title", "year", "title")

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            self._entry().cite_key = "other"  # type: ignore[misc]

    def test_location_ignored_in_equality(self) -> None:
        a = EntryDecl("book", "k", location=SourceLocation(1, 1))
        b = EntryDecl("book", "k", location=SourceLocation(9, 9, "x.bib"))
        assert a == b

    def test_repr_omits_location(self) -> None:
        assert "location" not in repr(EntryDecl("book", "k"))


class TestOtherNodes:
    def test_comment_group_sequence(self) -> None:
        group = CommentGroup(("a", "b"))
        assert list(group) == ["a", "b"]
        assert len(group) == 2
        assert group
        assert not CommentGroup()

    def test_variants_are_distinct(self) -> None:
        field = FieldStmt("x", '"Y"')
        assert AbbrevDecl(field=field) != PreambleDecl(value='"Y"')
        assert BadDecl() == BadDecl()


class TestToken:
    def test_equality_ignores_position(self) -> None:
        assert Token(TokenType.COMMA, ",", 3, 4) == Token(TokenType.COMMA, ",")

    def test_location(self) -> None:
        token = Token(TokenType.CITE_KEY, "k", 2, 7, "refs.bib")
        assert token.location == SourceLocation(2, 7, "refs.bib")

    def test_terminal(self) -> None:
        assert TERMINAL_TYPES == {TokenType.EOF, TokenType.ERROR}
        assert Token(TokenType.EOF, "").is_terminal
        assert not Token(TokenType.COMMENT, "x").is_terminal

    def test_repr_truncates_long_values(self) -> None:
        token = Token(TokenType.FIELD_TEXT, "{" + "x" * 40 + "}", 1, 5)
        assert repr(token) == "Token(FIELD_TEXT, '{xxxxxxxxxxxxxxxx...', 1:5)"


class TestSourceLocation:
    def test_str(self) -> None:
        assert str(SourceLocation(3, 1, "refs.bib")) == "refs.bib:3:1"
        assert str(SourceLocation(3, 1)) == "3:1"

    def test_unknown(self) -> None:
        loc = SourceLocation.unknown()
        assert not loc.is_known
        assert SourceLocation(1, 1).is_known
