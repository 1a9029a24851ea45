"""Scanner state transitions, lexical errors and terminal sinks."""

import io

import pytest

from bibx.config import ParseConfig, parse_config_context
from bibx.errors import LexicalError
from bibx.reader import RuneReader
from bibx.scanner import DeclKind, Scanner, ScannerState
from bibx.tokens import TokenType


def _terminal(source: str | bytes) -> Scanner:
    scanner = Scanner(source)
    for _ in scanner.tokenize():
        pass
    return scanner


class TestStates:
    """State and counters as tokens are pulled."""

    def test_initial_state(self) -> None:
        scanner = Scanner("@book{k}")
        assert scanner.state is ScannerState.START
        assert scanner.depth == 0
        assert scanner.error is None

    def test_depth_tracks_open_body(self) -> None:
        scanner = Scanner("@book{k, title = {a {b} c}}")
        seen = []
        for token in scanner.tokenize():
            seen.append((token.type, scanner.depth))
        assert (TokenType.LEFT_DELIM, 1) in seen
        assert (TokenType.FIELD_TEXT, 1) in seen
        assert scanner.depth == 0

    def test_clean_end_state(self) -> None:
        scanner = _terminal("@book{k}")
        assert scanner.state is ScannerState.EOF
        assert scanner.error is None

    def test_accepts_rune_reader(self) -> None:
        reader = RuneReader("@book{k}", source_file="a.bib")
        tokens = list(Scanner(reader).tokenize())
        assert tokens[0].source_file == "a.bib"

    def test_accepts_binary_stream(self) -> None:
        tokens = list(Scanner(io.BytesIO(b"@book{k}")).tokenize())
        assert tokens[-1].type is TokenType.EOF

    def test_decl_kinds(self) -> None:
        assert {k.name for k in DeclKind} == {"ENTRY", "PREAMBLE", "ABBREV"}


class TestSinks:
    """EOF and ERROR repeat forever."""

    def test_eof_repeats(self) -> None:
        scanner = Scanner("@book{k}")
        list(scanner.tokenize())
        first = scanner.next_token()
        second = scanner.next_token()
        assert first.type is TokenType.EOF
        assert first == second

    def test_error_repeats(self) -> None:
        scanner = Scanner("@book{k, a = 1)")
        tokens = list(scanner.tokenize())
        assert tokens[-1].type is TokenType.ERROR
        for _ in range(3):
            again = scanner.next_token()
            assert again == tokens[-1]
        assert scanner.state is ScannerState.ERROR

    def test_error_token_carries_position(self) -> None:
        scanner = _terminal("@book{k,\n  my field = 1}")
        assert scanner.error is not None
        assert (scanner.error.lineno, scanner.error.col_offset) == (2, 3)


class TestLexicalErrors:
    """Inputs that end in the ERROR sink."""

    @pytest.mark.parametrize(
        ("source", "fragment"),
        [
            ("@book{k, a = 1,)", "closed with"),
            ("@book(k, a = 1}", "closed with"),
            ("@book{k, a = 1)", "closed with"),
            ("@book(b1, title = {T}", "premature end of input"),
            ("@book{k, @misc{j}}", "nested declaration"),
            ("@book{my key, a = 1}", "invalid cite key"),
            ("@book{k, my field = 1}", "invalid field name"),
            ("@{k}", "invalid declaration type"),
            ("@bo ok{k}", "invalid declaration type"),
            ("@book{k, % c\n {x}}", "after comment"),
            ("@", "premature end of input"),
            ("@book", "premature end of input"),
            ("@book{k, % unterminated comment", "premature end of input"),
        ],
    )
    def test_error_message(self, source: str, fragment: str) -> None:
        scanner = _terminal(source)
        assert scanner.state is ScannerState.ERROR
        assert isinstance(scanner.error, LexicalError)
        assert fragment in scanner.error.message

    def test_undecodable_input(self) -> None:
        scanner = _terminal(b"@book{k, title = {\xff}}")
        assert isinstance(scanner.error, LexicalError)
        assert "cannot read source" in scanner.error.message
        assert (scanner.error.lineno, scanner.error.col_offset) == (1, 19)

    def test_tokens_before_bad_byte_are_produced(self) -> None:
        tokens = list(Scanner(b"@book{k, year = 1999}\n@misc{m, x = {\xff}}").tokenize())
        types = [t.type for t in tokens]
        assert types.count(TokenType.RIGHT_DELIM) == 1
        assert types[-1] is TokenType.ERROR
        assert (tokens[-1].lineno, tokens[-1].col) == (2, 15)

    def test_no_tokens_after_error_position(self) -> None:
        tokens = list(Scanner("@book{k, a = 1,) @book{j}").tokenize())
        assert [t.type for t in tokens].count(TokenType.ENTRY_DELIM) == 1


class TestTypeNameConfig:
    """Letters-only type names are opt-in."""

    def test_punctuated_type_name_allowed_by_default(self) -> None:
        tokens = list(Scanner("@my-type{k}").tokenize())
        assert tokens[1].value == "my-type"
        assert tokens[-1].type is TokenType.EOF

    def test_punctuated_type_name_rejected_when_strict(self) -> None:
        with parse_config_context(ParseConfig(strict_type_names=True)):
            scanner = Scanner("@my-type{k}")
        list(scanner.tokenize())
        assert scanner.state is ScannerState.ERROR

    def test_config_read_at_construction(self) -> None:
        scanner = Scanner("@book{k, month = jan}")
        with parse_config_context(ParseConfig(strict_field_values=False)):
            tokens = list(scanner.tokenize())
        assert tokens[-1].type is TokenType.ERROR
