"""Character sets and value validators for BibTeX.

All sets are frozensets for O(1) membership testing and module-level
caching (no per-call allocation).

Reference: the btparse lexical grammar,
https://metacpan.org/release/AMBS/Text-BibTeX-0.66/view/btparse/doc/bt_language.pod

Usage:
    from bibx.charsets import is_valid_name

    if not is_valid_name(cite_key):
        ...
"""

# Punctuation allowed in a NAME besides letters and digits
NAME_SPECIAL: frozenset[str] = frozenset("_-/!?$&*+.:;<>[]^`|")

# Body delimiters and their partners
OPENERS: frozenset[str] = frozenset("{(")
CLOSERS: frozenset[str] = frozenset("})")
CLOSER_FOR: dict[str, str] = {"{": "}", "(": ")"}

ENTRY_DELIMITER = "@"
COMMENT_MARKER = "%"
ESCAPE = "\\"
QUOTE = '"'

# Reserved declaration keywords, matched case-insensitively
PREAMBLE_KEYWORD = "preamble"
ABBREV_KEYWORD = "string"


def is_name_char(char: str) -> bool:
    """Check if character may appear in a BibTeX NAME."""
    return char.isalpha() or char.isdecimal() or char in NAME_SPECIAL


def is_valid_name(s: str) -> bool:
    """Check that s is a non-empty NAME (entry type, cite key, field key)."""
    if not s:
        return False
    return all(is_name_char(c) for c in s)


def is_letters(s: str) -> bool:
    """Check that s is non-empty and made of letters only."""
    if not s:
        return False
    return all(c.isalpha() for c in s)


def is_digit_run(s: str) -> bool:
    """Check that s is a non-empty run of digits (a bare number value)."""
    if not s:
        return False
    return all(c.isdecimal() for c in s)


def is_balanced(s: str) -> bool:
    """Check braces and quotes in s are balanced.

    A backslash escapes the following character, so ``\\"``, ``\\{`` and
    ``\\}`` are not counted. A closing brace with no open brace is
    unbalanced.
    """
    if not s:
        return False

    braces = 0
    quotes = 0
    i = 0
    n = len(s)
    while i < n:
        c = s[i]
        if c == ESCAPE:
            i += 2
            continue
        if c == "{":
            braces += 1
        elif c == "}":
            if braces == 0:
                return False
            braces -= 1
        elif c == QUOTE:
            quotes += 1
        i += 1
    return braces == 0 and quotes % 2 == 0


def is_delimited(s: str) -> bool:
    """Check s is enclosed in a quote pair or a brace pair and balanced.

    Examples:
        >>> is_delimited('{The {Death} of an "Author"}')
        True
        >>> is_delimited('"Pale {F}ire')
        False
    """
    if len(s) < 2:
        return False
    first, last = s[0], s[-1]
    if not ((first == QUOTE and last == QUOTE) or (first == "{" and last == "}")):
        return False
    return is_balanced(s)


def is_valid_field_text(s: str, *, strict: bool = True) -> bool:
    """Check a trimmed field value.

    Args:
        s: Trimmed field text
        strict: Require a digit run or a delimited value. When False, any
            balanced text is accepted (bare abbreviation references such as
            ``jan`` or ``jan # " 1"``).
    """
    if is_digit_run(s):
        return True
    if strict:
        return is_delimited(s)
    return is_balanced(s)
