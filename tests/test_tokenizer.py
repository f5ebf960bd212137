"""Tests for the ${...} expression lexer."""

import pytest

from antler.errors import ExpressionSyntaxError
from antler.expressions import TokenKind, tokenize
from antler.model.document import Location


def kinds(text):
    return [tok.kind for tok in tokenize(text)]


def texts(text):
    return [tok.text for tok in tokenize(text) if tok.kind is not TokenKind.EOF]


# ---------------------------------------------------------------------------
# Literals and identifiers
# ---------------------------------------------------------------------------

class TestLiterals:
    def test_integer_and_double(self):
        assert kinds("12 3.5") == [TokenKind.NUMBER, TokenKind.NUMBER, TokenKind.EOF]
        assert texts("12 3.5") == ["12", "3.5"]

    def test_string_with_escaped_quote(self):
        tokens = list(tokenize("'it''s'"))
        assert tokens[0].kind is TokenKind.STRING
        assert tokens[0].text == "it's"
        assert (tokens[0].start, tokens[0].end) == (0, 7)

    def test_empty_string(self):
        tok = next(tokenize("''"))
        assert tok.kind is TokenKind.STRING
        assert tok.text == ""

    def test_dotted_and_dashed_identifier(self):
        assert texts("build.dir string::get-length") == [
            "build.dir", "string", "::", "get-length",
        ]

    def test_subtraction_with_spaces_is_not_an_identifier(self):
        assert texts("a - b") == ["a", "-", "b"]


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------

class TestOperators:
    @pytest.mark.parametrize(
        "text, kind",
        [
            ("==", TokenKind.EQ),
            ("=", TokenKind.EQ),
            ("!=", TokenKind.NE),
            ("<>", TokenKind.NE),
            ("<=", TokenKind.LE),
            (">=", TokenKind.GE),
            ("<", TokenKind.LT),
            (">", TokenKind.GT),
            ("%", TokenKind.MOD),
            ("}", TokenKind.RBRACE),
        ],
    )
    def test_operator(self, text, kind):
        assert kinds(text) == [kind, TokenKind.EOF]

    def test_positions_are_absolute(self):
        tokens = list(tokenize("x ${a + 1}", 4))
        assert [(t.text, t.start) for t in tokens[:3]] == [("a", 4), ("+", 6), ("1", 8)]

    def test_eof_at_end(self):
        tokens = list(tokenize("   "))
        assert len(tokens) == 1
        assert tokens[0].kind is TokenKind.EOF
        assert tokens[0].start == 3


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class TestErrors:
    def test_unterminated_string(self):
        with pytest.raises(ExpressionSyntaxError, match="Unterminated string"):
            list(tokenize("'abc"))

    def test_error_carries_location(self):
        where = Location(file="a.build", line=4, column=9)
        with pytest.raises(ExpressionSyntaxError) as info:
            list(tokenize("'abc", location=where))
        assert info.value.location == where
        assert str(info.value).startswith("a.build(4,9): Unterminated string")

    def test_unexpected_character(self):
        with pytest.raises(ExpressionSyntaxError) as info:
            list(tokenize("a # b"))
        assert info.value.start == 2
        assert "'#'" in info.value.message

    def test_lazy_scanning_stops_where_asked(self):
        gen = tokenize("a } #")
        assert next(gen).text == "a"
        assert next(gen).kind is TokenKind.RBRACE
