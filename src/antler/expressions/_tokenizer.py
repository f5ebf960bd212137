"""Lexer for ``${...}`` expressions.

``tokenize()`` is a generator: tokens are produced one at a time as the
parser asks for them, starting at an offset inside the full attribute
text so that token positions can be reported against the original
string.  Scanning stops after the first ``EOF`` token; the parser decides
where the expression ends (at the closing ``}``).
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

from antler.errors import ExpressionSyntaxError

if TYPE_CHECKING:
    from antler.model.document import Location


class TokenKind(str, Enum):
    NUMBER = "number"
    STRING = "string"
    IDENT = "identifier"
    DOUBLE_COLON = "::"
    LPAREN = "("
    RPAREN = ")"
    COMMA = ","
    RBRACE = "}"
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    PLUS = "+"
    MINUS = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    EOF = "end of expression"


class Token(NamedTuple):
    kind: TokenKind
    text: str
    start: int
    end: int

    def is_keyword(self, word: str) -> bool:
        return self.kind is TokenKind.IDENT and self.text == word


_OPERATORS: dict[str, TokenKind] = {
    "::": TokenKind.DOUBLE_COLON,
    "==": TokenKind.EQ,
    "=": TokenKind.EQ,
    "!=": TokenKind.NE,
    "<>": TokenKind.NE,
    "<=": TokenKind.LE,
    ">=": TokenKind.GE,
    "<": TokenKind.LT,
    ">": TokenKind.GT,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.MUL,
    "/": TokenKind.DIV,
    "%": TokenKind.MOD,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
    "}": TokenKind.RBRACE,
}

# Identifiers may contain dots and dashes between word characters, so
# ``build.dir`` and ``get-length`` are single tokens while ``a - b`` is a
# subtraction.
_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<number>\d+(?:\.\d+)?)
    |(?P<string>'(?:[^']|'')*')
    |(?P<ident>[A-Za-z_]\w*(?:[-.]\w+)*)
    |(?P<op>::|==|!=|<>|<=|>=|[-+*/%(),}<>=])
    """,
    re.VERBOSE,
)


def tokenize(text: str, pos: int = 0, location: Location | None = None) -> Iterator[Token]:
    """Yield tokens of *text* starting at *pos*, ending with ``EOF``."""
    length = len(text)
    while pos < length:
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            ch = text[pos]
            if ch == "'":
                raise ExpressionSyntaxError(
                    "Unterminated string literal.", text, pos, length, location=location
                )
            raise ExpressionSyntaxError(
                f"Unexpected character '{ch}'.", text, pos, pos + 1, location=location
            )
        start, end = m.span()
        group = m.lastgroup
        if group == "ws":
            pass
        elif group == "number":
            yield Token(TokenKind.NUMBER, m.group(), start, end)
        elif group == "string":
            body = m.group()[1:-1].replace("''", "'")
            yield Token(TokenKind.STRING, body, start, end)
        elif group == "ident":
            yield Token(TokenKind.IDENT, m.group(), start, end)
        else:
            yield Token(_OPERATORS[m.group()], m.group(), start, end)
        pos = end
    yield Token(TokenKind.EOF, "", length, length)
