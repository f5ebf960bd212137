"""Recursive-descent evaluator for ``${...}`` expressions.

Grammar (lowest precedence first)::

    expression     := or_expr
    or_expr        := and_expr ( "or" and_expr )*
    and_expr       := equality ( "and" equality )*
    equality       := relational ( ("==" | "!=") relational )*
    relational     := additive ( ("<" | "<=" | ">" | ">=") additive )*
    additive       := multiplicative ( ("+" | "-") multiplicative )*
    multiplicative := unary ( ("*" | "/" | "%") unary )*
    unary          := ("-" | "not") unary | primary
    primary        := NUMBER | STRING | "true" | "false"
                    | "(" expression ")"
                    | "if" "(" expression "," expression "," expression ")"
                    | IDENT "::" IDENT "(" [ expression ("," expression)* ] ")"
                    | IDENT

The parser evaluates while it parses.  Branches that are not taken
(``or``/``and`` short-circuit, the unused arm of ``if()``) are parsed with
evaluation switched off: they are still syntax-checked but no property
is read and no function is called.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from antler.errors import (
    BuildError,
    ExpressionEvaluationError,
    ExpressionSyntaxError,
    FunctionArgumentError,
    PropertyNotFoundError,
)

from ._tokenizer import Token, TokenKind, tokenize
from ._values import ConversionError, convert, is_number, to_string, type_name

if TYPE_CHECKING:
    from antler.model.document import Location


# ---------------------------------------------------------------------------
# Collaborator protocols
# ---------------------------------------------------------------------------

class PropertySource(Protocol):
    """What the evaluator needs from a property store."""

    def get(self, name: str) -> str | None: ...

    def contains(self, name: str) -> bool: ...


@dataclass(frozen=True)
class Parameter:
    """A formal parameter of an expression function."""

    name: str
    type: type | None = None
    required: bool = True


class FunctionBinding(Protocol):
    """A callable expression function resolved by name."""

    name: str
    parameters: Sequence[Parameter]

    def invoke(self, args: list[Any]) -> Any: ...


class FunctionResolver(Protocol):
    def resolve_function(self, name: str) -> FunctionBinding | None: ...


@dataclass(frozen=True)
class FunctionArgument:
    """An evaluated actual argument and the span it was parsed from."""

    index: int
    name: str
    value: Any
    start: int
    end: int


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

_EQUALITY = (TokenKind.EQ, TokenKind.NE)
_RELATIONAL = (TokenKind.LT, TokenKind.LE, TokenKind.GT, TokenKind.GE)


class _Parser:
    def __init__(
        self,
        text: str,
        pos: int,
        properties: PropertySource | None,
        functions: FunctionResolver | None,
        location: Location | None,
        evaluate: bool = True,
    ) -> None:
        self.text = text
        self.properties = properties
        self.functions = functions
        self.location = location
        self.evaluating = evaluate
        self._tokens: Iterator[Token] = tokenize(text, pos, location)
        self._last_end = pos
        self.current = next(self._tokens)

    # -- token handling -----------------------------------------------------

    def advance(self) -> Token:
        tok = self.current
        self._last_end = tok.end
        if tok.kind is not TokenKind.EOF:
            self.current = next(self._tokens)
        return tok

    def expect(self, kind: TokenKind) -> Token:
        if self.current.kind is not kind:
            raise self.syntax_error(f"'{kind.value}' expected.", self.current.start, self.current.end)
        return self.advance()

    # -- error helpers ------------------------------------------------------

    def syntax_error(self, message: str, start: int, end: int) -> ExpressionSyntaxError:
        return ExpressionSyntaxError(message, self.text, start, end, location=self.location)

    def eval_error(self, message: str, start: int, end: int) -> ExpressionEvaluationError:
        return ExpressionEvaluationError(message, self.text, start, end, location=self.location)

    def to_type(self, value: Any, target: type, description: str, start: int, end: int) -> Any:
        try:
            return convert(value, target)
        except ConversionError as exc:
            raise self.eval_error(
                f"Cannot convert {description} to '{type_name(target)}' "
                f"(actual type was '{type_name(value)}').",
                start, end,
            ) from exc

    # -- productions --------------------------------------------------------

    def parse_expression(self) -> Any:
        return self.parse_or()

    def _parse_logical(self, keyword: str, operand, short_circuit_on: bool) -> Any:
        start = self.current.start
        left = operand()
        saved = self.evaluating
        try:
            while self.current.is_keyword(keyword):
                lhs = None
                if self.evaluating:
                    lhs = self.to_type(
                        left, bool, f"the left hand side of the '{keyword}' operator",
                        start, self._last_end,
                    )
                    if lhs is short_circuit_on:
                        self.evaluating = False
                self.advance()
                rstart = self.current.start
                right = operand()
                if self.evaluating:
                    rhs = self.to_type(
                        right, bool, f"the right hand side of the '{keyword}' operator",
                        rstart, self._last_end,
                    )
                    left = (lhs or rhs) if keyword == "or" else (lhs and rhs)
                elif saved:
                    left = short_circuit_on
            return left
        finally:
            self.evaluating = saved

    def parse_or(self) -> Any:
        return self._parse_logical("or", self.parse_and, True)

    def parse_and(self) -> Any:
        return self._parse_logical("and", self.parse_equality, False)

    def parse_equality(self) -> Any:
        start = self.current.start
        left = self.parse_relational()
        while self.current.kind in _EQUALITY:
            op = self.advance().kind
            right = self.parse_relational()
            if self.evaluating:
                left = self._compare(op, left, right, start)
        return left

    def parse_relational(self) -> Any:
        start = self.current.start
        left = self.parse_additive()
        while self.current.kind in _RELATIONAL:
            op = self.advance().kind
            right = self.parse_additive()
            if self.evaluating:
                left = self._compare(op, left, right, start)
        return left

    def _compare(self, op: TokenKind, left: Any, right: Any, start: int) -> bool:
        if is_number(left) and is_number(right):
            a, b = left, right
        elif type(left) is type(right):
            a, b = left, right
        elif op in _EQUALITY:
            a, b = to_string(left), to_string(right)
        else:
            raise self.eval_error(
                f"Cannot compare '{type_name(left)}' with '{type_name(right)}'.",
                start, self._last_end,
            )
        try:
            if op is TokenKind.EQ:
                return a == b
            if op is TokenKind.NE:
                return a != b
            if op is TokenKind.LT:
                return a < b
            if op is TokenKind.LE:
                return a <= b
            if op is TokenKind.GT:
                return a > b
            return a >= b
        except TypeError as exc:
            raise self.eval_error(
                f"Cannot compare '{type_name(left)}' with '{type_name(right)}'.",
                start, self._last_end,
            ) from exc

    def parse_additive(self) -> Any:
        start = self.current.start
        left = self.parse_multiplicative()
        while self.current.kind in (TokenKind.PLUS, TokenKind.MINUS):
            op = self.advance().kind
            right = self.parse_multiplicative()
            if not self.evaluating:
                continue
            if op is TokenKind.PLUS and (isinstance(left, str) or isinstance(right, str)):
                left = to_string(left) + to_string(right)
            elif is_number(left) and is_number(right):
                left = left + right if op is TokenKind.PLUS else left - right
            else:
                what = "Addition" if op is TokenKind.PLUS else "Subtraction"
                raise self.eval_error(
                    f"{what} not supported for arguments of type "
                    f"'{type_name(left)}' and '{type_name(right)}'.",
                    start, self._last_end,
                )
        return left

    def parse_multiplicative(self) -> Any:
        start = self.current.start
        left = self.parse_unary()
        while self.current.kind in (TokenKind.MUL, TokenKind.DIV, TokenKind.MOD):
            op = self.advance().kind
            rstart = self.current.start
            right = self.parse_unary()
            if not self.evaluating:
                continue
            if not (is_number(left) and is_number(right)):
                what = {
                    TokenKind.MUL: "Multiplication",
                    TokenKind.DIV: "Division",
                    TokenKind.MOD: "Modulus",
                }[op]
                raise self.eval_error(
                    f"{what} not supported for arguments of type "
                    f"'{type_name(left)}' and '{type_name(right)}'.",
                    start, self._last_end,
                )
            if op is TokenKind.MUL:
                left = left * right
                continue
            if right == 0:
                raise self.eval_error("Attempt to divide by zero.", rstart, self._last_end)
            if isinstance(left, float) or isinstance(right, float):
                left = left / right if op is TokenKind.DIV else _float_mod(left, right)
            else:
                quotient = _trunc_div(left, right)
                left = quotient if op is TokenKind.DIV else left - right * quotient
        return left

    def parse_unary(self) -> Any:
        if self.current.kind is TokenKind.MINUS:
            self.advance()
            start = self.current.start
            value = self.parse_unary()
            if not self.evaluating:
                return None
            if not is_number(value):
                raise self.eval_error(
                    f"Unary minus not supported for arguments of type '{type_name(value)}'.",
                    start, self._last_end,
                )
            return -value
        if self.current.is_keyword("not"):
            self.advance()
            start = self.current.start
            value = self.parse_unary()
            if not self.evaluating:
                return None
            return not self.to_type(value, bool, "the argument of 'not' operator", start, self._last_end)
        return self.parse_primary()

    def parse_primary(self) -> Any:
        tok = self.current

        if tok.kind is TokenKind.STRING:
            self.advance()
            if self.evaluating and "${" in tok.text:
                # Inner expressions are expanded before the enclosing
                # expression (or function call) sees the value.
                return expand(tok.text, self.properties, self.functions, location=self.location)
            return tok.text

        if tok.kind is TokenKind.NUMBER:
            self.advance()
            return float(tok.text) if "." in tok.text else int(tok.text)

        if tok.kind is TokenKind.LPAREN:
            self.advance()
            value = self.parse_expression()
            self.expect(TokenKind.RPAREN)
            return value

        if tok.kind is TokenKind.IDENT:
            if tok.text == "true":
                self.advance()
                return True
            if tok.text == "false":
                self.advance()
                return False
            self.advance()
            if tok.text == "if" and self.current.kind is TokenKind.LPAREN:
                return self._parse_conditional()
            if self.current.kind is TokenKind.DOUBLE_COLON:
                return self._parse_function_call(tok)
            return self._read_property(tok)

        if tok.kind is TokenKind.EOF:
            raise self.syntax_error("Unexpected end of expression.", tok.start, tok.end)
        raise self.syntax_error(f"Unexpected token '{tok.text}'.", tok.start, tok.end)

    def _parse_conditional(self) -> Any:
        self.expect(TokenKind.LPAREN)
        start = self.current.start
        cond_value = self.parse_expression()
        cond = False
        if self.evaluating:
            cond = self.to_type(cond_value, bool, "the conditional expression", start, self._last_end)
        self.expect(TokenKind.COMMA)

        saved = self.evaluating
        try:
            self.evaluating = saved and cond
            then_value = self.parse_expression()
            self.expect(TokenKind.COMMA)
            self.evaluating = saved and not cond
            else_value = self.parse_expression()
        finally:
            self.evaluating = saved
        self.expect(TokenKind.RPAREN)
        if not self.evaluating:
            return None
        return then_value if cond else else_value

    def _read_property(self, tok: Token) -> Any:
        if not self.evaluating:
            return None
        if self.properties is None:
            raise PropertyNotFoundError(
                tok.text, expression=self.text, start=tok.start, end=tok.end, location=self.location
            )
        value = self.properties.get(tok.text)
        if value is None and not self.properties.contains(tok.text):
            raise PropertyNotFoundError(
                tok.text, expression=self.text, start=tok.start, end=tok.end, location=self.location
            )
        return value

    def _parse_function_call(self, prefix: Token) -> Any:
        self.advance()  # '::'
        name_tok = self.current
        if name_tok.kind is not TokenKind.IDENT:
            raise self.syntax_error("Function name expected.", prefix.start, name_tok.end)
        self.advance()
        name = f"{prefix.text}::{name_tok.text}"
        self.expect(TokenKind.LPAREN)

        binding: FunctionBinding | None = None
        if self.functions is not None:
            binding = self.functions.resolve_function(name)
            if binding is None:
                raise self.eval_error(f"Unknown function '{name}'.", prefix.start, name_tok.end)
        elif self.evaluating:
            raise self.eval_error(f"Unknown function '{name}'.", prefix.start, name_tok.end)

        params = list(binding.parameters) if binding is not None else []
        args: list[FunctionArgument] = []
        while self.current.kind not in (TokenKind.RPAREN, TokenKind.EOF):
            index = len(args) + 1
            if binding is not None and index > len(params):
                raise FunctionArgumentError(
                    f"Too many actual parameters for '{name}'.", name, index,
                    expression=self.text, start=self.current.start, end=self.current.end,
                    location=self.location,
                )
            start = self.current.start
            value = self.parse_expression()
            end = self._last_end
            param = params[index - 1] if binding is not None else Parameter(f"arg{index}")
            if self.evaluating:
                try:
                    value = convert(value, param.type)
                except ConversionError as exc:
                    raise FunctionArgumentError(
                        f"Cannot convert argument {index} ({param.name}) of {name}() to "
                        f"'{type_name(param.type)}' (actual type was '{type_name(value)}').",
                        name, index,
                        expression=self.text, start=start, end=end, location=self.location,
                    ) from exc
            args.append(FunctionArgument(index, param.name, value, start, end))
            if self.current.kind is TokenKind.RPAREN:
                break
            self.expect(TokenKind.COMMA)
        close = self.expect(TokenKind.RPAREN)

        if binding is not None:
            required = sum(1 for p in params if p.required)
            if len(args) < required:
                raise FunctionArgumentError(
                    f"Too few actual parameters for '{name}'.", name, len(args) + 1,
                    expression=self.text, start=prefix.start, end=close.end,
                    location=self.location,
                )

        if not self.evaluating:
            return None
        try:
            return binding.invoke([a.value for a in args])
        except BuildError:
            raise
        except Exception as exc:
            raise self.eval_error(
                f"Function call failed: {name}(): {exc}", prefix.start, close.end
            ) from exc


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding towards zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _float_mod(a: float, b: float) -> float:
    return a - b * int(a / b)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def expand(
    text: str,
    properties: PropertySource | None,
    functions: FunctionResolver | None = None,
    *,
    location: Location | None = None,
) -> str:
    """Replace every ``${...}`` region of *text* with its evaluated value.

    Text outside the regions is copied unchanged.
    """
    if "${" not in text:
        return text

    out: list[str] = []
    pos = 0
    while True:
        start = text.find("${", pos)
        if start < 0:
            out.append(text[pos:])
            break
        out.append(text[pos:start])
        parser = _Parser(text, start + 2, properties, functions, location)
        value = parser.parse_expression()
        if parser.current.kind is not TokenKind.RBRACE:
            tok = parser.current
            if tok.kind is TokenKind.EOF:
                raise parser.syntax_error("'}' expected.", start, tok.end)
            raise parser.syntax_error(f"Unexpected token '{tok.text}'.", tok.start, tok.end)
        pos = parser.current.end
        out.append(to_string(value))
    return "".join(out)


def evaluate(
    expression: str,
    properties: PropertySource | None,
    functions: FunctionResolver | None = None,
    *,
    location: Location | None = None,
) -> Any:
    """Evaluate a bare expression (no ``${}`` delimiters) to a typed value."""
    parser = _Parser(expression, 0, properties, functions, location)
    value = parser.parse_expression()
    if parser.current.kind is not TokenKind.EOF:
        tok = parser.current
        raise parser.syntax_error("Unexpected token at the end of expression.", tok.start, tok.end)
    return value


def check_syntax(expression: str, functions: FunctionResolver | None = None) -> None:
    """Parse *expression* without evaluating it; raise on syntax errors."""
    parser = _Parser(expression, 0, None, functions, None, evaluate=False)
    parser.parse_expression()
    if parser.current.kind is not TokenKind.EOF:
        tok = parser.current
        raise parser.syntax_error("Unexpected token at the end of expression.", tok.start, tok.end)
