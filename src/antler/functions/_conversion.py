"""Type conversion functions.

Arguments are converted to the declared parameter type before the call,
so most of these only hand the value back in the requested type.
"""

from __future__ import annotations

from typing import Any

from antler.expressions import to_string
from antler.expressions._values import parse_bool, parse_float, parse_int
from antler.framework import FunctionSet, function, function_set


@function_set("int")
class IntFunctions(FunctionSet):
    @function("parse")
    def parse(self, s: str) -> int:
        return parse_int(s)

    @function("to-string")
    def to_string(self, value: int) -> str:
        return str(value)


@function_set("double")
class DoubleFunctions(FunctionSet):
    @function("parse")
    def parse(self, s: str) -> float:
        return parse_float(s)

    @function("to-string")
    def to_string(self, value: float) -> str:
        return to_string(value)


@function_set("bool")
class BoolFunctions(FunctionSet):
    @function("parse")
    def parse(self, s: str) -> bool:
        return parse_bool(s)

    @function("to-string")
    def to_string(self, value: bool) -> str:
        return to_string(value)


@function_set("convert")
class ConversionFunctions(FunctionSet):
    """Explicit conversions between expression types."""

    @function("to-int")
    def to_int(self, value: int) -> int:
        return value

    @function("to-double")
    def to_double(self, value: float) -> float:
        return value

    @function("to-string")
    def to_string(self, value: Any) -> str:
        return to_string(value)

    @function("to-boolean")
    def to_boolean(self, value: bool) -> bool:
        return value
