"""antler expressions: the ``${...}`` mini-language.

Entry points::

    from antler.expressions import expand, evaluate

    expand("${build.dir}/bin", properties)           # -> "out/bin"
    evaluate("string::to-upper(name)", properties, functions)
"""

from __future__ import annotations

from ._evaluator import (
    FunctionArgument,
    FunctionBinding,
    FunctionResolver,
    Parameter,
    PropertySource,
    check_syntax,
    evaluate,
    expand,
)
from ._tokenizer import Token, TokenKind, tokenize
from ._values import ConversionError, convert, parse_bool, to_string, type_name

__all__ = [
    "ConversionError",
    "FunctionArgument",
    "FunctionBinding",
    "FunctionResolver",
    "Parameter",
    "PropertySource",
    "Token",
    "TokenKind",
    "check_syntax",
    "convert",
    "evaluate",
    "expand",
    "parse_bool",
    "to_string",
    "tokenize",
    "type_name",
]
