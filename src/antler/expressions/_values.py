"""Value system for the expression evaluator.

Expressions produce ``str``, ``int``, ``float`` or ``bool`` values (plus
opaque objects returned by extension functions).  This module converts
between them with the same restrictions everywhere:

- booleans convert only to ``str`` and ``bool``
- only strings and booleans convert to ``bool``
- strings parse to numbers, numbers never parse from booleans
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Any


class ConversionError(ValueError):
    """A value cannot be converted to the requested type."""


_TYPE_NAMES: dict[type, str] = {
    str: "string",
    int: "integer",
    float: "double",
    bool: "boolean",
}


def type_name(t: type | object) -> str:
    """Human-readable name for a value type (``"integer"``, ``"string"``...)."""
    if not isinstance(t, type):
        t = type(t)
    if t in _TYPE_NAMES:
        return _TYPE_NAMES[t]
    if t is type(None):
        return "null"
    return f"{t.__module__}.{t.__qualname__}"


def is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _format_float(value: float) -> str:
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def to_string(value: object) -> str:
    """Render an expression value the way it is spliced into text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, os.PathLike):
        return os.fspath(value)
    return str(value)


def parse_bool(text: str) -> bool:
    """Parse ``true``/``false`` (case-insensitive, surrounding blanks ignored)."""
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ConversionError(f"'{text}' is not a valid boolean value (expected 'true' or 'false')")


def parse_int(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise ConversionError(f"'{text}' is not a valid integer") from None


def parse_float(text: str) -> float:
    try:
        return float(text.strip())
    except ValueError:
        raise ConversionError(f"'{text}' is not a valid number") from None


def convert(value: Any, target: type | None) -> Any:
    """Convert *value* to *target*.

    ``None``/``object`` targets accept anything unchanged.  Raises
    ``ConversionError`` for disallowed or failed conversions.
    """
    if target is None or target is object or target is Any:
        return value
    if target is str:
        return to_string(value)

    if value is None:
        raise ConversionError(f"cannot convert null to '{type_name(target)}'")

    if target is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return parse_bool(value)
        raise ConversionError(
            f"cannot convert '{type_name(value)}' to 'boolean'"
        )

    if isinstance(value, bool):
        raise ConversionError(
            f"cannot convert 'boolean' to '{type_name(target)}'"
        )

    if target is int:
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return round(value)
        if isinstance(value, str):
            return parse_int(value)
    elif target is float:
        if is_number(value):
            return float(value)
        if isinstance(value, str):
            return parse_float(value)
    elif isinstance(value, target):
        return value

    raise ConversionError(
        f"cannot convert '{type_name(value)}' to '{type_name(target)}'"
    )
