from __future__ import annotations

from antler.framework import FunctionSet, function, function_set


def _check_index(name: str, value: int, length: int) -> None:
    if value < 0:
        raise ValueError(f"'{name}' cannot be negative")
    if value > length:
        raise ValueError(f"'{name}' cannot be greater than the length of the string")


@function_set("string")
class StringFunctions(FunctionSet):
    """String manipulation.  Indices are 0-based; searches are case-sensitive."""

    @function("get-length")
    def get_length(self, s: str) -> int:
        return len(s)

    @function("substring")
    def substring(self, s: str, start: int, length: int) -> str:
        _check_index("start", start, len(s))
        if length < 0:
            raise ValueError("'length' cannot be negative")
        if start + length > len(s):
            raise ValueError("'start' plus 'length' exceeds the length of the string")
        return s[start:start + length]

    @function("starts-with")
    def starts_with(self, s: str, value: str) -> bool:
        return s.startswith(value)

    @function("ends-with")
    def ends_with(self, s: str, value: str) -> bool:
        return s.endswith(value)

    @function("to-lower")
    def to_lower(self, s: str) -> str:
        return s.lower()

    @function("to-upper")
    def to_upper(self, s: str) -> str:
        return s.upper()

    @function("contains")
    def contains(self, s: str, value: str) -> bool:
        return value in s

    @function("index-of")
    def index_of(self, s: str, value: str) -> int:
        """Position of the first occurrence of *value*, or -1."""
        return s.find(value)

    @function("last-index-of")
    def last_index_of(self, s: str, value: str) -> int:
        """Position of the last occurrence of *value*, or -1."""
        return s.rfind(value)

    @function("pad-left")
    def pad_left(self, s: str, total_width: int, padding_char: str) -> str:
        if len(padding_char) != 1:
            raise ValueError("'padding_char' must be a single character")
        return s.rjust(total_width, padding_char)

    @function("pad-right")
    def pad_right(self, s: str, total_width: int, padding_char: str) -> str:
        if len(padding_char) != 1:
            raise ValueError("'padding_char' must be a single character")
        return s.ljust(total_width, padding_char)

    @function("trim")
    def trim(self, s: str) -> str:
        return s.strip()

    @function("trim-start")
    def trim_start(self, s: str) -> str:
        return s.lstrip()

    @function("trim-end")
    def trim_end(self, s: str) -> str:
        return s.rstrip()

    @function("replace")
    def replace(self, s: str, old_value: str, new_value: str) -> str:
        if not old_value:
            raise ValueError("'old_value' cannot be empty")
        return s.replace(old_value, new_value)
