"""Semantic attribute types and their text converters.

An attribute is declared with one of:

- ``str``, ``bool``, ``int``, ``float``
- an ``Enum`` subclass (matched by value or member name, case-insensitive)
- ``FILE`` / ``DIRECTORY``: paths resolved against the project base
  directory, returned as ``pathlib.Path``
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from antler.expressions._values import ConversionError, parse_bool, parse_float, parse_int


class PathType:
    """Marker type for path-valued attributes."""

    __slots__ = ("kind",)

    def __init__(self, kind: str) -> None:
        self.kind = kind

    def __repr__(self) -> str:
        return self.kind.upper()


FILE = PathType("file")
DIRECTORY = PathType("directory")


AttributeType = type | PathType


def type_label(type_arg: AttributeType) -> str:
    """Name of an attribute type for error messages."""
    if isinstance(type_arg, PathType):
        return f"{type_arg.kind} path"
    if isinstance(type_arg, type) and issubclass(type_arg, Enum):
        return type_arg.__name__
    return {
        str: "string",
        bool: "boolean",
        int: "integer",
        float: "double",
    }.get(type_arg, getattr(type_arg, "__name__", str(type_arg)))


def _check_type_arg(type_arg: Any) -> AttributeType:
    if isinstance(type_arg, PathType):
        return type_arg
    if type_arg in (str, bool, int, float):
        return type_arg
    if isinstance(type_arg, type) and issubclass(type_arg, Enum):
        return type_arg
    raise TypeError(
        f"Unsupported attribute type {type_arg!r}; expected str, bool, int, "
        f"float, an Enum subclass, FILE or DIRECTORY"
    )


def _parse_enum(text: str, enum_type: type[Enum]) -> Enum:
    wanted = text.strip().lower()
    for member in enum_type:
        if str(member.value).lower() == wanted or member.name.lower() == wanted:
            return member
    valid = ", ".join(
        m.value if isinstance(m.value, str) else m.name.lower() for m in enum_type
    )
    raise ConversionError(f"Invalid value '{text}'. Valid values are: {valid}")


def resolve_path(text: str, base_dir: str | os.PathLike[str]) -> Path:
    """Resolve *text* relative to *base_dir* (absolute paths pass through)."""
    path = Path(os.path.expanduser(text.strip()))
    if not path.is_absolute():
        path = Path(base_dir) / path
    return Path(os.path.normpath(path))


def convert_attribute(text: str, type_arg: AttributeType, base_dir: str | os.PathLike[str] = ".") -> Any:
    """Convert expanded attribute text to the declared type.

    Raises ``ConversionError`` when the text does not fit the type.
    """
    if type_arg is str:
        return text
    if type_arg is bool:
        return parse_bool(text)
    if type_arg is int:
        return parse_int(text)
    if type_arg is float:
        return parse_float(text)
    if isinstance(type_arg, PathType):
        if not text.strip():
            raise ConversionError(f"an empty string is not a valid {type_arg.kind} path")
        return resolve_path(text, base_dir)
    if isinstance(type_arg, type) and issubclass(type_arg, Enum):
        return _parse_enum(text, type_arg)
    raise ConversionError(f"unsupported attribute type {type_arg!r}")
