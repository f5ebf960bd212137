"""Attribute and nested-element declarations for task and element classes.

Task classes declare their configuration surface as class attributes::

    @task("copy")
    class CopyTask(Task):
        todir = attribute(DIRECTORY, required=True)
        overwrite = attribute(bool, default=False)
        retries = attribute(int, default=3, validators=[int_range(0, 10)])
        files = element_array(IncludeElement, name="include")

The ``@task``/``@element_name`` decorator collects these markers once, at
decoration time, into an ``ElementSchema``: an ordered table of XML name
to field name, converter and validators.  The binder only ever reads that
table.

Markers are non-data descriptors: reading a field that was never bound
returns its default, and binding stores the real value in the instance
``__dict__``, which shadows the marker.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from antler.expressions._values import parse_bool, parse_int

from ._types import AttributeType, _check_type_arg

Validator = Callable[[str], None]


# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------

def int_range(minimum: int | None = None, maximum: int | None = None) -> Validator:
    """Reject integers outside ``[minimum, maximum]``."""

    def validate(text: str) -> None:
        value = parse_int(text)
        if minimum is not None and value < minimum:
            raise ValueError(f"{value} is smaller than the minimum of {minimum}")
        if maximum is not None and value > maximum:
            raise ValueError(f"{value} is larger than the maximum of {maximum}")

    return validate


def string_check(*, allow_empty: bool = True, pattern: str | None = None) -> Validator:
    """Reject empty strings and/or strings not fully matching *pattern*."""
    regex = re.compile(pattern) if pattern is not None else None

    def validate(text: str) -> None:
        if not allow_empty and not text.strip():
            raise ValueError("an empty value is not allowed")
        if regex is not None and regex.fullmatch(text) is None:
            raise ValueError(f"'{text}' does not match the pattern '{pattern}'")

    return validate


def boolean(text: str) -> None:
    """Accept only ``true``/``false``."""
    parse_bool(text)


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

class AttributeSpec:
    """Marker for a scalar XML attribute."""

    __slots__ = ("py_name", "xml_name", "type", "required", "default",
                 "expand", "validators", "description")

    def __init__(
        self,
        type_arg: AttributeType,
        *,
        name: str | None = None,
        required: bool = False,
        default: Any = None,
        expand: bool = True,
        validators: Sequence[Validator] = (),
        description: str = "",
    ) -> None:
        self.type = _check_type_arg(type_arg)
        self.py_name = ""
        self.xml_name = name or ""
        self.required = required
        self.default = default
        self.expand = expand
        validators = list(validators)
        if self.type is bool:
            validators.insert(0, boolean)
        self.validators = tuple(validators)
        self.description = description

    def __set_name__(self, owner: type, name: str) -> None:
        self.py_name = name
        if not self.xml_name:
            self.xml_name = name.rstrip("_").replace("_", "")

    def __get__(self, instance: object, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return self.default

    def __repr__(self) -> str:
        return f"AttributeSpec({self.xml_name!r}, {self.type!r})"


class ElementSpec:
    """Marker for nested child elements (a single one or an array)."""

    __slots__ = ("py_name", "xml_name", "element_type", "required", "many",
                 "description")

    def __init__(
        self,
        element_type: type,
        *,
        name: str | None = None,
        required: bool = False,
        many: bool = True,
        description: str = "",
    ) -> None:
        self.element_type = element_type
        self.py_name = ""
        self.xml_name = name or ""
        self.required = required
        self.many = many
        self.description = description

    def __set_name__(self, owner: type, name: str) -> None:
        self.py_name = name
        if not self.xml_name:
            self.xml_name = getattr(self.element_type, "_antler_element_name", None) or name

    def __get__(self, instance: object, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return [] if self.many else None

    def __repr__(self) -> str:
        kind = "array" if self.many else "element"
        return f"ElementSpec({self.xml_name!r}, {kind})"


# ---------------------------------------------------------------------------
# Constructor functions
# ---------------------------------------------------------------------------

def attribute(
    type_arg: AttributeType,
    *,
    name: str | None = None,
    required: bool = False,
    default: Any = None,
    expand: bool = True,
    validators: Sequence[Validator] = (),
    description: str = "",
) -> Any:
    """Declare a scalar XML attribute.

    *name* defaults to the field name with underscores removed
    (``fail_on_error`` -> ``failonerror``, ``if_`` -> ``if``).  With
    ``expand=False`` the raw text is bound without property expansion.
    """
    return AttributeSpec(
        type_arg,
        name=name,
        required=required,
        default=default,
        expand=expand,
        validators=validators,
        description=description,
    )


def element(
    element_type: type,
    *,
    name: str | None = None,
    required: bool = False,
    description: str = "",
) -> Any:
    """Declare a single nested child element."""
    return ElementSpec(element_type, name=name, required=required, many=False,
                       description=description)


def element_array(
    element_type: type,
    *,
    name: str | None = None,
    required: bool = False,
    description: str = "",
) -> Any:
    """Declare a repeated nested child element, bound to a list."""
    return ElementSpec(element_type, name=name, required=required, many=True,
                       description=description)


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

CONDITION_ATTRIBUTES = ("if", "unless")


@dataclass(frozen=True)
class ElementSchema:
    """Ordered configuration surface of an element class."""

    conditions: tuple[AttributeSpec, ...] = ()
    attributes: tuple[AttributeSpec, ...] = ()
    elements: tuple[ElementSpec, ...] = ()
    accepts_text: bool = False
    accepts_tasks: bool = False


def _collect_markers(cls: type) -> list[AttributeSpec | ElementSpec]:
    """Find markers on *cls* and its bases, parents first.

    A subclass redeclaring a field replaces the parent's marker in place.
    """
    collected: dict[str, AttributeSpec | ElementSpec] = {}
    for base in reversed(cls.__mro__):
        if base is object:
            continue
        for attr_name, value in base.__dict__.items():
            if isinstance(value, (AttributeSpec, ElementSpec)):
                collected[attr_name] = value
            elif attr_name in collected:
                # Plain override of an inherited field drops the marker
                del collected[attr_name]
    return list(collected.values())


def build_schema(cls: type) -> ElementSchema:
    """Collect the declared configuration surface of *cls*."""
    conditions: list[AttributeSpec] = []
    attributes: list[AttributeSpec] = []
    elements: list[ElementSpec] = []
    attribute_names: set[str] = set()
    nested_names: set[str] = set()

    for marker in _collect_markers(cls):
        if isinstance(marker, AttributeSpec):
            if marker.xml_name in attribute_names:
                raise TypeError(
                    f"{cls.__name__} declares the attribute '{marker.xml_name}' twice"
                )
            attribute_names.add(marker.xml_name)
            if marker.xml_name in CONDITION_ATTRIBUTES:
                if marker.type is not bool:
                    raise TypeError(
                        f"{cls.__name__}: conditional attribute '{marker.xml_name}' must be bool"
                    )
                conditions.append(marker)
            else:
                attributes.append(marker)
        else:
            if marker.xml_name in nested_names:
                raise TypeError(
                    f"{cls.__name__} declares the nested element <{marker.xml_name}> twice"
                )
            nested_names.add(marker.xml_name)
            elements.append(marker)

    return ElementSchema(
        conditions=tuple(conditions),
        attributes=tuple(attributes),
        elements=tuple(elements),
        accepts_text=bool(getattr(cls, "accepts_text", False)),
        accepts_tasks=bool(getattr(cls, "accepts_tasks", False)),
    )


def schema_of(cls: type) -> ElementSchema:
    """Return the schema of *cls*, building and caching it on first use."""
    schema = cls.__dict__.get("_antler_schema")
    if schema is None:
        schema = build_schema(cls)
        cls._antler_schema = schema
    return schema
