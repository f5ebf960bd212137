"""Expression function sets: ``@function_set(prefix)`` and ``@function(name)``.

A function set groups related expression functions under one namespace
prefix.  Each ``@function``-marked method becomes callable from an
expression as ``prefix::name(...)``::

    @function_set("string")
    class StringFunctions(FunctionSet):
        @function("to-upper")
        def to_upper(self, value: str) -> str:
            return value.upper()

Parameter types come from the method annotations and are used to convert
the actual arguments before the call.  Parameters with a default value are
optional.
"""

from __future__ import annotations

import inspect
import typing
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from antler.expressions import Parameter

if TYPE_CHECKING:
    from antler.engine import Project

T = TypeVar("T", bound=type)

_ARGUMENT_TYPES = (str, int, float, bool)


class FunctionSet:
    """Base class for function sets.  One instance is created per project."""

    def __init__(self, project: Project) -> None:
        self.project = project


@dataclass(frozen=True)
class _FunctionMarker:
    """Stored as ``func._antler_function`` on ``@function`` methods."""

    name: str
    description: str


@dataclass(frozen=True)
class FunctionSignature:
    """A resolved function: qualified name, method and formal parameters."""

    name: str
    method_name: str
    parameters: tuple[Parameter, ...]
    description: str = ""


def function(name: str, *, description: str = "") -> Callable[[Any], Any]:
    """Expose a ``FunctionSet`` method to expressions under *name*."""

    def decorator(fn: Any) -> Any:
        fn._antler_function = _FunctionMarker(name, description or (fn.__doc__ or "").strip())
        return fn

    return decorator


def _parameter_type(annotation: Any) -> type | None:
    if annotation in _ARGUMENT_TYPES:
        return annotation
    if annotation in (Any, object, inspect.Parameter.empty):
        return None
    raise TypeError(f"Unsupported function parameter type {annotation!r}")


def _signature(fn: Any, qualified: str) -> FunctionSignature:
    hints = typing.get_type_hints(fn)
    params: list[Parameter] = []
    for p in list(inspect.signature(fn).parameters.values())[1:]:
        if p.kind not in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD):
            raise TypeError(f"{qualified}: only positional parameters are supported")
        params.append(
            Parameter(
                name=p.name,
                type=_parameter_type(hints.get(p.name, inspect.Parameter.empty)),
                required=p.default is inspect.Parameter.empty,
            )
        )
    return FunctionSignature(
        name=qualified,
        method_name=fn.__name__,
        parameters=tuple(params),
        description=fn._antler_function.description,
    )


def _collect_functions(cls: type, prefix: str) -> dict[str, FunctionSignature]:
    """Collect ``@function`` methods from *cls* and its MRO, parents first."""
    collected: dict[str, FunctionSignature] = {}
    for base in reversed(cls.__mro__):
        if base is object:
            continue
        for value in base.__dict__.values():
            marker = getattr(value, "_antler_function", None)
            if not isinstance(marker, _FunctionMarker):
                continue
            qualified = f"{prefix}::{marker.name}"
            collected[qualified] = _signature(value, qualified)
    return collected


def function_set(prefix: str) -> Callable[[T], T]:
    """Register a ``FunctionSet`` subclass under the namespace *prefix*."""

    def decorator(cls: T) -> T:
        if not (isinstance(cls, type) and issubclass(cls, FunctionSet)):
            raise TypeError(f"@function_set can only decorate FunctionSet subclasses, got {cls!r}")
        functions = _collect_functions(cls, prefix)
        if not functions:
            raise TypeError(f"@function_set({prefix!r}): {cls.__name__} declares no @function methods")
        cls._antler_prefix = prefix
        cls._antler_functions = functions
        return cls

    return decorator


class BoundFunction:
    """A ``FunctionSignature`` bound to a function-set instance."""

    __slots__ = ("signature", "instance")

    def __init__(self, signature: FunctionSignature, instance: FunctionSet) -> None:
        self.signature = signature
        self.instance = instance

    @property
    def name(self) -> str:
        return self.signature.name

    @property
    def parameters(self) -> tuple[Parameter, ...]:
        return self.signature.parameters

    def invoke(self, args: list[Any]) -> Any:
        return getattr(self.instance, self.signature.method_name)(*args)

    def __repr__(self) -> str:
        return f"BoundFunction({self.name!r})"
