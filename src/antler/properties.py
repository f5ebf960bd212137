"""Property store: named string values shared by every task of a build.

Semantics:

- lookup by key only, keys are case-sensitive
- the first ``set()`` wins; later calls without ``overwrite=True`` are
  silently ignored, so command-line properties take precedence over
  ``<property>`` declarations in the build file
- *dynamic* properties keep their unexpanded text and are re-evaluated on
  every ``get()``; a visiting guard turns self references into
  ``CircularPropertyReferenceError`` instead of infinite recursion
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from loguru import logger

from antler.errors import CircularPropertyReferenceError
from antler.expressions import FunctionResolver, evaluate, expand, to_string

if TYPE_CHECKING:
    from antler.model.document import Location


class PropertyStore:
    """Mapping of property name to string value with override rules.

    Parameters
    ----------
    functions : FunctionResolver, optional
        Resolver for ``namespace::function()`` calls made while expanding
        text.  The owning project installs one bound to its registry.
    """

    def __init__(self, functions: FunctionResolver | None = None) -> None:
        self.functions = functions
        self._values: dict[str, str] = {}
        self._read_only: set[str] = set()
        self._dynamic: set[str] = set()
        self._visiting: list[str] = []

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    def get(self, name: str) -> str | None:
        """Return the value of *name*, or ``None`` if it is not set.

        Dynamic properties are expanded on every read.
        """
        if name not in self._values:
            return None
        raw = self._values[name]
        if name not in self._dynamic:
            return raw
        return self._evaluate_dynamic(name, raw)

    def get_raw(self, name: str) -> str | None:
        """Return the stored text of *name* without expanding it."""
        return self._values.get(name)

    def contains(self, name: str) -> bool:
        return name in self._values

    def is_read_only(self, name: str) -> bool:
        return name in self._read_only

    def is_dynamic(self, name: str) -> bool:
        return name in self._dynamic

    def names(self) -> list[str]:
        return sorted(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def _evaluate_dynamic(self, name: str, raw: str) -> str:
        if name in self._visiting:
            cycle = self._visiting[self._visiting.index(name):] + [name]
            raise CircularPropertyReferenceError(cycle)
        self._visiting.append(name)
        try:
            return expand(raw, self, self.functions)
        finally:
            self._visiting.pop()

    # -----------------------------------------------------------------------
    # Writes
    # -----------------------------------------------------------------------

    def set(
        self,
        name: str,
        value: str,
        overwrite: bool = False,
        *,
        read_only: bool = False,
        dynamic: bool = False,
    ) -> bool:
        """Store *value* under *name*.

        Returns ``True`` if the store changed.  An existing property is
        only replaced when *overwrite* is set.
        """
        if name in self._values and not overwrite:
            logger.debug("Property '{}' already set, ignoring new value '{}'", name, value)
            return False
        self._values[name] = value
        if read_only:
            self._read_only.add(name)
        else:
            self._read_only.discard(name)
        if dynamic:
            self._dynamic.add(name)
        else:
            self._dynamic.discard(name)
        return True

    def add_read_only(self, name: str, value: str) -> bool:
        """Seed a read-only property (command line, configuration, built-ins)."""
        return self.set(name, value, read_only=True)

    def update(self, values: dict[str, Any], *, read_only: bool = False) -> None:
        for name, value in values.items():
            self.set(name, to_string(value), read_only=read_only)

    def remove(self, name: str) -> None:
        self._values.pop(name, None)
        self._read_only.discard(name)
        self._dynamic.discard(name)

    # -----------------------------------------------------------------------
    # Expansion
    # -----------------------------------------------------------------------

    def expand(self, text: str, location: Location | None = None) -> str:
        """Expand every ``${...}`` region of *text* against this store."""
        return expand(text, self, self.functions, location=location)

    def evaluate(self, expression: str, location: Location | None = None) -> Any:
        """Evaluate a bare expression to a typed value."""
        return evaluate(expression, self, self.functions, location=location)
