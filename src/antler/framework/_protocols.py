"""Extension protocols for framework-decorated classes.

These ``@runtime_checkable`` protocols are tested with ``isinstance`` on the
class object itself; only decorated classes carry the marker attributes.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ._functions import FunctionSignature


@runtime_checkable
class TaskType(Protocol):
    """A class decorated with ``@task``."""

    _antler_task_name: str

    def execute(self) -> None: ...


@runtime_checkable
class FunctionSetType(Protocol):
    """A class decorated with ``@function_set``."""

    _antler_prefix: str
    _antler_functions: dict[str, FunctionSignature]
