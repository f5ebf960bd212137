"""Registry of task types and expression functions.

A ``Registry`` is filled while extensions are loaded and is read-only
afterwards: ``freeze()`` is called when the first project starts.  It is
passed explicitly to the project (and from there to the dispatcher and the
expression evaluator).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from antler.errors import ExtensionError

from ._discover import FUNCTION_SET, TASK, ExtensionType, _classify, discover
from ._functions import BoundFunction, FunctionSet, FunctionSignature

if TYPE_CHECKING:
    from antler.engine import Project

    from ._elements import Task

BUILTIN_PACKAGES = ("antler.tasks", "antler.functions")


class Registry:
    """Task tag and function name lookup tables."""

    def __init__(self) -> None:
        self.tasks: dict[str, type[Task]] = {}
        self.function_sets: dict[str, type[FunctionSet]] = {}
        self.functions: dict[str, tuple[type[FunctionSet], FunctionSignature]] = {}
        self._frozen = False

    @classmethod
    def default(cls) -> Registry:
        """A registry holding the built-in tasks and function sets."""
        registry = cls()
        registry.load(*BUILTIN_PACKAGES)
        return registry

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    # -----------------------------------------------------------------------
    # Registration
    # -----------------------------------------------------------------------

    def register(self, cls: type) -> ExtensionType:
        """Register a single ``@task`` or ``@function_set`` class."""
        try:
            extension = _classify(cls)
        except TypeError as exc:
            raise ExtensionError(str(exc)) from exc
        if extension is None:
            raise ExtensionError(
                f"{getattr(cls, '__qualname__', cls)!r} is not a task or function set type"
            )
        self.add(extension)
        return extension

    def add(self, extension: ExtensionType) -> None:
        if self._frozen:
            raise RuntimeError("Cannot register extensions after the registry is frozen")
        if extension.kind == TASK:
            previous = self.tasks.get(extension.name)
            if previous is not None and previous is not extension.cls:
                logger.warning(
                    "Task <{}> from {} replaces {}",
                    extension.name, extension.cls.__qualname__, previous.__qualname__,
                )
            self.tasks[extension.name] = extension.cls
        elif extension.kind == FUNCTION_SET:
            self.function_sets[extension.name] = extension.cls
            for name, signature in extension.cls._antler_functions.items():
                self.functions[name] = (extension.cls, signature)
        logger.debug("Registered {} '{}' ({})", extension.kind, extension.name, extension.module)

    def load(self, *package_names: str) -> list[ExtensionType]:
        """Scan packages (or plain modules) and register what they define."""
        found = discover(*package_names)
        for extension in found:
            self.add(extension)
        return found

    # -----------------------------------------------------------------------
    # Lookup
    # -----------------------------------------------------------------------

    def find_task(self, tag: str) -> type[Task] | None:
        return self.tasks.get(tag)

    def bind(self, project: Project) -> FunctionTable:
        """Function resolver whose function sets are bound to *project*."""
        return FunctionTable(self, project)


class FunctionTable:
    """Resolves ``prefix::name`` against a registry for one project.

    Function-set instances are created lazily, one per set.
    """

    def __init__(self, registry: Registry, project: Project) -> None:
        self.registry = registry
        self.project = project
        self._instances: dict[type[FunctionSet], FunctionSet] = {}

    def resolve_function(self, name: str) -> BoundFunction | None:
        entry = self.registry.functions.get(name)
        if entry is None:
            return None
        set_cls, signature = entry
        instance = self._instances.get(set_cls)
        if instance is None:
            instance = set_cls(self.project)
            self._instances[set_cls] = instance
        return BoundFunction(signature, instance)
