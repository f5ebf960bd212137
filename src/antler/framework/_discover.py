"""Extension scanning: find task and function-set types in modules.

Walks package trees, imports every submodule and collects the classes
decorated with ``@task`` or ``@function_set`` that are *defined* in the
scanned module (re-exports are ignored, so a type is found once, in its
home module).  Abstract classes are skipped.
"""

from __future__ import annotations

import importlib
import inspect
import pkgutil
from dataclasses import dataclass
from types import ModuleType

from loguru import logger

from antler.errors import ExtensionError

from ._elements import Task
from ._functions import FunctionSet
from ._protocols import FunctionSetType, TaskType

TASK = "task"
FUNCTION_SET = "function-set"


@dataclass(frozen=True)
class ExtensionType:
    """A loadable type found by the scanner."""

    kind: str
    name: str
    cls: type
    module: str = ""


def _classify(obj: type) -> ExtensionType | None:
    if "_antler_task_name" in obj.__dict__ and isinstance(obj, TaskType):
        if not issubclass(obj, Task):
            raise TypeError(f"{obj.__qualname__} is marked as a task but does not derive from Task")
        return ExtensionType(TASK, obj._antler_task_name, obj, obj.__module__)
    if "_antler_prefix" in obj.__dict__ and isinstance(obj, FunctionSetType):
        if not issubclass(obj, FunctionSet):
            raise TypeError(
                f"{obj.__qualname__} is marked as a function set but does not derive from FunctionSet"
            )
        return ExtensionType(FUNCTION_SET, obj._antler_prefix, obj, obj.__module__)
    return None


def scan(module: ModuleType) -> set[ExtensionType]:
    """Return the extension types defined in *module*.

    A type that carries a marker but cannot be used is logged and raised
    as ``ExtensionError``.
    """
    found: set[ExtensionType] = set()
    for attr_name in dir(module):
        obj = getattr(module, attr_name)
        if not isinstance(obj, type) or getattr(obj, "__module__", None) != module.__name__:
            continue
        if inspect.isabstract(obj):
            continue
        try:
            extension = _classify(obj)
        except Exception as exc:
            logger.error("Failed to load type '{}' from module '{}': {}", attr_name, module.__name__, exc)
            raise ExtensionError(
                f"Failed to load type '{attr_name}' from module '{module.__name__}': {exc}"
            ) from exc
        if extension is not None:
            logger.debug("Found {} '{}' ({}.{})", extension.kind, extension.name, module.__name__, attr_name)
            found.add(extension)
    return found


def _import(name: str) -> ModuleType:
    try:
        return importlib.import_module(name)
    except Exception as exc:
        logger.error("Failed to import extension module '{}': {}", name, exc)
        raise ExtensionError(f"Failed to import extension module '{name}': {exc}") from exc


def _walk_package(package_name: str) -> list[ModuleType]:
    """Import a package and all its submodules, return as a flat list."""
    root = _import(package_name)
    modules = [root]

    if not hasattr(root, "__path__"):
        # Not a package, just a single module
        return modules

    for _finder, modname, _ispkg in pkgutil.walk_packages(root.__path__, prefix=package_name + "."):
        modules.append(_import(modname))
    return modules


def discover(*package_names: str) -> list[ExtensionType]:
    """Scan every module of the given packages.

    Results are ordered by module, then by kind and name, so registration
    order (and the winner of a name clash) is stable.
    """
    result: list[ExtensionType] = []
    seen: set[type] = set()
    for pkg_name in package_names:
        for mod in _walk_package(pkg_name):
            for extension in sorted(scan(mod), key=lambda e: (e.kind, e.name)):
                if extension.cls in seen:
                    continue
                seen.add(extension.cls)
                result.append(extension)
    return result
