"""Class decorators: ``@task(name)`` and ``@element_name(name)``.

Decoration is eager: the attribute schema is collected when the class is
defined, so a bad declaration fails at import time instead of halfway
through a build.
"""

from __future__ import annotations

import inspect
import re
from typing import Any, Callable, TypeVar

from ._descriptors import schema_of
from ._elements import Element, Task

T = TypeVar("T", bound=type)

_NAME_RE = re.compile(r"^[A-Za-z_][\w.-]*$")


def _check_name(name: Any, what: str) -> str:
    if not isinstance(name, str) or not _NAME_RE.match(name):
        raise TypeError(f"Invalid {what} name {name!r}")
    return name


def task(name: str) -> Callable[[T], T]:
    """Register a ``Task`` subclass under the XML tag *name*.

    Example::

        @task("touch")
        class TouchTask(Task):
            file = attribute(FILE, required=True)

            def execute(self):
                self.file.touch()
    """
    _check_name(name, "task")

    def decorator(cls: T) -> T:
        if not (isinstance(cls, type) and issubclass(cls, Task)):
            raise TypeError(f"@task can only decorate Task subclasses, got {cls!r}")
        if inspect.isabstract(cls):
            raise TypeError(f"@task({name!r}): {cls.__name__} does not implement execute()")
        cls._antler_task_name = name
        cls._antler_element_name = name
        cls._antler_schema = None
        schema_of(cls)
        return cls

    return decorator


def element_name(name: str) -> Callable[[T], T]:
    """Give a nested ``Element`` subclass its XML tag.

    Nested element types are not registered globally; a task refers to
    them through ``element()``/``element_array()``.
    """
    _check_name(name, "element")

    def decorator(cls: T) -> T:
        if not (isinstance(cls, type) and issubclass(cls, Element)):
            raise TypeError(f"@element_name can only decorate Element subclasses, got {cls!r}")
        cls._antler_element_name = name
        cls._antler_schema = None
        schema_of(cls)
        return cls

    return decorator
