"""Base classes for everything that can appear in a build file.

``Element`` is anything configured from an XML element.  ``Task`` adds the
``execute()`` entry point and the attributes every task shares
(``if``, ``unless``, ``failonerror``, ``verbose``).  ``TaskContainer`` is a
task whose unrecognised children are themselves tasks, run in document
order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from antler.listeners import Level

from ._descriptors import attribute

if TYPE_CHECKING:
    from antler.engine import Project
    from antler.model.document import ElementNode, Location
    from antler.properties import PropertyStore


class Element:
    """Something configured from an ``ElementNode``.

    Instances are created by the binder (or the dispatcher for tasks) with
    the owning project and the source node.  Field values come from the
    class-level ``attribute()``/``element()`` declarations.
    """

    _antler_element_name: ClassVar[str] = ""

    #: element text (``<echo>hello</echo>``) is bound to ``self.text``
    accepts_text: ClassVar[bool] = False
    #: unknown children are kept as ``child_nodes`` instead of rejected
    accepts_tasks: ClassVar[bool] = False

    def __init__(
        self,
        project: Project,
        node: ElementNode | None = None,
        parent: Element | None = None,
    ) -> None:
        self.project = project
        self.node = node
        self.parent = parent
        self.text = ""
        self.child_nodes: list[ElementNode] = []

    @property
    def element_name(self) -> str:
        if self.node is not None:
            return self.node.tag
        return type(self)._antler_element_name or type(self).__name__.lower()

    @property
    def location(self) -> Location | None:
        return self.node.location if self.node is not None else None

    @property
    def properties(self) -> PropertyStore:
        return self.project.properties

    def initialize(self) -> None:
        """Hook called after all attributes and children are bound."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} <{self.element_name}> at {self.location}>"


class ConditionalElement(Element):
    """An element that can be switched off with ``if``/``unless``."""

    if_ = attribute(bool, default=True, description="Process the element only if true.")
    unless = attribute(bool, default=False, description="Skip the element if true.")

    @property
    def enabled(self) -> bool:
        return bool(self.if_) and not self.unless


class Task(ConditionalElement, ABC):
    """Base class for tasks.

    Subclasses are registered with ``@task("name")`` and implement
    ``execute()``.  Raise ``TaskFailedError`` (or any ``BuildError``) to
    report a failure; any other exception is wrapped by the dispatcher.
    """

    fail_on_error = attribute(
        bool, default=True, description="Stop the build if this task fails."
    )
    verbose = attribute(
        bool, default=False, description="Report verbose messages at INFO level."
    )

    @property
    def task_name(self) -> str:
        return getattr(type(self), "_antler_task_name", "") or self.element_name

    @abstractmethod
    def execute(self) -> None:
        """Do the work of the task."""

    def log(self, message: str, level: Level = Level.INFO) -> None:
        if self.verbose and level is Level.VERBOSE:
            level = Level.INFO
        self.project.log(message, level, task=self.task_name, location=self.location)


class TaskContainer(Task):
    """A task whose nested children are tasks."""

    accepts_tasks = True

    def execute(self) -> None:
        self.execute_children()

    def execute_children(self) -> None:
        """Run ``child_nodes`` through the project's dispatcher."""
        self.project.dispatcher.execute_nodes(self.child_nodes, parent=self)
