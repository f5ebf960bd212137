"""Task dispatcher: create, bind and run the tasks of a target."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from loguru import logger

from antler.errors import BuildError, TaskExecutionError, TaskNotFoundError, format_error
from antler.framework import AttributeBinder, Element, Task
from antler.listeners import Level

if TYPE_CHECKING:
    from antler.model.document import ElementNode

    from ._project import Project


class TaskDispatcher:
    """Runs task elements in document order.

    Each task is looked up by tag in the project's registry, created fresh,
    bound and executed exactly once.  A failure stops the sequence unless
    the task was declared with ``failonerror="false"``.  Nothing is retried.
    """

    def __init__(self, project: Project) -> None:
        self.project = project
        self.binder = AttributeBinder(project)

    def create(self, node: ElementNode, parent: Element | None = None) -> Task:
        cls = self.project.registry.find_task(node.tag)
        if cls is None:
            raise TaskNotFoundError(node.tag, location=node.location)
        return cls(self.project, node, parent=parent)

    def execute_nodes(self, nodes: Iterable[ElementNode], parent: Element | None = None) -> None:
        for node in nodes:
            self.execute_node(node, parent)

    def execute_node(self, node: ElementNode, parent: Element | None = None) -> None:
        """Create, bind and execute the task for *node*."""
        try:
            task = self.create(node, parent)
            enabled = self.binder.bind(node, task)
        except BuildError as exc:
            exc.add_frame(f"task <{node.tag}>")
            raise
        if not enabled:
            return
        self.run(task)

    def run(self, task: Task) -> None:
        """Execute a bound task, applying ``failonerror``."""
        self.project.fire("task_started", task.task_name, task.location)
        try:
            try:
                task.execute()
            except BuildError:
                raise
            except Exception as exc:
                raise TaskExecutionError(
                    f"<{task.task_name}> failed: {exc}", location=task.location
                ) from exc
        except BuildError as error:
            self.project.fire("task_finished", task.task_name, error)
            if error.location is None:
                error.location = task.location
            if not task.fail_on_error:
                logger.debug("Ignoring failure of <{}>: {}", task.task_name, error)
                task.log(format_error(error), Level.ERROR)
                task.log("Continuing because failonerror is false.", Level.WARNING)
                return
            error.add_frame(f"task <{task.task_name}>")
            raise
        self.project.fire("task_finished", task.task_name, None)
