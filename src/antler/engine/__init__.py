"""Build engine: target resolution, task dispatch and the runtime project."""

from ._graph import resolve
from ._dispatcher import TaskDispatcher
from ._project import ON_FAILURE, ON_SUCCESS, Project

__all__ = [
    "ON_FAILURE",
    "ON_SUCCESS",
    "Project",
    "TaskDispatcher",
    "resolve",
]
