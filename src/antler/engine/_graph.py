"""Target graph resolution: dependency order for a set of requested targets.

Depth-first post-order over ``depends`` with three marks per target
(unvisited, in progress, done).  Reaching an in-progress target means a
cycle.  Requested targets are visited in request order and dependencies
in declaration order, so among independent targets the one declared
first runs first.  Only the part of the graph reachable from the
requested targets is looked at.
"""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from antler.errors import CircularDependencyError, UnknownTargetError
from antler.model.project import ProjectDefinition

_VISITING = 1
_DONE = 2


def resolve(definition: ProjectDefinition, names: Iterable[str]) -> list[str]:
    """Return target names in execution order.

    Every requested target appears after all of its transitive
    dependencies, and each target appears exactly once.

    Raises
    ------
    UnknownTargetError
        A requested target or a dependency does not exist.
    CircularDependencyError
        The dependencies form a cycle.  ``path`` runs from the repeated
        target back to itself, e.g. ``["a", "b", "a"]``.
    """
    marks: dict[str, int] = {}
    order: list[str] = []
    path: list[str] = []

    def visit(name: str, referrer: str | None) -> None:
        mark = marks.get(name)
        if mark == _DONE:
            return
        if mark == _VISITING:
            cycle = path[path.index(name):] + [name]
            location = definition.targets[referrer].location if referrer else None
            raise CircularDependencyError(cycle, location=location)

        target = definition.find_target(name)
        if target is None:
            location = definition.targets[referrer].location if referrer else None
            raise UnknownTargetError(name, referrer, location=location)

        marks[name] = _VISITING
        path.append(name)
        for dependency in target.unique_depends():
            visit(dependency, name)
        path.pop()
        marks[name] = _DONE
        order.append(name)

    for name in names:
        visit(name, None)

    logger.debug("Resolved target order: {}", order)
    return order
