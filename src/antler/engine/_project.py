"""Runtime project: one build of a ``ProjectDefinition``."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

from antler import __version__
from antler.errors import BuildError, BuildTypeMismatchError, UnknownTargetError
from antler.expressions import ConversionError, parse_bool
from antler.framework import Registry
from antler.listeners import BuildListener, Level, LoguruListener
from antler.model.project import ProjectDefinition, TargetDefinition
from antler.properties import PropertyStore

from ._dispatcher import TaskDispatcher
from ._graph import resolve

if TYPE_CHECKING:
    from antler.model.document import Location

ON_SUCCESS = "antler.onsuccess"
ON_FAILURE = "antler.onfailure"


class Project:
    """Executes targets of a parsed build file.

    Parameters
    ----------
    definition : ProjectDefinition
        The parsed build file.
    registry : Registry, optional
        Task and function lookup.  Defaults to ``Registry.default()``.  The
        registry is frozen when the project is created.
    properties : Mapping, optional
        Properties seeded before anything else (command line, configuration).
        They are read-only and win over ``<property>`` declarations.
    listeners : iterable of BuildListener, optional
        Event sinks.  Defaults to a single ``LoguruListener``.
    """

    def __init__(
        self,
        definition: ProjectDefinition,
        *,
        registry: Registry | None = None,
        properties: Mapping[str, Any] | None = None,
        listeners: Iterable[BuildListener] | None = None,
    ) -> None:
        self.definition = definition
        self.registry = registry if registry is not None else Registry.default()
        self.registry.freeze()
        self.listeners: list[BuildListener] = (
            list(listeners) if listeners is not None else [LoguruListener()]
        )
        self.functions = self.registry.bind(self)
        self.properties = PropertyStore(self.functions)
        self.dispatcher = TaskDispatcher(self)
        self.executed: set[str] = set()
        self.current_target: str | None = None

        if properties:
            self.properties.update(dict(properties), read_only=True)
        self._add_builtin_properties()

    # -----------------------------------------------------------------------
    # Project information
    # -----------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def default_target(self) -> str | None:
        return self.definition.default_target

    @property
    def buildfile(self) -> str | None:
        if self.definition.buildfile is None:
            return None
        return os.path.abspath(self.definition.buildfile)

    @property
    def base_directory(self) -> str:
        """Absolute base directory; relative ``basedir`` is taken from the build file's folder."""
        base = Path(self.definition.base_directory or ".")
        if not base.is_absolute():
            anchor = Path(self.buildfile).parent if self.buildfile else Path.cwd()
            base = anchor / base
        return os.path.normpath(base)

    @property
    def targets(self) -> dict[str, TargetDefinition]:
        return self.definition.targets

    def _add_builtin_properties(self) -> None:
        builtins = {
            "antler.version": __version__,
            "antler.project.name": self.name,
            "antler.project.basedir": self.base_directory,
        }
        if self.default_target:
            builtins["antler.project.default"] = self.default_target
        if self.buildfile:
            builtins["antler.project.buildfile"] = self.buildfile
        for name, value in builtins.items():
            self.properties.set(name, value, overwrite=True, read_only=True)

    # -----------------------------------------------------------------------
    # Events and logging
    # -----------------------------------------------------------------------

    def add_listener(self, listener: BuildListener) -> None:
        self.listeners.append(listener)

    def fire(self, event: str, *args: Any) -> None:
        for listener in self.listeners:
            getattr(listener, event)(*args)

    def log(
        self,
        message: str,
        level: Level = Level.INFO,
        *,
        task: str | None = None,
        location: Location | None = None,
    ) -> None:
        self.fire("message_logged", level, message, task, location)

    def expand(self, text: str, location: Location | None = None) -> str:
        return self.properties.expand(text, location)

    # -----------------------------------------------------------------------
    # Execution
    # -----------------------------------------------------------------------

    def execute(self, targets: Sequence[str] = ()) -> None:
        """Run a build: project-level tasks, then *targets* and their dependencies.

        With no targets the default target is built.  The target named by
        ``antler.onsuccess``/``antler.onfailure`` runs after the build.
        """
        names = list(targets)
        if not names and self.default_target:
            names = [self.default_target]

        self.fire("build_started", self.name)
        error: BuildError | None = None
        try:
            order = resolve(self.definition, names)
            self.dispatcher.execute_nodes(self.definition.tasks)
            for name in order:
                self.execute_target(name)
        except BuildError as exc:
            error = exc

        error = self._run_completion_target(error)
        self.fire("build_finished", self.name, error)
        if error is not None:
            raise error

    def _run_completion_target(self, error: BuildError | None) -> BuildError | None:
        hook = ON_SUCCESS if error is None else ON_FAILURE
        if not self.properties.contains(hook):
            return error
        name = self.properties.get(hook)
        if not name:
            return error
        logger.debug("Running {} target '{}'", hook, name)
        try:
            self.run_target(name, force=True)
        except BuildError as exc:
            if error is None:
                return exc
            self.log(f"{hook} target '{name}' failed: {exc}", Level.ERROR)
        return error

    def run_target(self, name: str, *, cascade: bool = True, force: bool = False) -> None:
        """Run *name* on demand (the ``call`` task).

        With *cascade* its dependencies that have not run yet run first.
        With *force* the target runs even if it already ran.
        """
        if cascade:
            order = resolve(self.definition, [name])
            for dependency in order[:-1]:
                self.execute_target(dependency)
        elif self.definition.find_target(name) is None:
            raise UnknownTargetError(name)
        self.execute_target(name, force=force)

    def execute_target(self, name: str, force: bool = False) -> None:
        """Run the tasks of one target, without its dependencies.

        A target runs at most once per build unless *force* is set.  It is
        marked executed before its tasks run, so a target calling itself
        does not recurse.
        """
        target = self.definition.find_target(name)
        if target is None:
            raise UnknownTargetError(name)
        if name in self.executed and not force:
            logger.debug("Target '{}' already executed", name)
            return
        self.executed.add(name)

        try:
            enabled = self._target_enabled(target)
        except BuildError as exc:
            exc.add_frame(f"target '{name}'")
            raise
        if not enabled:
            logger.debug("Target '{}' skipped by if/unless", name)
            return

        previous = self.current_target
        self.current_target = name
        self.fire("target_started", name)
        try:
            self.dispatcher.execute_nodes(target.tasks)
        except BuildError as exc:
            exc.add_frame(f"target '{name}'")
            self.fire("target_finished", name, exc)
            raise
        finally:
            self.current_target = previous
        self.fire("target_finished", name, None)

    def _target_enabled(self, target: TargetDefinition) -> bool:
        enabled = True
        if target.if_condition is not None:
            enabled = self._condition(target, "if", target.if_condition)
        if enabled and target.unless_condition is not None:
            enabled = not self._condition(target, "unless", target.unless_condition)
        return enabled

    def _condition(self, target: TargetDefinition, attribute: str, text: str) -> bool:
        value = self.properties.expand(text, target.location)
        try:
            return parse_bool(value)
        except ConversionError as exc:
            raise BuildTypeMismatchError(
                f"Cannot convert '{value}' to boolean for attribute '{attribute}' "
                f"of target '{target.name}'.",
                location=target.location,
            ) from exc
