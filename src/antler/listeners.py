"""Build event listeners.

A ``BuildListener`` receives structural events (build, target and task
start/finish) and every message logged by a task.  The project fans each
event out to all registered listeners in registration order.
"""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from loguru import logger

if TYPE_CHECKING:
    from antler.model.document import Location


class Level(IntEnum):
    """Message levels, ordered by severity."""

    DEBUG = 10
    VERBOSE = 20
    INFO = 30
    WARNING = 40
    ERROR = 50

    @classmethod
    def parse(cls, text: str) -> Level:
        try:
            return cls[text.strip().upper()]
        except KeyError:
            valid = ", ".join(m.name.lower() for m in cls)
            raise ValueError(f"Invalid level '{text}'. Valid values are: {valid}") from None


# Build levels onto loguru's built-in levels
LOGURU_LEVELS: dict[Level, str] = {
    Level.DEBUG: "TRACE",
    Level.VERBOSE: "DEBUG",
    Level.INFO: "INFO",
    Level.WARNING: "WARNING",
    Level.ERROR: "ERROR",
}


@runtime_checkable
class BuildListener(Protocol):
    """Receives build events.  Errors are ``None`` on success."""

    def build_started(self, project: str) -> None: ...

    def build_finished(self, project: str, error: BaseException | None) -> None: ...

    def target_started(self, target: str) -> None: ...

    def target_finished(self, target: str, error: BaseException | None) -> None: ...

    def task_started(self, task: str, location: Location | None) -> None: ...

    def task_finished(self, task: str, error: BaseException | None) -> None: ...

    def message_logged(
        self, level: Level, message: str, task: str | None, location: Location | None
    ) -> None: ...


class LoguruListener:
    """Forward build events to loguru.

    Task messages are prefixed with the task name, target headers are
    logged at INFO and everything structural below that at DEBUG.
    """

    def build_started(self, project: str) -> None:
        logger.debug("Build of project '{}' started", project)

    def build_finished(self, project: str, error: BaseException | None) -> None:
        if error is None:
            logger.debug("Build of project '{}' finished", project)
        else:
            logger.debug("Build of project '{}' failed: {}", project, error)

    def target_started(self, target: str) -> None:
        logger.info("{}:", target)

    def target_finished(self, target: str, error: BaseException | None) -> None:
        if error is not None:
            logger.debug("Target '{}' failed", target)

    def task_started(self, task: str, location: Location | None) -> None:
        logger.trace("Task <{}> started at {}", task, location)

    def task_finished(self, task: str, error: BaseException | None) -> None:
        logger.trace("Task <{}> finished", task)

    def message_logged(
        self, level: Level, message: str, task: str | None, location: Location | None
    ) -> None:
        prefix = f"[{task}] " if task else ""
        for line in message.splitlines() or [""]:
            logger.log(LOGURU_LEVELS[level], "{}{}", prefix, line)
