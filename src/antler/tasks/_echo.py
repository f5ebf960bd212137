from __future__ import annotations

import textwrap

from antler.errors import BindingError, TaskFailedError
from antler.framework import Task, attribute, task
from antler.listeners import Level


def _inline(text: str) -> str:
    return textwrap.dedent(text).strip()


@task("echo")
class EchoTask(Task):
    """Write a message to the build log.

    The message is given either as the ``message`` attribute or as element
    text, not both::

        <echo message="Base directory is ${antler.project.basedir}"/>
        <echo level="warning">Nothing to do.</echo>
    """

    accepts_text = True

    message = attribute(str, default="")
    level = attribute(Level, default=Level.INFO)

    def initialize(self) -> None:
        if self.message and self.text.strip():
            raise BindingError(
                "Inline content and the 'message' attribute cannot both be set.",
                location=self.location,
            )

    def execute(self) -> None:
        self.log(self.message or _inline(self.text), self.level)


@task("fail")
class FailTask(Task):
    """Stop the build with a message."""

    accepts_text = True

    message = attribute(str, default="")

    def initialize(self) -> None:
        if self.message and self.text.strip():
            raise BindingError(
                "Inline content and the 'message' attribute cannot both be set.",
                location=self.location,
            )

    def execute(self) -> None:
        raise TaskFailedError(
            self.message or _inline(self.text) or "No message.", location=self.location
        )
