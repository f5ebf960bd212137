from __future__ import annotations

from antler.errors import TaskFailedError
from antler.framework import DIRECTORY, Task, attribute, task
from antler.listeners import Level


@task("mkdir")
class MkdirTask(Task):
    """Create a directory and any missing parents.

    Relative paths are resolved against the project base directory.
    An existing directory is left alone.
    """

    dir = attribute(DIRECTORY, required=True)

    def execute(self) -> None:
        if self.dir.is_dir():
            self.log(f"Directory '{self.dir}' already exists.", Level.VERBOSE)
            return
        if self.dir.exists():
            raise TaskFailedError(
                f"Cannot create directory '{self.dir}': a file with that name exists.",
                location=self.location,
            )
        self.log(f"Creating directory '{self.dir}'.")
        try:
            self.dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise TaskFailedError(
                f"Directory '{self.dir}' could not be created.", location=self.location
            ) from exc
