from __future__ import annotations

import time

from antler.framework import Task, attribute, int_range, task
from antler.listeners import Level


@task("sleep")
class SleepTask(Task):
    """Pause the build.  The given durations are added up."""

    hours = attribute(int, default=0, validators=[int_range(0)])
    minutes = attribute(int, default=0, validators=[int_range(0)])
    seconds = attribute(int, default=0, validators=[int_range(0)])
    milliseconds = attribute(int, default=0, validators=[int_range(0)])

    @property
    def total_seconds(self) -> float:
        return (
            self.hours * 3600
            + self.minutes * 60
            + self.seconds
            + self.milliseconds / 1000
        )

    def execute(self) -> None:
        self.log(f"Sleeping for {self.total_seconds:g} seconds.", Level.VERBOSE)
        time.sleep(self.total_seconds)
