from __future__ import annotations

from antler.framework import Task, attribute, string_check, task
from antler.listeners import Level


@task("call")
class CallTask(Task):
    """Run another target of the same project.

    ``force`` runs the target even if it already ran in this build;
    ``cascade`` runs its dependencies first (those that have not run yet).
    The called target sees the current property values::

        <property name="debug" value="false"/>
        <call target="compile"/>
        <property name="debug" value="true"/>
        <call target="compile" force="true"/>
    """

    target = attribute(str, required=True, validators=[string_check(allow_empty=False)])
    force = attribute(bool, default=False)
    cascade = attribute(bool, default=True)

    def execute(self) -> None:
        self.log(f"Calling target '{self.target}'", Level.VERBOSE)
        self.project.run_target(self.target, cascade=self.cascade, force=self.force)
