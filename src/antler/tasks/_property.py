from __future__ import annotations

from antler.framework import Task, attribute, string_check, task
from antler.listeners import Level


@task("property")
class PropertyTask(Task):
    """Set a property.

    ``overwrite`` defaults to true, so a later ``<property>`` replaces an
    earlier one, but never a read-only property (command line,
    configuration, built-ins): those are kept and the new value is
    dropped.  A ``dynamic`` property stores its value unexpanded and is
    re-evaluated on every read.
    """

    name = attribute(str, required=True, validators=[string_check(allow_empty=False)])
    value = attribute(str, required=True, expand=False)
    overwrite = attribute(bool, default=True)
    readonly = attribute(bool, default=False)
    dynamic = attribute(bool, default=False)

    def execute(self) -> None:
        store = self.properties
        if store.is_read_only(self.name):
            self.log(f"Read-only property '{self.name}' cannot be overwritten.", Level.VERBOSE)
            return
        if store.contains(self.name) and not self.overwrite:
            self.log(f"Property '{self.name}' already set, keeping its value.", Level.VERBOSE)
            return

        value = self.value if self.dynamic else self.project.expand(self.value, self.location)
        store.set(self.name, value, overwrite=True, read_only=self.readonly, dynamic=self.dynamic)
        self.log(f"{self.name} = {value}", Level.DEBUG)
