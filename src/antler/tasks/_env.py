from __future__ import annotations

import os

from antler.errors import BindingError
from antler.framework import (
    ConditionalElement,
    Task,
    attribute,
    element_array,
    element_name,
    string_check,
    task,
)
from antler.listeners import Level


@element_name("variable")
class EnvironmentVariable(ConditionalElement):
    """An environment variable to set (an empty value removes it)."""

    name = attribute(str, required=True, validators=[string_check(allow_empty=False)])
    value = attribute(str, default="")


@task("setenv")
class SetEnvTask(Task):
    """Set environment variables of the build process.

    Either one variable through ``name``/``value`` or several through
    nested ``<variable>`` elements::

        <setenv>
            <variable name="LANG" value="C"/>
            <variable name="DEBUG" value="1" if="${debug}"/>
        </setenv>
    """

    name = attribute(str, default="")
    value = attribute(str, default="")
    variables = element_array(EnvironmentVariable)

    def initialize(self) -> None:
        if not self.name and not self.variables:
            raise BindingError(
                "Either the 'name' attribute or at least one nested <variable> "
                "element is required.",
                location=self.location,
            )

    def execute(self) -> None:
        if self.name:
            self._set(self.name, self.value)
        for variable in self.variables:
            self._set(variable.name, variable.value)

    def _set(self, name: str, value: str) -> None:
        if value:
            self.log(f"Setting environment variable {name} to '{value}'.", Level.VERBOSE)
            os.environ[name] = value
        else:
            self.log(f"Removing environment variable {name}.", Level.VERBOSE)
            os.environ.pop(name, None)
