"""Flow control: ``<if>`` and ``<foreach>``.

Both are task containers: every nested element that is not one of their
own declared children is a task, run in document order.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from antler.errors import BindingError, TaskFailedError
from antler.framework import TaskContainer, attribute, string_check, task
from antler.listeners import Level


@task("if")
class IfTask(TaskContainer):
    """Run the nested tasks only if every given condition holds.

    ::

        <if test="${platform::is-unix()}" propertyexists="install.dir">
            <echo message="Installing to ${install.dir}"/>
        </if>
    """

    test = attribute(bool)
    propertyexists = attribute(str)
    targetexists = attribute(str)

    def initialize(self) -> None:
        if self.test is None and self.propertyexists is None and self.targetexists is None:
            raise BindingError(
                "At least one of 'test', 'propertyexists' or 'targetexists' must be set.",
                location=self.location,
            )

    def holds(self) -> bool:
        if self.test is not None and not self.test:
            return False
        if self.propertyexists is not None and not self.properties.contains(self.propertyexists):
            return False
        if self.targetexists is not None and self.targetexists not in self.project.targets:
            return False
        return True

    def execute(self) -> None:
        if self.holds():
            self.execute_children()
        else:
            self.log("Condition is false, skipping nested tasks.", Level.DEBUG)


class ItemType(Enum):
    STRING = "String"
    LINE = "Line"
    FILE = "File"
    FOLDER = "Folder"


class TrimType(Enum):
    NONE = "None"
    START = "Start"
    END = "End"
    BOTH = "Both"


def _trim(value: str, trim: TrimType) -> str:
    if trim is TrimType.START:
        return value.lstrip()
    if trim is TrimType.END:
        return value.rstrip()
    if trim is TrimType.BOTH:
        return value.strip()
    return value


@task("foreach")
class ForEachTask(TaskContainer):
    """Run the nested tasks once per item, with the item in a property.

    ``item`` selects what ``in`` holds: a delimited string, a file whose
    lines are the items, or a directory whose files or sub-directories are
    the items (sorted by name)::

        <foreach item="String" in="debug,release" delimiter="," property="config">
            <echo message="Building ${config}"/>
        </foreach>
    """

    item = attribute(ItemType, required=True)
    in_ = attribute(str, required=True)
    delimiter = attribute(str, default=",")
    property_name = attribute(
        str, name="property", required=True, validators=[string_check(allow_empty=False)]
    )
    trim = attribute(TrimType, default=TrimType.NONE)

    def initialize(self) -> None:
        if self.properties.is_read_only(self.property_name):
            raise BindingError(
                f"Property '{self.property_name}' is read-only and cannot be used "
                f"as the loop property.",
                location=self.location,
            )
        if self.item is ItemType.STRING and not self.delimiter:
            raise BindingError("The 'delimiter' attribute cannot be empty.", location=self.location)

    def items(self) -> list[str]:
        if self.item is ItemType.STRING:
            values = [self.in_]
            for delimiter in self.delimiter:
                values = [part for value in values for part in value.split(delimiter)]
            return [v for v in (_trim(v, self.trim) for v in values) if v]

        path = Path(self.in_)
        if not path.is_absolute():
            path = Path(self.project.base_directory) / path

        if self.item is ItemType.LINE:
            if not path.is_file():
                raise TaskFailedError(f"File '{path}' does not exist.", location=self.location)
            lines = path.read_text(encoding="utf-8").splitlines()
            return [_trim(line, self.trim) for line in lines]

        if not path.is_dir():
            raise TaskFailedError(f"Directory '{path}' does not exist.", location=self.location)
        wanted = Path.is_file if self.item is ItemType.FILE else Path.is_dir
        return [str(p) for p in sorted(path.iterdir()) if wanted(p)]

    def execute(self) -> None:
        for value in self.items():
            self.properties.set(self.property_name, value, overwrite=True)
            self.log(f"{self.property_name} = {value}", Level.DEBUG)
            self.execute_children()
