"""Structural project definition: targets and project-level tasks."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, model_validator

from .document import ElementNode, Location, UNKNOWN_LOCATION


def split_depends(value: str) -> list[str]:
    """Split a ``depends="a, b c"`` list.  Order is kept, blanks dropped."""
    names = []
    for part in value.replace(",", " ").split():
        part = part.strip()
        if part:
            names.append(part)
    return names


class TargetDefinition(BaseModel):
    """A named unit of build work.

    ``if_condition``/``unless_condition`` hold the raw attribute text; they
    are expanded when the target is reached, not at parse time, since
    earlier targets may change the properties they refer to.
    """

    name: str
    description: str = ""
    depends: list[str] = []
    tasks: list[ElementNode] = []
    if_condition: str | None = None
    unless_condition: str | None = None
    location: Location = UNKNOWN_LOCATION

    @model_validator(mode="after")
    def _validate_name(self) -> Self:
        if not self.name.strip():
            raise ValueError("target name must not be empty")
        return self

    def unique_depends(self) -> list[str]:
        """Dependency names with duplicates removed, first occurrence wins."""
        seen: set[str] = set()
        result: list[str] = []
        for name in self.depends:
            if name not in seen:
                seen.add(name)
                result.append(name)
        return result


class ProjectDefinition(BaseModel):
    """Immutable structure of a build file after parsing."""

    name: str = ""
    default_target: str | None = None
    base_directory: str = "."
    buildfile: str | None = None
    targets: dict[str, TargetDefinition] = {}
    tasks: list[ElementNode] = []
    location: Location = UNKNOWN_LOCATION

    @model_validator(mode="after")
    def _validate_targets(self) -> Self:
        for key, target in self.targets.items():
            if key != target.name:
                raise ValueError(
                    f"target registered as '{key}' is named '{target.name}'"
                )
        if self.default_target and self.default_target not in self.targets:
            raise ValueError(
                f"default target '{self.default_target}' does not exist in this project"
            )
        return self

    def find_target(self, name: str) -> TargetDefinition | None:
        return self.targets.get(name)
