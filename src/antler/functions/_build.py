"""Functions that inspect the running build: properties, targets, project."""

from __future__ import annotations

from antler.framework import FunctionSet, function, function_set


@function_set("property")
class PropertyFunctions(FunctionSet):
    @function("exists")
    def exists(self, name: str) -> bool:
        return self.project.properties.contains(name)

    @function("is-readonly")
    def is_readonly(self, name: str) -> bool:
        self._check(name)
        return self.project.properties.is_read_only(name)

    @function("is-dynamic")
    def is_dynamic(self, name: str) -> bool:
        self._check(name)
        return self.project.properties.is_dynamic(name)

    @function("get-value")
    def get_value(self, name: str) -> str:
        self._check(name)
        return self.project.properties.get(name) or ""

    def _check(self, name: str) -> None:
        if not self.project.properties.contains(name):
            raise ValueError(f"Property '{name}' has not been set.")


@function_set("target")
class TargetFunctions(FunctionSet):
    @function("exists")
    def exists(self, name: str) -> bool:
        return name in self.project.targets

    @function("has-executed")
    def has_executed(self, name: str) -> bool:
        if name not in self.project.targets:
            raise ValueError(f"Target '{name}' does not exist.")
        return name in self.project.executed

    @function("get-current-target")
    def get_current_target(self) -> str:
        if self.project.current_target is None:
            raise ValueError("No target is being executed.")
        return self.project.current_target


@function_set("project")
class ProjectFunctions(FunctionSet):
    @function("get-name")
    def get_name(self) -> str:
        return self.project.name

    @function("get-default-target")
    def get_default_target(self) -> str:
        if not self.project.default_target:
            raise ValueError("The project has no default target.")
        return self.project.default_target

    @function("get-base-directory")
    def get_base_directory(self) -> str:
        return self.project.base_directory

    @function("get-buildfile-path")
    def get_buildfile_path(self) -> str:
        return self.project.buildfile or ""
