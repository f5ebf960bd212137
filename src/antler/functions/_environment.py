from __future__ import annotations

import getpass
import os
import platform
import sys

from antler.framework import FunctionSet, function, function_set


@function_set("environment")
class EnvironmentFunctions(FunctionSet):
    """Process environment and host information."""

    @function("get-variable")
    def get_variable(self, name: str) -> str:
        if name not in os.environ:
            raise ValueError(f"Environment variable '{name}' does not exist.")
        return os.environ[name]

    @function("variable-exists")
    def variable_exists(self, name: str) -> bool:
        return name in os.environ

    @function("get-machine-name")
    def get_machine_name(self) -> str:
        return platform.node()

    @function("get-user-name")
    def get_user_name(self) -> str:
        return getpass.getuser()


@function_set("platform")
class PlatformFunctions(FunctionSet):
    @function("get-name")
    def get_name(self) -> str:
        """The interpreter's platform identifier (``linux``, ``win32``, ``darwin``)."""
        return sys.platform

    @function("is-unix")
    def is_unix(self) -> bool:
        return os.name == "posix"

    @function("is-windows")
    def is_windows(self) -> bool:
        return os.name == "nt"
