from __future__ import annotations

import os

from antler.framework import FunctionSet, function, function_set, resolve_path


@function_set("path")
class PathFunctions(FunctionSet):
    """File-system path manipulation.  Nothing here touches the disk."""

    @function("combine")
    def combine(self, path1: str, path2: str) -> str:
        return os.path.join(path1, path2)

    @function("get-file-name")
    def get_file_name(self, path: str) -> str:
        return os.path.basename(path)

    @function("get-file-name-without-extension")
    def get_file_name_without_extension(self, path: str) -> str:
        return os.path.splitext(os.path.basename(path))[0]

    @function("get-extension")
    def get_extension(self, path: str) -> str:
        """Extension including the leading dot, or an empty string."""
        return os.path.splitext(path)[1]

    @function("get-directory-name")
    def get_directory_name(self, path: str) -> str:
        return os.path.dirname(path)

    @function("change-extension")
    def change_extension(self, path: str, extension: str) -> str:
        root = os.path.splitext(path)[0]
        if not extension:
            return root
        if not extension.startswith("."):
            extension = "." + extension
        return root + extension

    @function("has-extension")
    def has_extension(self, path: str) -> bool:
        return bool(os.path.splitext(path)[1])

    @function("is-path-rooted")
    def is_path_rooted(self, path: str) -> bool:
        return os.path.isabs(path)

    @function("get-full-path")
    def get_full_path(self, path: str) -> str:
        """Absolute path, relative paths taken from the project base directory."""
        return str(resolve_path(path, self.project.base_directory))
