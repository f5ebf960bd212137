"""Build-file loader: XML text to ``ProjectDefinition``.

The document is read with ``xml.sax`` so that every element keeps the
line and column it started at.  Layout::

    <project name="..." default="..." basedir="...">
        <property .../>                    project-level task
        <target name="..." depends="a, b" description="..." if="..." unless="...">
            <task .../>
        </target>
    </project>

Any top-level element other than ``<target>`` is a project-level task,
run before the first target.  Comments are dropped; ``xmlns`` attributes
are ignored.
"""

from __future__ import annotations

import os
import xml.sax
from pathlib import Path
from typing import Any
from xml.sax.handler import ContentHandler

import pydantic
from loguru import logger

from antler.errors import DocumentError
from antler.model.document import ElementNode, Location
from antler.model.project import ProjectDefinition, TargetDefinition, split_depends

PROJECT_ATTRIBUTES = {"name", "default", "basedir"}
TARGET_ATTRIBUTES = {"name", "depends", "description", "if", "unless"}


class _TreeBuilder(ContentHandler):
    """SAX handler assembling an ``ElementNode`` tree."""

    def __init__(self, source: str) -> None:
        super().__init__()
        self.source = source
        self.root: ElementNode | None = None
        self._stack: list[dict[str, Any]] = []
        self._locator: Any = None

    def setDocumentLocator(self, locator: Any) -> None:
        self._locator = locator

    def _location(self) -> Location:
        if self._locator is None:
            return Location(file=self.source)
        return Location(
            file=self.source,
            line=self._locator.getLineNumber(),
            column=self._locator.getColumnNumber() + 1,
        )

    def startElement(self, name: str, attrs: Any) -> None:
        attributes = {
            key: attrs.getValue(key)
            for key in attrs.getNames()
            if key != "xmlns" and not key.startswith("xmlns:")
        }
        self._stack.append(
            {
                "tag": name,
                "attributes": attributes,
                "children": [],
                "text": [],
                "location": self._location(),
            }
        )

    def characters(self, content: str) -> None:
        if self._stack:
            self._stack[-1]["text"].append(content)

    def endElement(self, name: str) -> None:
        frame = self._stack.pop()
        node = ElementNode(
            tag=frame["tag"],
            attributes=frame["attributes"],
            children=frame["children"],
            text="".join(frame["text"]),
            location=frame["location"],
        )
        if self._stack:
            self._stack[-1]["children"].append(node)
        else:
            self.root = node


# ---------------------------------------------------------------------------
# Tree to project definition
# ---------------------------------------------------------------------------

def _check_attributes(node: ElementNode, allowed: set[str]) -> None:
    for name in node.attributes:
        if name not in allowed:
            raise DocumentError(
                f"<{node.tag}> does not support the attribute '{name}'.", location=node.location
            )


def _build_target(node: ElementNode) -> TargetDefinition:
    _check_attributes(node, TARGET_ATTRIBUTES)
    name = (node.get("name") or "").strip()
    if not name:
        raise DocumentError("Target must have a non-empty 'name' attribute.", location=node.location)
    return TargetDefinition(
        name=name,
        description=node.get("description", ""),
        depends=split_depends(node.get("depends", "")),
        tasks=list(node.children),
        if_condition=node.get("if"),
        unless_condition=node.get("unless"),
        location=node.location,
    )


def build_definition(root: ElementNode, buildfile: str | None = None) -> ProjectDefinition:
    """Turn a parsed ``<project>`` element into a ``ProjectDefinition``."""
    if root.tag != "project":
        raise DocumentError(
            f"Root element must be <project>, found <{root.tag}>.", location=root.location
        )
    _check_attributes(root, PROJECT_ATTRIBUTES)

    targets: dict[str, TargetDefinition] = {}
    tasks: list[ElementNode] = []
    for child in root.children:
        if child.tag != "target":
            tasks.append(child)
            continue
        target = _build_target(child)
        if target.name in targets:
            raise DocumentError(f"Duplicate target named '{target.name}'.", location=child.location)
        targets[target.name] = target

    try:
        return ProjectDefinition(
            name=root.get("name", ""),
            default_target=root.get("default") or None,
            base_directory=root.get("basedir", "."),
            buildfile=buildfile,
            targets=targets,
            tasks=tasks,
            location=root.location,
        )
    except pydantic.ValidationError as exc:
        messages = "; ".join(err["msg"] for err in exc.errors())
        raise DocumentError(messages, location=root.location) from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def _parse(parse: Any, source: str) -> ElementNode:
    handler = _TreeBuilder(source)
    try:
        parse(handler)
    except xml.sax.SAXParseException as exc:
        location = Location(
            file=source, line=exc.getLineNumber(), column=max(exc.getColumnNumber(), 0) + 1
        )
        raise DocumentError(f"Invalid build file: {exc.getMessage()}", location=location) from exc
    if handler.root is None:
        raise DocumentError("Build file has no root element.", location=Location(file=source))
    return handler.root


def load_project(path: str | os.PathLike[str]) -> ProjectDefinition:
    """Parse the build file at *path*."""
    path = Path(path)
    if not path.is_file():
        raise DocumentError(f"Build file '{path}' does not exist.")
    logger.debug("Loading build file {}", path)
    root = _parse(lambda handler: xml.sax.parse(str(path), handler), str(path))
    return build_definition(root, buildfile=str(path))


def load_project_string(text: str, source: str = "<string>") -> ProjectDefinition:
    """Parse build-file markup held in memory."""
    root = _parse(lambda handler: xml.sax.parseString(text.encode("utf-8"), handler), source)
    return build_definition(root)
