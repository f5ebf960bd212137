"""Parsed build-document tree.

The engine never parses markup itself.  A loader (see ``antler.loader``)
produces an ``ElementNode`` tree: tag name, raw attribute text, ordered
children and the source location of every element.
"""

from __future__ import annotations

from pydantic import BaseModel


class Location(BaseModel):
    """Position of an element in a build file (1-based line/column)."""

    file: str = ""
    line: int = 0
    column: int = 0

    @property
    def is_known(self) -> bool:
        return bool(self.file) or self.line > 0

    def __str__(self) -> str:
        if not self.is_known:
            return "<unknown>"
        if self.line <= 0:
            return self.file
        return f"{self.file}({self.line},{self.column})"


UNKNOWN_LOCATION = Location()


class ElementNode(BaseModel):
    """A single XML element: tag, raw attribute text and child elements."""

    tag: str
    attributes: dict[str, str] = {}
    children: list[ElementNode] = []
    text: str = ""
    location: Location = UNKNOWN_LOCATION

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.attributes.get(name, default)


ElementNode.model_rebuild()
