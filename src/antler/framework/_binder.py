"""Attribute binder: configure an element instance from its ``ElementNode``.

Binding order:

1. ``if``/``unless`` are bound first.  A disabled element stops here: its
   remaining attributes and children are never looked at, so they cannot
   raise unknown-attribute or unknown-element errors.
2. Declared attributes, in declaration order: property expansion,
   validators on the expanded text, then conversion to the declared type.
   A missing attribute keeps its declared default.
3. Leftover attributes raise ``UnknownAttributeError``.
4. Child elements in document order.  Declared ones are created and bound
   recursively (disabled children are dropped); undeclared ones become
   ``child_nodes`` on task containers and raise ``UnknownElementError``
   everywhere else.
5. Element text, expanded, if the class accepts it.
6. ``initialize()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from antler.errors import (
    BindingError,
    BuildTypeMismatchError,
    RequiredAttributeMissingError,
    UnknownAttributeError,
    UnknownElementError,
    ValidationError,
)

from ._descriptors import AttributeSpec, ElementSpec, schema_of
from ._elements import ConditionalElement, Element
from ._types import convert_attribute, type_label

if TYPE_CHECKING:
    from antler.engine import Project
    from antler.model.document import ElementNode


class AttributeBinder:
    """Binds element trees for one project.

    Parameters
    ----------
    project : Project
        Supplies the property store used for expansion and the base
        directory used to resolve path attributes.
    """

    def __init__(self, project: Project) -> None:
        self.project = project

    def bind(self, node: ElementNode, target: Element) -> bool:
        """Configure *target* from *node*.

        Returns ``False`` if the element is disabled by ``if``/``unless``,
        in which case nothing but the conditions was bound.
        """
        schema = schema_of(type(target))
        remaining = dict(node.attributes)

        for spec in schema.conditions:
            self._bind_attribute(node, target, spec, remaining.pop(spec.xml_name, None))
        if isinstance(target, ConditionalElement) and not target.enabled:
            logger.debug("Skipping disabled <{}> at {}", node.tag, node.location)
            return False

        for spec in schema.attributes:
            self._bind_attribute(node, target, spec, remaining.pop(spec.xml_name, None))
        for name in remaining:
            raise UnknownAttributeError(name, node.tag, location=node.location)

        self._bind_children(node, target, schema.elements, schema.accepts_tasks)

        if schema.accepts_text:
            target.text = self.project.properties.expand(node.text, node.location)
        elif node.text.strip():
            raise BindingError(
                f"<{node.tag} ... /> does not support element text.", location=node.location
            )

        target.initialize()
        return True

    # -----------------------------------------------------------------------
    # Attributes
    # -----------------------------------------------------------------------

    def _bind_attribute(
        self,
        node: ElementNode,
        target: Element,
        spec: AttributeSpec,
        text: str | None,
    ) -> None:
        if text is None:
            if spec.required:
                raise RequiredAttributeMissingError(spec.xml_name, node.tag, location=node.location)
            return

        if spec.expand:
            text = self.project.properties.expand(text, node.location)

        # Validators see the raw text before conversion.
        for validator in spec.validators:
            try:
                validator(text)
            except ValueError as exc:
                raise ValidationError(
                    f"'{text}' is not a valid value for attribute '{spec.xml_name}' "
                    f"of <{node.tag} ... />: {exc}",
                    location=node.location,
                ) from exc

        try:
            value = convert_attribute(text, spec.type, self.project.base_directory)
        except ValueError as exc:
            raise BuildTypeMismatchError(
                f"Cannot convert '{text}' to {type_label(spec.type)} for attribute "
                f"'{spec.xml_name}' of <{node.tag} ... />: {exc}",
                location=node.location,
            ) from exc
        setattr(target, spec.py_name, value)

    # -----------------------------------------------------------------------
    # Nested elements
    # -----------------------------------------------------------------------

    def _bind_children(
        self,
        node: ElementNode,
        target: Element,
        specs: tuple[ElementSpec, ...],
        accepts_tasks: bool,
    ) -> None:
        by_name = {spec.xml_name: spec for spec in specs}
        bound: dict[str, list[Element]] = {spec.xml_name: [] for spec in specs}
        seen: set[str] = set()

        for child in node.children:
            spec = by_name.get(child.tag)
            if spec is None:
                if accepts_tasks:
                    target.child_nodes.append(child)
                    continue
                raise UnknownElementError(child.tag, node.tag, location=child.location)
            if not spec.many and child.tag in seen:
                raise BindingError(
                    f"<{node.tag} ... /> allows only one nested <{child.tag}> element.",
                    location=child.location,
                )
            seen.add(child.tag)
            instance = spec.element_type(self.project, child, parent=target)
            if self.bind(child, instance):
                bound[spec.xml_name].append(instance)

        for spec in specs:
            items = bound[spec.xml_name]
            if spec.required and not items:
                raise RequiredAttributeMissingError(
                    spec.xml_name, node.tag, nested=True, location=node.location
                )
            setattr(target, spec.py_name, items if spec.many else (items[0] if items else None))
