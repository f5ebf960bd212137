"""antler extension framework: public API.

Task and function-set authors import everything from this namespace::

    from antler.framework import Task, task, attribute, FILE, int_range
"""

from ._types import (
    DIRECTORY,
    FILE,
    PathType,
    convert_attribute,
    resolve_path,
    type_label,
)

from ._descriptors import (
    AttributeSpec,
    ElementSchema,
    ElementSpec,
    attribute,
    boolean,
    element,
    element_array,
    int_range,
    schema_of,
    string_check,
)

from ._elements import (
    ConditionalElement,
    Element,
    Task,
    TaskContainer,
)

from ._decorators import (
    element_name,
    task,
)

from ._functions import (
    BoundFunction,
    FunctionSet,
    FunctionSignature,
    function,
    function_set,
)

from ._protocols import (
    FunctionSetType,
    TaskType,
)

from ._binder import AttributeBinder

from ._discover import (
    ExtensionType,
    discover,
    scan,
)

from ._registry import (
    FunctionTable,
    Registry,
)

__all__ = [
    # Attribute types
    "DIRECTORY",
    "FILE",
    "PathType",
    "convert_attribute",
    "resolve_path",
    "type_label",
    # Declarations
    "AttributeSpec",
    "ElementSchema",
    "ElementSpec",
    "attribute",
    "element",
    "element_array",
    "schema_of",
    # Validators
    "boolean",
    "int_range",
    "string_check",
    # Base classes
    "ConditionalElement",
    "Element",
    "Task",
    "TaskContainer",
    "FunctionSet",
    # Decorators
    "element_name",
    "function",
    "function_set",
    "task",
    # Protocols
    "FunctionSetType",
    "TaskType",
    # Binding, scanning, registry
    "AttributeBinder",
    "BoundFunction",
    "ExtensionType",
    "FunctionSignature",
    "FunctionTable",
    "Registry",
    "discover",
    "scan",
]
