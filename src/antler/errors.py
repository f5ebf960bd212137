"""Exception hierarchy for antler.

Every failure raised by the engine derives from ``BuildError``.  Errors
carry an optional source ``Location`` and a list of context *frames*
("target 'build'", "task <echo>") appended as the error bubbles up
through the target/task call chain.  Nothing formats the chain until the
top level calls ``format_error()``.

Families::

    ParseError          malformed document or expression, aborts the build
    ResolutionError     unknown target or dependency cycle, before any task
    BindingError        unknown/missing/invalid attribute, aborts the target
    ExecutionError      a task's own failure, aborts all pending targets
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from antler.model.document import Location


class BuildError(Exception):
    """Base class for all build failures."""

    def __init__(self, message: str, location: Location | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.location = location
        self.frames: list[str] = []

    def add_frame(self, frame: str) -> BuildError:
        """Record an enclosing context (outermost frames are added last)."""
        self.frames.append(frame)
        return self

    def __str__(self) -> str:
        if self.location is not None and self.location.is_known:
            return f"{self.location}: {self.message}"
        return self.message


# ---------------------------------------------------------------------------
# Parse errors
# ---------------------------------------------------------------------------

class ParseError(BuildError):
    """Malformed input.  Not recoverable."""


class DocumentError(ParseError):
    """The build document itself is malformed."""


class ConfigurationError(ParseError):
    """The configuration file is unreadable or invalid."""


class ExpressionError(BuildError):
    """An error tied to a span of a ``${...}`` expression."""

    def __init__(
        self,
        message: str,
        expression: str = "",
        start: int = -1,
        end: int = -1,
        location: Location | None = None,
    ) -> None:
        super().__init__(message, location)
        self.expression = expression
        self.start = start
        self.end = end if end >= start else start

    def __str__(self) -> str:
        text = super().__str__()
        if not self.expression or self.start < 0:
            return text
        width = max(1, self.end - self.start)
        marker = " " * self.start + "^" * width
        return f"{text}\n    {self.expression}\n    {marker}"


class ExpressionSyntaxError(ExpressionError, ParseError):
    """The expression could not be parsed."""


class ExpressionEvaluationError(ExpressionError):
    """The expression parsed but could not be evaluated."""


class PropertyNotFoundError(ExpressionEvaluationError):
    def __init__(self, name: str, **kwargs: Any) -> None:
        super().__init__(f"Property '{name}' has not been set.", **kwargs)
        self.name = name


class FunctionArgumentError(ExpressionEvaluationError):
    """Wrong number or type of arguments in a function call.

    ``index`` is 1-based; 0 means the error concerns the call as a whole
    (e.g. too few arguments).
    """

    def __init__(self, message: str, function: str, index: int, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.function = function
        self.index = index


class CircularPropertyReferenceError(ExpressionEvaluationError):
    def __init__(self, cycle: list[str], **kwargs: Any) -> None:
        path = " -> ".join(cycle)
        super().__init__(f"Circular property reference: {path}", **kwargs)
        self.cycle = cycle


# ---------------------------------------------------------------------------
# Resolution errors
# ---------------------------------------------------------------------------

class ResolutionError(BuildError):
    """The target graph is invalid."""


class UnknownTargetError(ResolutionError):
    def __init__(self, name: str, referrer: str | None = None, **kwargs: Any) -> None:
        if referrer is None:
            message = f"Target '{name}' does not exist in this project."
        else:
            message = f"Unknown dependent target '{name}' of target '{referrer}'."
        super().__init__(message, **kwargs)
        self.name = name
        self.referrer = referrer


class CircularDependencyError(ResolutionError):
    def __init__(self, path: list[str], **kwargs: Any) -> None:
        super().__init__(f"Circular dependency: {' -> '.join(path)}", **kwargs)
        self.path = path


# ---------------------------------------------------------------------------
# Binding errors
# ---------------------------------------------------------------------------

class BindingError(BuildError):
    """An element could not be configured from its XML attributes."""


class UnknownAttributeError(BindingError):
    def __init__(self, attribute: str, element: str, **kwargs: Any) -> None:
        super().__init__(
            f"<{element} ... /> does not support the attribute '{attribute}'.",
            **kwargs,
        )
        self.attribute = attribute
        self.element = element


class UnknownElementError(BindingError):
    def __init__(self, child: str, element: str, **kwargs: Any) -> None:
        super().__init__(
            f"<{element} ... /> does not support the nested element <{child}>.",
            **kwargs,
        )
        self.child = child
        self.element = element


class RequiredAttributeMissingError(BindingError):
    def __init__(self, attribute: str, element: str, *, nested: bool = False, **kwargs: Any) -> None:
        if nested:
            message = f"<{element} ... /> requires at least one nested <{attribute}> element."
        else:
            message = f"'{attribute}' is a required attribute of <{element} ... />."
        super().__init__(message, **kwargs)
        self.attribute = attribute
        self.element = element


class ValidationError(BindingError):
    """A validator rejected an attribute value.  The cause is chained."""


class BuildTypeMismatchError(BindingError):
    """An attribute value cannot be converted to the declared type."""


class TaskNotFoundError(BindingError):
    def __init__(self, tag: str, **kwargs: Any) -> None:
        super().__init__(f"Invalid element <{tag}>. Unknown task or datatype.", **kwargs)
        self.tag = tag


# ---------------------------------------------------------------------------
# Execution errors
# ---------------------------------------------------------------------------

class ExecutionError(BuildError):
    """A task failed while running."""


class TaskExecutionError(ExecutionError):
    """Wraps an unexpected exception raised from a task's ``execute()``."""


class TaskFailedError(ExecutionError):
    """Raised deliberately by a task (``<fail>``)."""


class ExtensionError(ExecutionError):
    """An extension module or type could not be loaded."""


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def innermost(error: BaseException) -> BaseException:
    """Follow ``__cause__`` links to the root failure."""
    while error.__cause__ is not None:
        error = error.__cause__
    return error


def format_error(error: BaseException) -> str:
    """Render an error once, with its cause chain and context frames."""
    lines = [str(error)]
    cause = error.__cause__
    while cause is not None:
        lines.append(f"  caused by: {cause}")
        cause = cause.__cause__
    if isinstance(error, BuildError):
        for frame in error.frames:
            lines.append(f"  in {frame}")
    return "\n".join(lines)
