"""Exceptions raised by DazzleTransform.

Both the sync and aio implementations raise the same exception types so
callers can handle failures uniformly.
"""

from typing import Any, Iterable

from .hints import describe_hint


class TransformError(Exception):
    """Base class for all DazzleTransform errors."""
    pass


class TypeMismatchError(TransformError):
    """Raised when a rule's target type can never occur inside a value.

    The presence check runs before any rule is applied, so nothing has
    been rewritten when this is raised.

    Attributes:
        value_type: Shape of the value that was about to be rewritten
        missing_types: Rule targets unreachable from ``value_type``
    """

    def __init__(self, value_type: Any, missing_types: Iterable[type]):
        self.value_type = value_type
        self.missing_types = tuple(
            sorted(missing_types, key=lambda t: (t.__module__, t.__qualname__))
        )
        names = ", ".join(describe_hint(t) for t in self.missing_types)
        super().__init__(
            f"Could not find all needed types when rewriting a value of type "
            f"{describe_hint(value_type)}. Types of missing terms: [{names}]"
        )


class ConstructionFailureError(TransformError):
    """Raised when no placeholder can be built for a type's constructor.

    This points at a broken structural adapter or an unusable type
    definition (unresolvable annotations, an abstract family without any
    concrete variant), not at bad input data.
    """

    def __init__(self, hint: Any, reason: str):
        self.hint = hint
        self.reason = reason
        super().__init__(
            f"Cannot construct a placeholder for {describe_hint(hint)}: {reason}"
        )


class TransformConfigError(TransformError):
    """Raised when a TransformConfig fails validation."""
    pass


class NodeLimitExceededError(TransformError):
    """Raised when a traversal visits more nodes than ``max_nodes``."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Traversal exceeded max_nodes={limit}")
