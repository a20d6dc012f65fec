"""Type hint helpers for DazzleTransform.

The presence checker walks *shapes* - ``typing`` expressions such as
``int``, ``List[int]`` or ``Optional[Expr]`` - rather than live values.
Each shape denotes at most one runtime class, which is what rules are
matched against.
"""

import types
import typing
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Set, Tuple, Union

_UNION_TYPES = tuple(
    t for t in (Union, getattr(types, 'UnionType', None)) if t is not None
)


@dataclass(frozen=True)
class Placeholder:
    """Stand-in for an unconstructed value of ``hint``.

    Probe instances are filled with placeholders so that child shapes can
    be discovered without building (or evaluating) real data.
    """

    hint: Any

    def __repr__(self) -> str:
        return f"Placeholder({describe_hint(self.hint)})"


def is_union(hint: Any) -> bool:
    """Check if ``hint`` is a ``Union``/``Optional``/``X | Y`` shape."""
    return typing.get_origin(hint) in _UNION_TYPES


def runtime_class(hint: Any) -> Optional[type]:
    """Return the runtime class a shape denotes.

    Args:
        hint: A class or ``typing`` expression

    Returns:
        The class, or None for shapes with no single runtime class
        (``Any``, ``Union``, ``TypeVar``, ``Literal``...)
    """
    if hint is None:
        return type(None)
    if hint is Any or is_union(hint):
        return None
    origin = typing.get_origin(hint)
    if origin is not None:
        return origin if isinstance(origin, type) else None
    return hint if isinstance(hint, type) else None


def hint_of(value: Any) -> Any:
    """Shape of a direct child: its placeholder hint, or its runtime class."""
    if isinstance(value, Placeholder):
        return value.hint
    return type(value)


def hint_key(hint: Any) -> Any:
    """Hashable key that treats ``List[int]`` and ``list[int]`` alike."""
    origin = typing.get_origin(hint)
    if origin is None:
        return hint
    args = typing.get_args(hint)
    if is_union(hint):
        return (Union, frozenset(hint_key(a) for a in args))
    return (origin, tuple(hint_key(a) for a in args))


def _union_of(hints: List[Any]) -> Any:
    unique = []
    for hint in hints:
        if hint not in unique:
            unique.append(hint)
    return Union[tuple(unique)]


_CONTAINERS = (tuple, list, set, frozenset, dict)


def _items(value: Any) -> List[Any]:
    if type(value) is dict:
        return list(value.keys()) + list(value.values())
    return list(value)


def _container_hint(cls: type, hints: List[Any]) -> Any:
    if cls is tuple:
        return Tuple[tuple(hints)]
    if cls is list:
        return List[_union_of(hints)]
    if cls is dict:
        half = len(hints) // 2
        return Dict[_union_of(hints[:half]), _union_of(hints[half:])]
    generic = Set if cls is set else FrozenSet
    return generic[_union_of(hints)]


def infer_hint(value: Any, max_depth: Optional[int] = None) -> Any:
    """Best-effort shape for a value that came without an explicit hint.

    Builtin containers have no runtime element type, so their shape is
    read off their contents: tuples become ``Tuple[...]`` of their items,
    lists and sets become ``List``/``Set`` over the union of their items,
    dicts become ``Dict[K, V]``. Empty containers stay bare (``list``),
    which has no reachable element type. Every other value is described
    by its class.

    Args:
        value: Any value
        max_depth: Containers nested deeper than this are described by
            their bare class (None = no limit)

    Returns:
        A class or ``typing`` expression
    """
    # Explicit post-order stack so deeply nested values cannot exhaust
    # the interpreter stack
    results: List[Any] = []
    stack: List[Tuple[Any, int, bool]] = [(value, 0, False)]
    while stack:
        item, depth, expanded = stack.pop()
        cls = type(item)
        if expanded:
            count = len(item) * (2 if cls is dict else 1)
            hints = results[-count:]
            del results[-count:]
            results.append(_container_hint(cls, hints))
        elif (cls not in _CONTAINERS or not item
              or (max_depth is not None and depth >= max_depth)):
            results.append(cls)
        else:
            stack.append((item, depth, True))
            for child in reversed(_items(item)):
                stack.append((child, depth + 1, False))
    return results[0]


def describe_hint(hint: Any) -> str:
    """Readable name for a shape, used in error messages and logs."""
    if hint is None or hint is type(None):
        return "None"
    if isinstance(hint, type) and typing.get_origin(hint) is None:
        return hint.__qualname__
    return repr(hint).replace("typing.", "")
