"""Structural adapters for Python's builtin types.

Atoms (numbers, strings, bytes, booleans, None) are leaves. Tuples,
lists, dicts and sets are composites whose children are their items.
Only the exact builtin classes are accepted; subclasses such as
``collections.OrderedDict`` are opaque leaves unless a dedicated adapter
is registered.
"""

import typing
from typing import Any, Dict, List

from .._common.adapter import StructureAdapter
from .._common.hints import Placeholder, runtime_class


class AtomAdapter(StructureAdapter):
    """Adapter for atomic values.

    Atoms have no children. Their probes are the zero value of each
    constructor, so ``bool`` probes both ``False`` and ``True``. Strings
    are atoms, not sequences of characters.
    """

    ZERO_VALUES: Dict[type, List[Any]] = {
        int: [0],
        float: [0.0],
        complex: [0j],
        str: [""],
        bytes: [b""],
        bool: [False, True],
        type(None): [None],
    }

    def accepts(self, cls: type) -> bool:
        return cls in self.ZERO_VALUES

    def children(self, value: Any) -> List[Any]:
        return []

    def rebuild(self, value: Any, children: List[Any]) -> Any:
        return value

    def probe_constructors(self, hint: Any) -> List[Any]:
        return list(self.ZERO_VALUES[runtime_class(hint)])

    def is_leaf(self, value: Any) -> bool:
        return True


class TupleAdapter(StructureAdapter):
    """Adapter for plain tuples.

    ``Tuple[A, B]`` has a single constructor; ``Tuple[A, ...]`` probes
    both the empty and a one-item tuple.
    """

    def accepts(self, cls: type) -> bool:
        return cls is tuple

    def children(self, value: tuple) -> List[Any]:
        return list(value)

    def rebuild(self, value: tuple, children: List[Any]) -> tuple:
        return tuple(children)

    def probe_constructors(self, hint: Any) -> List[Any]:
        args = typing.get_args(hint)
        if not args or args == ((),):
            return [()]
        if len(args) == 2 and args[1] is Ellipsis:
            return [(), (Placeholder(args[0]),)]
        return [tuple(Placeholder(arg) for arg in args)]


class ListAdapter(StructureAdapter):
    """Adapter for lists. Children are the items, in order."""

    def accepts(self, cls: type) -> bool:
        return cls is list

    def children(self, value: list) -> List[Any]:
        return list(value)

    def rebuild(self, value: list, children: List[Any]) -> list:
        return list(children)

    def probe_constructors(self, hint: Any) -> List[Any]:
        args = typing.get_args(hint)
        if not args:
            return [[]]
        return [[], [Placeholder(args[0])]]


class DictAdapter(StructureAdapter):
    """Adapter for dicts.

    Keys and values are both children, interleaved in insertion order
    (``k1, v1, k2, v2, ...``). If rules map two keys to the same new key,
    the later entry wins when the dict is rebuilt.
    """

    def accepts(self, cls: type) -> bool:
        return cls is dict

    def children(self, value: dict) -> List[Any]:
        items = []
        for key, item in value.items():
            items.append(key)
            items.append(item)
        return items

    def rebuild(self, value: dict, children: List[Any]) -> dict:
        return dict(zip(children[0::2], children[1::2]))

    def probe_constructors(self, hint: Any) -> List[Any]:
        args = typing.get_args(hint)
        if len(args) != 2:
            return [{}]
        key_hint, value_hint = args
        return [{}, {Placeholder(key_hint): Placeholder(value_hint)}]


class SetAdapter(StructureAdapter):
    """Adapter for set and frozenset. Children follow iteration order."""

    def accepts(self, cls: type) -> bool:
        return cls is set or cls is frozenset

    def children(self, value: Any) -> List[Any]:
        return list(value)

    def rebuild(self, value: Any, children: List[Any]) -> Any:
        return type(value)(children)

    def probe_constructors(self, hint: Any) -> List[Any]:
        cls = runtime_class(hint)
        args = typing.get_args(hint)
        if not args:
            return [cls()]
        return [cls(), cls([Placeholder(args[0])])]
