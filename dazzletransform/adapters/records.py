"""Structural adapters for record types: dataclasses and named tuples.

These adapters derive structural access from the class definition itself,
so user types participate without writing an adapter by hand. Field
shapes come from ``typing.get_type_hints``; annotate fields precisely
(``List[int]`` rather than ``list``) to make their contents reachable for
the type presence check.

Sum types are modelled two ways, and both are probed per variant:
- a ``Union[...]`` alias used as the field annotation
- a base class whose concrete dataclass subclasses are the variants
"""

import dataclasses
import inspect
import typing
from functools import lru_cache
from typing import Any, Dict, List, Tuple

from .._common.adapter import StructureAdapter
from .._common.errors import ConstructionFailureError
from .._common.hints import Placeholder, runtime_class


def _field_hints(cls: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except Exception as e:
        raise ConstructionFailureError(cls, f"cannot resolve annotations ({e})") from e


@lru_cache(maxsize=None)
def _init_fields(cls: type) -> Tuple[dataclasses.Field, ...]:
    return tuple(f for f in dataclasses.fields(cls) if f.init)


class DataclassAdapter(StructureAdapter):
    """Adapter for dataclass instances.

    Children are the ``init=True`` fields in declaration order. Rebuilding
    goes through ``dataclasses.replace`` so ``__post_init__`` and frozen
    classes behave as usual.

    Probes are created with ``object.__new__`` and filled with
    placeholders through ``object.__setattr__``; no ``__init__`` or
    ``__post_init__`` runs for them.
    """

    def accepts(self, cls: type) -> bool:
        return isinstance(cls, type) and dataclasses.is_dataclass(cls)

    def accepts_hint(self, hint: Any) -> bool:
        cls = runtime_class(hint)
        if cls is None or cls.__module__ == 'builtins':
            return False
        return self.accepts(cls) or any(self.accepts(c) for c in self._family(cls))

    def children(self, value: Any) -> List[Any]:
        return [getattr(value, f.name) for f in _init_fields(type(value))]

    def rebuild(self, value: Any, children: List[Any]) -> Any:
        names = [f.name for f in _init_fields(type(value))]
        return dataclasses.replace(value, **dict(zip(names, children)))

    def probe_constructors(self, hint: Any) -> List[Any]:
        cls = runtime_class(hint)
        variants = self.variants(cls)
        if not variants:
            raise ConstructionFailureError(hint, "no concrete dataclass variant")

        # Type arguments of a generic dataclass only apply to the class itself
        origin_subst = dict(zip(getattr(cls, '__parameters__', ()), typing.get_args(hint)))
        return [self._probe(v, origin_subst if v is cls else {}) for v in variants]

    def variants(self, cls: type) -> List[type]:
        """Concrete dataclasses among ``cls`` and all of its subclasses."""
        return [c for c in [cls] + self._family(cls)
                if self.accepts(c) and not inspect.isabstract(c)]

    def _family(self, cls: type) -> List[type]:
        # type.__subclasses__(c) also works when c is a metaclass
        found: List[type] = []
        pending = list(type.__subclasses__(cls))
        while pending:
            sub = pending.pop(0)
            if sub in found:
                continue
            found.append(sub)
            pending.extend(type.__subclasses__(sub))
        return found

    def _probe(self, cls: type, subst: Dict[Any, Any]) -> Any:
        hints = _field_hints(cls)
        probe = object.__new__(cls)
        for f in dataclasses.fields(cls):
            field_hint = hints.get(f.name, Any)
            object.__setattr__(probe, f.name, Placeholder(subst.get(field_hint, field_hint)))
        return probe


class NamedTupleAdapter(StructureAdapter):
    """Adapter for ``typing.NamedTuple`` and ``collections.namedtuple`` classes.

    Fields of an untyped ``collections.namedtuple`` have shape ``Any``.
    """

    def accepts(self, cls: type) -> bool:
        return (isinstance(cls, type) and issubclass(cls, tuple)
                and cls is not tuple and hasattr(cls, '_fields'))

    def children(self, value: Any) -> List[Any]:
        return list(value)

    def rebuild(self, value: Any, children: List[Any]) -> Any:
        return value._make(children)

    def probe_constructors(self, hint: Any) -> List[Any]:
        cls = runtime_class(hint)
        hints = _field_hints(cls)
        return [cls._make(Placeholder(hints.get(name, Any)) for name in cls._fields)]
