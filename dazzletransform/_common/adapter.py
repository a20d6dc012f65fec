"""StructureAdapter abstraction for DazzleTransform.

Adapters are what make DazzleTransform work with ANY composite value. The
rewriter itself knows nothing about tuples, dataclasses or user classes;
it asks the adapter registry how to take a value apart into its immediate
children, and how to put it back together from rewritten children.

The presence checker uses the same adapters to *probe* a shape: build one
placeholder instance per constructor/variant and look at the shapes of
its children, without needing real data.
"""

import logging
import typing
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .errors import ConstructionFailureError
from .hints import is_union, runtime_class

logger = logging.getLogger(__name__)


class StructureAdapter(ABC):
    """Abstract adapter for decomposing and rebuilding one family of types.

    An adapter declares which runtime classes it handles, how to list a
    value's immediate children (in a stable order), how to rebuild a new
    value from rewritten children, and how to produce placeholder probes
    for a shape.
    """

    @abstractmethod
    def accepts(self, cls: type) -> bool:
        """Check if this adapter handles values of runtime class ``cls``.

        Args:
            cls: Runtime class of a value

        Returns:
            True if ``children``/``rebuild`` work for values of ``cls``
        """
        pass

    @abstractmethod
    def children(self, value: Any) -> List[Any]:
        """Return the immediate children of ``value`` in traversal order.

        Args:
            value: A value whose class this adapter accepts

        Returns:
            List of child values (empty for leaves)
        """
        pass

    @abstractmethod
    def rebuild(self, value: Any, children: List[Any]) -> Any:
        """Build a new value shaped like ``value`` from rewritten children.

        Must not mutate ``value``.

        Args:
            value: The original value
            children: Rewritten children, same length and order as
                ``children(value)``

        Returns:
            The rebuilt value
        """
        pass

    @abstractmethod
    def probe_constructors(self, hint: Any) -> List[Any]:
        """Return one placeholder instance per constructor of ``hint``.

        Child slots of a probe hold ``Placeholder`` objects carrying the
        slot's shape. Building a probe must not run user code that
        inspects field contents.

        Args:
            hint: A shape this adapter accepts

        Returns:
            List of probe instances
        """
        pass

    def accepts_hint(self, hint: Any) -> bool:
        """Check if this adapter can probe ``hint``.

        Default implementation checks the shape's runtime class.
        """
        cls = runtime_class(hint)
        return cls is not None and self.accepts(cls)

    def is_leaf(self, value: Any) -> bool:
        """Check if ``value`` has no children."""
        return not self.children(value)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class AdapterRegistry:
    """Ordered collection of StructureAdapters.

    The first adapter that accepts a class wins. Values whose class no
    adapter accepts are treated as atomic leaves.
    """

    def __init__(self, adapters: Optional[Iterable[StructureAdapter]] = None):
        self._adapters: List[StructureAdapter] = list(adapters or [])
        self._by_class: Dict[type, Optional[StructureAdapter]] = {}

    def register(self, adapter: StructureAdapter, first: bool = True) -> 'AdapterRegistry':
        """Add an adapter.

        Args:
            adapter: Adapter to add
            first: Put the adapter ahead of existing ones (so it can
                override a default), otherwise after them

        Returns:
            self, for chaining
        """
        if not isinstance(adapter, StructureAdapter):
            raise TypeError(f"Expected a StructureAdapter, got {adapter!r}")
        if first:
            self._adapters.insert(0, adapter)
        else:
            self._adapters.append(adapter)
        self._by_class.clear()
        logger.debug("Registered %r (%d adapters)", adapter, len(self._adapters))
        return self

    def __iter__(self) -> Iterator[StructureAdapter]:
        return iter(self._adapters)

    def __len__(self) -> int:
        return len(self._adapters)

    def adapter_for_class(self, cls: type) -> Optional[StructureAdapter]:
        """Find the adapter for runtime class ``cls`` (cached)."""
        try:
            return self._by_class[cls]
        except KeyError:
            pass
        found = next((a for a in self._adapters if a.accepts(cls)), None)
        self._by_class[cls] = found
        return found

    def adapter_for(self, value: Any) -> Optional[StructureAdapter]:
        """Find the adapter for ``value``'s runtime class."""
        return self.adapter_for_class(type(value))

    def children(self, value: Any) -> List[Any]:
        """Immediate children of ``value``; empty for unknown classes."""
        adapter = self.adapter_for(value)
        if adapter is None:
            return []
        return list(adapter.children(value))

    def rebuild(self, value: Any, children: List[Any]) -> Any:
        """Rebuild ``value`` from children; unknown classes are returned as-is."""
        adapter = self.adapter_for(value)
        if adapter is None:
            return value
        return adapter.rebuild(value, children)

    def probe_constructors(self, hint: Any) -> List[Any]:
        """Placeholder probes for every constructor of ``hint``.

        Unions are expanded into their members. Shapes no adapter can
        probe (``Any``, type variables, opaque classes) have no probes.

        Raises:
            ConstructionFailureError: If an adapter accepts the shape but
                cannot build a probe for it
        """
        if is_union(hint):
            probes = []
            for member in typing.get_args(hint):
                probes.extend(self.probe_constructors(member))
            return probes

        adapter = next((a for a in self._adapters if a.accepts_hint(hint)), None)
        if adapter is None:
            return []
        try:
            return list(adapter.probe_constructors(hint))
        except ConstructionFailureError:
            raise
        except Exception as e:
            raise ConstructionFailureError(hint, f"{e.__class__.__name__}: {e}") from e

    def copy(self) -> 'AdapterRegistry':
        """Independent registry with the same adapters."""
        return AdapterRegistry(self._adapters)

    def __repr__(self) -> str:
        names = ", ".join(a.__class__.__name__ for a in self._adapters)
        return f"AdapterRegistry([{names}])"
