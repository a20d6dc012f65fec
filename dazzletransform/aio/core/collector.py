"""Async subterm collection.

Like the synchronous SubtermCollector, but the filter/map function may
be a coroutine function (for example one that looks something up over
the network before deciding whether to keep a sub-value).
"""

import inspect
import operator
from typing import Any, Callable, Optional

from ..._common.accumulator import new_accumulator
from ..._common.adapter import AdapterRegistry
from ..._common.presence import check_presence
from ..._common.rules import EffectRule, RuleChain
from .traverser import AsyncBottomUpRewriter


class AsyncSubtermCollector:
    """Collects sub-values of one target type, awaiting ``filter_map``.

    Results are merged in traversal order. No presence check runs unless
    ``check_types`` is set.
    """

    def __init__(self,
                 target: type,
                 filter_map: Callable[[Any], Any],
                 empty: Any = list,
                 combine: Callable[[Any, Any], Any] = operator.iadd,
                 registry: Optional[AdapterRegistry] = None,
                 check_types: bool = False,
                 type_hint: Optional[Any] = None):
        """Initialize collector.

        Args:
            target: Runtime class of the sub-values to watch
            filter_map: Sync or async; returns a fragment, or None to skip
            empty: Factory, or value copied per call, for the empty accumulator
            combine: Merges a fragment into the accumulator
            registry: Adapters for structural access (defaults to builtins)
            check_types: Raise TypeMismatchError if ``target`` is unreachable
            type_hint: Shape of the root value for the check
        """
        if registry is None:
            from ...adapters import default_registry
            registry = default_registry()
        self.target = target
        self.filter_map = filter_map
        self.empty = empty
        self.combine = combine
        self.registry = registry
        self.check_types = check_types
        self.type_hint = type_hint

    async def collect(self, value: Any) -> Any:
        """Traverse ``value`` and return the accumulated result."""
        acc = new_accumulator(self.empty)

        async def record(item: Any) -> Any:
            nonlocal acc
            found = self.filter_map(item)
            if inspect.isawaitable(found):
                found = await found
            if found is not None:
                acc = self.combine(acc, found)
            return item

        chain = RuleChain([EffectRule(self.target, record, name=f"collect {self.target.__qualname__}")])
        if self.check_types:
            check_presence(chain, value, self.type_hint, self.registry)
        await AsyncBottomUpRewriter(chain, self.registry).rewrite(value)
        return acc
