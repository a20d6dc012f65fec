"""Subterm collection for DazzleTransform.

Collectors reuse the bottom-up rewriter with a single recording rule:
the rule hands each sub-value of the watched type to a filter/map
function, merges any result into an accumulator, and returns the value
unchanged. The rewritten value is discarded; only the accumulator is
returned.
"""

import operator
from typing import Any, Callable, Optional

from ..._common.accumulator import new_accumulator
from ..._common.adapter import AdapterRegistry
from ..._common.presence import check_presence
from ..._common.rules import Rule, RuleChain
from .traverser import BottomUpRewriter


class SubtermCollector:
    """Collects sub-values of one target type into an accumulator.

    The accumulator is described by an ``empty`` factory and a
    ``combine(acc, item)`` function; the defaults (``list`` and
    ``operator.iadd``) build a list. Results are merged in traversal
    order: depth-first, children before their parent.

    By default no presence check runs: finding nothing is a legitimate
    outcome and yields the empty accumulator.
    """

    def __init__(self,
                 target: type,
                 filter_map: Callable[[Any], Optional[Any]],
                 empty: Any = list,
                 combine: Callable[[Any, Any], Any] = operator.iadd,
                 registry: Optional[AdapterRegistry] = None,
                 check_types: bool = False,
                 type_hint: Optional[Any] = None):
        """Initialize collector.

        Args:
            target: Runtime class of the sub-values to watch
            filter_map: Returns an accumulator fragment, or None to skip
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

    def collect(self, value: Any) -> Any:
        """Traverse ``value`` and return the accumulated result."""
        acc = new_accumulator(self.empty)

        def record(item: Any) -> Any:
            nonlocal acc
            found = self.filter_map(item)
            if found is not None:
                acc = self.combine(acc, found)
            return item

        chain = RuleChain([Rule(self.target, record, name=f"collect {self.target.__qualname__}")])
        if self.check_types:
            check_presence(chain, value, self.type_hint, self.registry)
        BottomUpRewriter(chain, self.registry).rewrite(value)
        return acc
