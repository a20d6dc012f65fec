"""High-level async API for DazzleTransform.

Async functions for rewriting with effectful rules and collecting
sub-values with an async filter.
"""

import operator
from typing import Any, Callable, Optional

from .._common.adapter import AdapterRegistry
from .._common.config import TransformConfig
from .._common.rules import RuleObserver
from .core.collector import AsyncSubtermCollector
from .planning import AsyncTransformPlan


async def rewrite_effectful(
    rules: Any,
    value: Any,
    type_hint: Optional[Any] = None,
    registry: Optional[AdapterRegistry] = None,
    on_rule_applied: Optional[RuleObserver] = None,
    max_nodes: Optional[int] = None,
) -> Any:
    """Rewrite ``value`` bottom-up with rules that may be coroutine functions.

    Effects run in a fixed order: depth-first, children before parent,
    siblings left to right, and chain order within a node.

    Raises:
        TypeMismatchError: If a rule's type can never occur inside
            ``value``; raised before any effect runs

    Example:
        >>> async def log_int(x: int) -> int:
        ...     print("visit", x)
        ...     return x
        >>> await rewrite_effectful(log_int, (1, [2, 3]))
        visit 1
        visit 2
        visit 3
        (1, [2, 3])
    """
    config = TransformConfig(
        check_types=True,
        type_hint=type_hint,
        registry=registry,
        on_rule_applied=on_rule_applied,
        max_nodes=max_nodes,
    )
    return await AsyncTransformPlan(config, rules).execute(value)


async def rewrite_effectful_unchecked(
    rules: Any,
    value: Any,
    registry: Optional[AdapterRegistry] = None,
    on_rule_applied: Optional[RuleObserver] = None,
    max_nodes: Optional[int] = None,
) -> Any:
    """Same as ``rewrite_effectful`` but skips the type presence check."""
    config = TransformConfig.unchecked(
        registry=registry,
        on_rule_applied=on_rule_applied,
        max_nodes=max_nodes,
    )
    return await AsyncTransformPlan(config, rules).execute(value)


async def collect_all_with_async(
    target: type,
    filter_map: Callable[[Any], Any],
    value: Any,
    empty: Any = list,
    combine: Callable[[Any, Any], Any] = operator.iadd,
    registry: Optional[AdapterRegistry] = None,
    check_types: bool = False,
    type_hint: Optional[Any] = None,
) -> Any:
    """Collect sub-values of ``target`` through a sync or async ``filter_map``.

    ``filter_map`` is awaited one sub-value at a time, in traversal order.
    """
    collector = AsyncSubtermCollector(
        target,
        filter_map,
        empty=empty,
        combine=combine,
        registry=registry,
        check_types=check_types,
        type_hint=type_hint,
    )
    return await collector.collect(value)
