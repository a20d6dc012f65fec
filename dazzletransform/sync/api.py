"""High-level API for DazzleTransform.

This module provides simple, functional interfaces for rewriting values
and collecting sub-values. These functions wrap TransformPlan and
SubtermCollector for ease of use in simple cases.
"""

import operator
from typing import Any, Callable, List, Optional

from .._common.adapter import AdapterRegistry
from .._common.config import TransformConfig
from .._common.rules import RuleObserver
from .core.collector import SubtermCollector
from .planning import TransformPlan


def rewrite(
    rules: Any,
    value: Any,
    type_hint: Optional[Any] = None,
    registry: Optional[AdapterRegistry] = None,
    on_rule_applied: Optional[RuleObserver] = None,
    max_nodes: Optional[int] = None,
) -> Any:
    """Rewrite every matching sub-value of ``value``, bottom-up.

    Sub-values are rewritten before the values containing them. If
    several rules target the same type, later rules are applied to the
    result of earlier ones.

    Before anything runs, every rule's target type must be reachable from
    the shape of ``value``; otherwise TypeMismatchError is raised. Use
    ``rewrite_unchecked`` to skip this check.

    Args:
        rules: A rule, annotated function, ``(type, func)`` pair, RuleChain,
            or a list of those
        value: Value to rewrite (not mutated)
        type_hint: Shape of ``value``; inferred when omitted
        registry: Adapters for structural access (defaults to builtins)
        on_rule_applied: Called as (rule, before, after) per application
        max_nodes: Maximum nodes to visit

    Returns:
        The rewritten value

    Example:
        >>> rewrite(wrap(int, lambda x: x + 1), (1, 4.0, (False, [4, 5, 6])))
        (2, 4.0, (False, [5, 6, 7]))

        >>> rewrite([wrap(int, lambda x: x + 1), wrap(int, lambda x: x * 2)], [1, 2])
        [4, 6]

        >>> rewrite(wrap(int, lambda x: x + 1), False)
        Traceback (most recent call last):
        ...
        TypeMismatchError: ... Types of missing terms: [int]
    """
    config = TransformConfig(
        check_types=True,
        type_hint=type_hint,
        registry=registry,
        on_rule_applied=on_rule_applied,
        max_nodes=max_nodes,
    )
    return TransformPlan(config, rules).execute(value)


def rewrite_unchecked(
    rules: Any,
    value: Any,
    registry: Optional[AdapterRegistry] = None,
    on_rule_applied: Optional[RuleObserver] = None,
    max_nodes: Optional[int] = None,
) -> Any:
    """Same as ``rewrite`` but skips the type presence check.

    Rules whose type never occurs simply do nothing.
    """
    config = TransformConfig.unchecked(
        registry=registry,
        on_rule_applied=on_rule_applied,
        max_nodes=max_nodes,
    )
    return TransformPlan(config, rules).execute(value)


def collect_all_with(
    target: type,
    filter_map: Callable[[Any], Optional[Any]],
    value: Any,
    empty: Any = list,
    combine: Callable[[Any, Any], Any] = operator.iadd,
    registry: Optional[AdapterRegistry] = None,
    check_types: bool = False,
    type_hint: Optional[Any] = None,
) -> Any:
    """Collect sub-values of ``target`` that ``filter_map`` turns into results.

    ``filter_map`` returns an accumulator fragment (a list by default) or
    None to skip the sub-value.

    Example:
        >>> collect_all_with(int, lambda x: [x] if x < 6 else None,
        ...                  (3, 4.0, True, 'c', (False, (True, 5, 6))))
        [3, 5]
    """
    collector = SubtermCollector(
        target,
        filter_map,
        empty=empty,
        combine=combine,
        registry=registry,
        check_types=check_types,
        type_hint=type_hint,
    )
    return collector.collect(value)


def collect_all_map(
    target: type,
    func: Callable[[Any], Any],
    value: Any,
    empty: Any = list,
    combine: Callable[[Any, Any], Any] = operator.iadd,
    **kwargs,
) -> Any:
    """Map every sub-value of ``target`` to a fragment and combine them all.

    Example:
        >>> collect_all_map(bool, lambda x: [x] if x else [],
        ...                 (3, 4.0, True, 'c', (False, (True, 5, 6))))
        [True, True]

        >>> collect_all_map(int, lambda x: x, (1, [2, 3]), empty=int, combine=operator.add)
        6
    """
    return collect_all_with(target, func, value, empty=empty, combine=combine, **kwargs)


def collect_all_by(
    target: type,
    predicate: Callable[[Any], bool],
    value: Any,
    **kwargs,
) -> List[Any]:
    """Collect sub-values of ``target`` that satisfy ``predicate``, as a list.

    Example:
        >>> collect_all_by(int, lambda x: x < 6, (3, 4.0, (False, (True, 5, 6))))
        [3, 5]
    """
    return collect_all_with(
        target,
        lambda item: [item] if predicate(item) else None,
        value,
        **kwargs,
    )


def collect_all(target: type, value: Any, **kwargs) -> List[Any]:
    """Collect every sub-value of ``target``, as a list in traversal order.

    Example:
        >>> collect_all(int, (3, 4.0, (True, [4, 5, 6])))
        [3, 4, 5, 6]
    """
    return collect_all_by(target, lambda item: True, value, **kwargs)
