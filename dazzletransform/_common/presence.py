"""Type presence checking for DazzleTransform.

Before a checked rewrite starts, every rule's target class must be
*reachable* from the value being rewritten. Reachability is a property
of the type graph, not only of the instance: a rule for ``Neg`` is
accepted on ``Add(Lit(1), Lit(2))`` because an ``Expr`` field could hold
a ``Neg``, even though this particular value holds none. Every class the
value actually holds is reachable as well, whatever its declared shape.
A rule for a class that no constructor of any visited shape could ever
produce is rejected up front instead of silently doing nothing.
"""

import logging
from typing import Any, FrozenSet, List, Optional, Set

from .adapter import AdapterRegistry
from .errors import TypeMismatchError
from .hints import hint_key, hint_of, infer_hint, runtime_class
from .rules import chain_of

logger = logging.getLogger(__name__)


def _resolve_registry(registry: Optional[AdapterRegistry]) -> AdapterRegistry:
    if registry is not None:
        return registry
    from ..adapters import default_registry
    return default_registry()


def needed_types(rules: Any) -> FrozenSet[type]:
    """Return the target class of every rule (duplicates collapsed).

    Args:
        rules: Anything ``chain_of`` accepts
    """
    return chain_of(rules).needed_types()


def reachable_shape_types(hint: Any, registry: Optional[AdapterRegistry] = None) -> FrozenSet[type]:
    """Return every runtime class reachable from a shape.

    Starting from ``hint``, each newly seen shape contributes its runtime
    class, then every constructor probe of the shape contributes its own
    class and pushes the shapes of its children. The walk ends when no
    new shape turns up, so recursive types terminate.

    Args:
        hint: Class or ``typing`` expression to start from
        registry: Adapters used for probing (defaults to builtins)

    Returns:
        Frozen set of runtime classes

    Raises:
        ConstructionFailureError: If a shape's probes cannot be built
    """
    registry = _resolve_registry(registry)
    seen: Set[Any] = set()
    found: Set[type] = set()
    pending: List[Any] = [hint]

    while pending:
        shape = pending.pop()
        key = hint_key(shape)
        if key in seen:
            continue
        seen.add(key)

        cls = runtime_class(shape)
        if cls is not None:
            found.add(cls)

        for probe in registry.probe_constructors(shape):
            found.add(type(probe))
            for child in registry.children(probe):
                pending.append(hint_of(child))

    logger.debug("Shape %r reaches %d types via %d shapes", hint, len(found), len(seen))
    return frozenset(found)


def instance_types(value: Any, registry: Optional[AdapterRegistry] = None) -> FrozenSet[type]:
    """Return every runtime class reachable from the sub-values present in ``value``.

    Each sub-value contributes the shape closure of its own class, so
    values stored under opaque shapes (``Any`` fields, untyped named
    tuple fields, bare ``list`` annotations) are still accounted for. The
    closure of each class is computed once.

    Args:
        value: The value about to be traversed
        registry: Adapters used for traversal and probing

    Returns:
        Frozen set of runtime classes
    """
    registry = _resolve_registry(registry)
    found: Set[type] = set()
    covered: Set[type] = set()
    pending: List[Any] = [value]

    while pending:
        item = pending.pop()
        cls = type(item)
        if cls not in covered:
            covered.add(cls)
            found.update(reachable_shape_types(cls, registry))
        pending.extend(registry.children(item))

    return frozenset(found)


def reachable_types(value: Any,
                    hint: Optional[Any] = None,
                    registry: Optional[AdapterRegistry] = None) -> FrozenSet[type]:
    """Return every runtime class that could occur inside ``value``.

    This is the union of what the value actually holds (see
    ``instance_types``) and, when ``hint`` is given, everything the
    declared shape could hold. A type that occurs is therefore always
    reachable, and a hint can only widen the result.

    Args:
        value: The value about to be traversed
        hint: Explicit shape for ``value``
        registry: Adapters used for traversal and probing

    Returns:
        Frozen set of runtime classes
    """
    registry = _resolve_registry(registry)
    found = instance_types(value, registry)
    if hint is not None:
        found |= reachable_shape_types(hint, registry)
    return found


def missing_types(rules: Any,
                  value: Any,
                  hint: Optional[Any] = None,
                  registry: Optional[AdapterRegistry] = None) -> FrozenSet[type]:
    """Rule targets that can never occur inside ``value``."""
    needed = needed_types(rules)
    if not needed:
        return frozenset()
    return needed - reachable_types(value, hint, registry)


# Nesting shown in a TypeMismatchError before containers are abbreviated
_DESCRIBE_DEPTH = 8


def check_presence(rules: Any,
                   value: Any,
                   hint: Optional[Any] = None,
                   registry: Optional[AdapterRegistry] = None) -> None:
    """Fail fast if any rule could never apply to ``value``.

    Raises:
        TypeMismatchError: Naming the value's shape and the missing types
    """
    missing = missing_types(rules, value, hint, registry)
    if missing:
        if hint is None:
            hint = infer_hint(value, max_depth=_DESCRIBE_DEPTH)
        raise TypeMismatchError(hint, missing)
