"""Structural adapters for DazzleTransform."""

from .builtins import (
    AtomAdapter,
    TupleAdapter,
    ListAdapter,
    DictAdapter,
    SetAdapter,
)
from .records import DataclassAdapter, NamedTupleAdapter
from .._common.adapter import AdapterRegistry


def default_registry() -> AdapterRegistry:
    """Create a registry with the builtin adapters.

    Order matters: named tuples must be claimed before plain tuples.
    Each call returns an independent registry, so registering a custom
    adapter never leaks into other callers.
    """
    return AdapterRegistry([
        AtomAdapter(),
        NamedTupleAdapter(),
        TupleAdapter(),
        ListAdapter(),
        DictAdapter(),
        SetAdapter(),
        DataclassAdapter(),
    ])


__all__ = [
    'AtomAdapter',
    'TupleAdapter',
    'ListAdapter',
    'DictAdapter',
    'SetAdapter',
    'DataclassAdapter',
    'NamedTupleAdapter',
    'default_registry',
]
