"""Common components shared between sync and aio implementations.

This internal package contains code that is identical between both
implementations. It should NOT be imported directly by users.

Components here include:
- Configuration (TransformConfig)
- Rules and rule chains
- The StructureAdapter base class and AdapterRegistry
- Type hint helpers and the type presence checker
- Exceptions

Important: This package must NEVER import from sync or aio to avoid
circular dependencies.
"""

from .config import TransformConfig
from .errors import (
    TransformError,
    TypeMismatchError,
    ConstructionFailureError,
    TransformConfigError,
    NodeLimitExceededError,
)
from .hints import Placeholder, infer_hint, describe_hint
from .rules import Rule, EffectRule, RuleChain, wrap, wrap_effect, chain_of
from .adapter import StructureAdapter, AdapterRegistry
from .presence import (
    needed_types,
    reachable_types,
    instance_types,
    reachable_shape_types,
    missing_types,
    check_presence,
)

__all__ = [
    'TransformConfig',
    'TransformError',
    'TypeMismatchError',
    'ConstructionFailureError',
    'TransformConfigError',
    'NodeLimitExceededError',
    'Placeholder',
    'infer_hint',
    'describe_hint',
    'Rule',
    'EffectRule',
    'RuleChain',
    'wrap',
    'wrap_effect',
    'chain_of',
    'StructureAdapter',
    'AdapterRegistry',
    'needed_types',
    'reachable_types',
    'instance_types',
    'reachable_shape_types',
    'missing_types',
    'check_presence',
]
