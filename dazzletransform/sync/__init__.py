"""Synchronous implementation of DazzleTransform.

Rules are plain functions and the whole rewrite runs as one blocking,
depth-first walk.
"""

# Rules
from .._common.rules import Rule, RuleChain, wrap, chain_of

# Structural access
from .._common.adapter import StructureAdapter, AdapterRegistry
from ..adapters import default_registry

# Core components
from .core.traverser import BottomUpRewriter
from .core.collector import SubtermCollector

# Configuration and planning
from .config import TransformConfig
from .planning import TransformPlan

# Errors
from .._common.errors import (
    TransformError,
    TypeMismatchError,
    ConstructionFailureError,
    TransformConfigError,
    NodeLimitExceededError,
)

# Type presence
from .._common.presence import (
    needed_types,
    reachable_types,
    instance_types,
    missing_types,
    check_presence,
)

# High-level API
from .api import (
    rewrite,
    rewrite_unchecked,
    collect_all,
    collect_all_by,
    collect_all_map,
    collect_all_with,
)

__all__ = [
    # Rules
    'Rule',
    'RuleChain',
    'wrap',
    'chain_of',
    # Structural access
    'StructureAdapter',
    'AdapterRegistry',
    'default_registry',
    # Core
    'BottomUpRewriter',
    'SubtermCollector',
    # Config
    'TransformConfig',
    'TransformPlan',
    # Errors
    'TransformError',
    'TypeMismatchError',
    'ConstructionFailureError',
    'TransformConfigError',
    'NodeLimitExceededError',
    # Type presence
    'needed_types',
    'reachable_types',
    'instance_types',
    'missing_types',
    'check_presence',
    # API
    'rewrite',
    'rewrite_unchecked',
    'collect_all',
    'collect_all_by',
    'collect_all_map',
    'collect_all_with',
]
