"""Asynchronous implementation of DazzleTransform.

Rules may be coroutine functions. Their effects are awaited one after
another in traversal order; the rewrite itself never runs anything
concurrently.
"""

# Rules
from .._common.rules import Rule, EffectRule, RuleChain, wrap, wrap_effect, chain_of

# Core abstractions
from .core import AsyncBottomUpRewriter, AsyncSubtermCollector

# Planning
from .planning import AsyncTransformPlan

# Configuration (re-exported from _common)
from .config import TransformConfig

# Errors
from .._common.errors import (
    TransformError,
    TypeMismatchError,
    ConstructionFailureError,
    TransformConfigError,
    NodeLimitExceededError,
)

# High-level API
from .api import (
    rewrite_effectful,
    rewrite_effectful_unchecked,
    collect_all_with_async,
)

__all__ = [
    # Rules
    'Rule',
    'EffectRule',
    'RuleChain',
    'wrap',
    'wrap_effect',
    'chain_of',
    # Core
    'AsyncBottomUpRewriter',
    'AsyncSubtermCollector',
    # Planning
    'AsyncTransformPlan',
    # Configuration
    'TransformConfig',
    # Errors
    'TransformError',
    'TypeMismatchError',
    'ConstructionFailureError',
    'TransformConfigError',
    'NodeLimitExceededError',
    # High-level API
    'rewrite_effectful',
    'rewrite_effectful_unchecked',
    'collect_all_with_async',
]
