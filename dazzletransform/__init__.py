"""DazzleTransform - Generic Bottom-Up Rewriting Library.

DazzleTransform rewrites every sub-value of an arbitrarily nested value
whose type matches one of a set of rules, children before parents, and
collects sub-values of a given type.

Choose your implementation:
━━━━━━━━━━━━━━━━━━━━━━━━━━
Synchronous (pure rules):
    from dazzletransform.sync import rewrite, collect_all

Asynchronous (effectful rules):
    from dazzletransform.aio import rewrite_effectful
━━━━━━━━━━━━━━━━━━━━━━━━━━

Both implementations share rules, adapters and the type presence check.
"""

__version__ = "0.1.0"

# Re-export submodules for convenient access
from . import sync
from . import aio

# Users must explicitly choose their implementation
__all__ = [
    "__version__",
    "sync",
    "aio",
]
