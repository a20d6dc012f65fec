"""Configuration re-export for the synchronous implementation.

This module re-exports configuration components from the _common
package so both implementations share one definition.
"""

from .._common.config import TransformConfig

__all__ = [
    'TransformConfig',
]
