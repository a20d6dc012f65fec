"""Configuration re-export for the async implementation."""

from .._common.config import TransformConfig

__all__ = [
    'TransformConfig',
]
