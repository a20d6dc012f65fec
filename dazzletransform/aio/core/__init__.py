"""Core async rewriting components."""

from .traverser import AsyncBottomUpRewriter
from .collector import AsyncSubtermCollector

__all__ = [
    'AsyncBottomUpRewriter',
    'AsyncSubtermCollector',
]
