"""Core rewriting components for the synchronous implementation."""

from .traverser import BottomUpRewriter
from .collector import SubtermCollector

__all__ = [
    'BottomUpRewriter',
    'SubtermCollector',
]
