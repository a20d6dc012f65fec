"""Testing utilities for DazzleTransform consumers."""

from .fixtures import EffectRecorder

__all__ = ['EffectRecorder']
