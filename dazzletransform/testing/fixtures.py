"""Test fixtures for DazzleTransform consumers.

These helpers make traversal order observable in tests without having
to hand-write logging rules.
"""

import asyncio
from typing import Any, Callable, List, Optional, Tuple

from .._common.rules import EffectRule, Rule, wrap, wrap_effect


class EffectRecorder:
    """Builds rules that record every value they see, in order.

    Example:
        recorder = EffectRecorder()
        await rewrite_effectful(
            [recorder.effect(int, label="f"), recorder.effect(int, label="g")],
            (1, 2),
        )
        assert recorder.entries == [("f", 1), ("g", 1), ("f", 2), ("g", 2)]
    """

    def __init__(self):
        self.entries: List[Tuple[str, Any]] = []

    def _record(self, label: str, value: Any, func: Optional[Callable[[Any], Any]]) -> Any:
        self.entries.append((label, value))
        return func(value) if func is not None else value

    def rule(self,
             target: type,
             func: Optional[Callable[[Any], Any]] = None,
             label: Optional[str] = None) -> Rule:
        """Pure rule that records, then applies ``func`` (identity if None)."""
        label = label or target.__qualname__
        return wrap(target, lambda value: self._record(label, value, func), name=label)

    def effect(self,
               target: type,
               func: Optional[Callable[[Any], Any]] = None,
               label: Optional[str] = None) -> EffectRule:
        """Effect rule that yields to the event loop, records, then applies ``func``."""
        label = label or target.__qualname__

        async def record(value: Any) -> Any:
            # Give other tasks a chance to interleave
            await asyncio.sleep(0)
            return self._record(label, value, func)

        return wrap_effect(target, record, name=label)

    @property
    def labels(self) -> List[str]:
        return [label for label, _ in self.entries]

    @property
    def values(self) -> List[Any]:
        return [value for _, value in self.entries]

    def clear(self) -> None:
        self.entries.clear()
