"""Accumulator helpers shared by the sync and aio collectors."""

import copy
from typing import Any


def new_accumulator(empty: Any) -> Any:
    """Create the accumulator for one collect call.

    Args:
        empty: A factory such as ``list`` or ``int``, or an empty value.
            Values are shallow-copied, so an in-place ``combine`` never
            leaks results into the caller's object or into later calls.

    Returns:
        A fresh accumulator owned by the caller
    """
    if callable(empty):
        return empty()
    return copy.copy(empty)
