"""Contract tests ensuring sync and async implementations have identical behavior.

Pure rules must give the same result, in the same rule order, whether
they run through ``rewrite`` or ``rewrite_effectful``.
"""

import operator
from dataclasses import dataclass
from typing import Union

import pytest

from dazzletransform import aio, sync


@dataclass(frozen=True)
class Lit:
    value: int


@dataclass(frozen=True)
class Add:
    left: 'Expr'
    right: 'Expr'


Expr = Union[Lit, Add]


def fold_add(node: Add) -> Expr:
    if isinstance(node.left, Lit) and isinstance(node.right, Lit):
        return Lit(node.left.value + node.right.value)
    return node


CASES = [
    pytest.param([sync.wrap(int, lambda x: x + 1)], (1, 4.0, (False, [4, 5, 6])), id="nested-builtins"),
    pytest.param([sync.wrap(str, str.upper)], {"a": ["b", ("c",)]}, id="dict-keys"),
    pytest.param([sync.wrap(int, lambda x: x * 2), fold_add], Add(Lit(1), Add(Lit(2), Lit(3))), id="fold"),
    pytest.param([], [1, "two", 3.0], id="identity"),
]


@pytest.mark.parametrize("rules,value", CASES)
@pytest.mark.asyncio
async def test_rewrite_results_match(rules, value):
    assert sync.rewrite(rules, value) == await aio.rewrite_effectful(rules, value)


@pytest.mark.parametrize("rules,value", CASES)
@pytest.mark.asyncio
async def test_rule_application_order_matches(rules, value):
    sync_seen, async_seen = [], []

    sync.rewrite(rules, value, on_rule_applied=lambda r, b, a: sync_seen.append((r.label, b)))
    await aio.rewrite_effectful(rules, value, on_rule_applied=lambda r, b, a: async_seen.append((r.label, b)))

    assert sync_seen == async_seen


@pytest.mark.asyncio
async def test_presence_errors_match():
    rule = sync.wrap(bool, operator.not_)

    with pytest.raises(sync.TypeMismatchError) as sync_error:
        sync.rewrite(rule, (1, 2))
    with pytest.raises(aio.TypeMismatchError) as async_error:
        await aio.rewrite_effectful(rule, (1, 2))

    assert str(sync_error.value) == str(async_error.value)


@pytest.mark.asyncio
async def test_collectors_match():
    value = (3, 4.0, True, 'c', (False, (True, 5, 6)))

    def keep(x):
        return [x] if x < 6 else None

    assert sync.collect_all_with(int, keep, value) == await aio.collect_all_with_async(int, keep, value)
