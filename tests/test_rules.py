"""Tests for rules and rule chains."""

import pytest

from dazzletransform.sync import Rule, RuleChain, wrap, chain_of, needed_types
from dazzletransform.aio import EffectRule, wrap_effect


def double(x: int) -> int:
    return x * 2


def shout(s: str) -> str:
    return s.upper()


async def async_inc(x: int) -> int:
    return x + 1


# Tests for Rule

def test_wrap_builds_pure_rule():
    """wrap() pairs a target class with a function."""
    rule = wrap(int, double)

    assert isinstance(rule, Rule)
    assert not isinstance(rule, EffectRule)
    assert rule.target is int
    assert rule(21) == 42
    assert rule.label == 'double'


def test_rule_matches_exact_runtime_type():
    """A rule on int must not fire for bool, even though bool subclasses int."""
    rule = wrap(int, double)

    assert rule.matches(3)
    assert not rule.matches(True)
    assert not rule.matches(3.0)


def test_wrap_coroutine_function_builds_effect_rule():
    """Coroutine functions are wrapped as EffectRule."""
    rule = wrap(int, async_inc)

    assert isinstance(rule, EffectRule)
    assert rule.effectful


def test_wrap_effect_accepts_plain_function():
    """wrap_effect always builds an EffectRule."""
    rule = wrap_effect(int, double, name="double-effect")

    assert isinstance(rule, EffectRule)
    assert rule.label == "double-effect"


@pytest.mark.asyncio
async def test_effect_rule_awaits_result():
    """EffectRule awaits coroutines and passes plain values through."""
    assert await wrap(int, async_inc)(1) == 2
    assert await wrap_effect(int, double)(2) == 4


def test_rule_target_must_be_class():
    """Targets are runtime classes, never names."""
    with pytest.raises(TypeError):
        wrap("int", double)

    with pytest.raises(TypeError):
        Rule(int, 42)


def test_rule_from_annotation():
    """Rule.from_function reads the target from the first parameter."""
    assert Rule.from_function(shout).target is str
    assert isinstance(Rule.from_function(async_inc), EffectRule)


def test_rule_from_unannotated_function_fails():
    """Unannotated functions need an explicit target."""
    with pytest.raises(TypeError, match="target"):
        Rule.from_function(lambda x: x)


def test_rule_repr_names_target_and_function():
    assert repr(wrap(int, double)) == "Rule(int, double)"


# Tests for chain_of

def test_chain_of_normalizes_mixed_items():
    """chain_of flattens rules, functions, pairs and nested lists in order."""
    r1 = wrap(int, double)
    r3 = wrap(float, lambda f: f / 2)

    chain = chain_of(r1, [shout, (bytes, bytes.upper)], RuleChain([r3]))

    assert [rule.target for rule in chain] == [int, str, bytes, float]
    assert chain[0] is r1
    assert chain[3] is r3


def test_chain_of_single_function():
    chain = chain_of(double)

    assert len(chain) == 1
    assert chain[0].target is int


def test_chain_of_rejects_non_callables():
    with pytest.raises(TypeError):
        chain_of(42)


def test_chain_of_empty_is_identity():
    assert len(chain_of()) == 0
    assert chain_of([]) == RuleChain()


# Tests for RuleChain

def test_concatenation_is_associative():
    a = chain_of(wrap(int, double))
    b = chain_of(shout)
    c = chain_of(wrap(int, lambda x: x - 1))

    assert (a + b) + c == a + (b + c)


def test_empty_chain_is_identity_element():
    a = chain_of(wrap(int, double), shout)

    assert RuleChain() + a == a
    assert a + RuleChain() == a


def test_chain_adds_plain_items():
    """Non-chain operands are normalized with chain_of."""
    r = wrap(int, double)
    chain = RuleChain() + [r, shout]

    assert list(chain) == [r, chain[1]]
    assert ([shout] + chain_of(r))[1] is r


def test_chain_slicing_returns_chain():
    chain = chain_of(double, shout, double)

    assert isinstance(chain[1:], RuleChain)
    assert len(chain[1:]) == 2


def test_chain_items_must_be_rules():
    with pytest.raises(TypeError):
        RuleChain([double])


def test_needed_types_collapses_duplicates():
    chain = chain_of(double, wrap(int, lambda x: x + 1), shout)

    assert chain.needed_types() == frozenset({int, str})
    assert needed_types([double, shout]) == frozenset({int, str})


def test_apply_folds_left_to_right():
    """Later rules see the output of earlier rules on the same node."""
    f = wrap(int, lambda x: x + 1)
    g = wrap(int, lambda x: x * 10)

    assert chain_of(f, g).apply(3) == 40
    assert chain_of(g, f).apply(3) == 31


def test_apply_skips_other_types():
    chain = chain_of(double)

    assert chain.apply("text") == "text"
    assert chain.apply(True) is True


def test_apply_reports_each_application():
    seen = []
    chain = chain_of(double, double)

    chain.apply(1, lambda rule, before, after: seen.append((before, after)))

    assert seen == [(1, 2), (2, 4)]


def test_apply_refuses_effect_rules():
    with pytest.raises(TypeError, match="aio"):
        chain_of(async_inc).apply(1)


def test_is_effectful():
    assert not chain_of(double).is_effectful
    assert chain_of(double, async_inc).is_effectful


@pytest.mark.asyncio
async def test_apply_async_mixes_pure_and_effect_rules():
    chain = chain_of(double, async_inc)

    assert await chain.apply_async(5) == 11
