"""Rules and rule chains for DazzleTransform.

A Rule pairs a target class with a unary function. Rules are matched by
exact runtime type (``type(value) is rule.target``), so a rule on ``int``
never fires for ``True``. A RuleChain is an immutable ordered sequence of
rules: when several rules match the same node they run left to right,
each one seeing the previous one's output.
"""

import inspect
import typing
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, FrozenSet, Iterable, Iterator, Optional, Tuple

from .hints import describe_hint, runtime_class

# Called as observer(rule, before, after) every time a rule fires
RuleObserver = Callable[['Rule', Any, Any], None]


def _annotated_target(func: Callable) -> type:
    """Read the target class from the first parameter's annotation."""
    try:
        params = list(inspect.signature(func).parameters.values())
    except (TypeError, ValueError):
        params = []
    if not params:
        raise TypeError(f"Cannot infer a target type for {func!r}: it takes no parameters")

    try:
        hints = typing.get_type_hints(func)
    except Exception:
        hints = {}
    annotation = hints.get(params[0].name, params[0].annotation)
    target = runtime_class(annotation) if annotation is not inspect.Parameter.empty else None
    if target is None:
        raise TypeError(
            f"Cannot infer a target type for {func!r}: annotate its first "
            f"parameter or pass the target explicitly"
        )
    return target


@dataclass(frozen=True)
class Rule:
    """Pure rule rewriting values whose runtime type is exactly ``target``.

    The function should return a value of the same type; the rewriter does
    not enforce this, but later rules in the chain only fire if the result
    still matches their own target.
    """

    target: type
    func: Callable[[Any], Any]
    name: Optional[str] = None

    effectful: ClassVar[bool] = False

    def __post_init__(self):
        if not isinstance(self.target, type):
            raise TypeError(f"Rule target must be a class, got {self.target!r}")
        if not callable(self.func):
            raise TypeError(f"Rule function must be callable, got {self.func!r}")

    @classmethod
    def from_function(cls, func: Callable) -> 'Rule':
        """Build a rule whose target comes from ``func``'s annotation.

        Coroutine functions produce an EffectRule.
        """
        target = _annotated_target(func)
        if inspect.iscoroutinefunction(func):
            return EffectRule(target, func)
        return Rule(target, func)

    @property
    def label(self) -> str:
        """Display name: explicit name, else the function's qualified name."""
        return self.name or getattr(self.func, '__qualname__', repr(self.func))

    def matches(self, value: Any) -> bool:
        return type(value) is self.target

    def __call__(self, value: Any) -> Any:
        return self.func(value)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({describe_hint(self.target)}, {self.label})"


@dataclass(frozen=True, repr=False)
class EffectRule(Rule):
    """Rule whose function performs effects and is awaited.

    The function may be a coroutine function or return any awaitable; a
    plain return value is accepted as-is.
    """

    effectful: ClassVar[bool] = True

    async def __call__(self, value: Any) -> Any:
        result = self.func(value)
        if inspect.isawaitable(result):
            result = await result
        return result


def wrap(target: type, func: Callable[[Any], Any], name: Optional[str] = None) -> Rule:
    """Wrap a unary function as a Rule for ``target``.

    Coroutine functions are wrapped as EffectRule.

    Example:
        >>> double = wrap(int, lambda x: x * 2)
        >>> rewrite(double, (3, 4))
        (6, 8)
    """
    if inspect.iscoroutinefunction(func):
        return EffectRule(target, func, name)
    return Rule(target, func, name)


def wrap_effect(target: type, func: Callable[[Any], Any], name: Optional[str] = None) -> EffectRule:
    """Wrap a function as an EffectRule, even if it is not a coroutine function."""
    return EffectRule(target, func, name)


class RuleChain:
    """Immutable, ordered sequence of rules.

    Chains concatenate with ``+``; ``RuleChain()`` is the identity.
    """

    __slots__ = ('_rules',)

    def __init__(self, rules: Iterable[Rule] = ()):
        rules = tuple(rules)
        for rule in rules:
            if not isinstance(rule, Rule):
                raise TypeError(f"RuleChain items must be Rule instances, got {rule!r}")
        self._rules: Tuple[Rule, ...] = rules

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return RuleChain(self._rules[index])
        return self._rules[index]

    def __add__(self, other: Any) -> 'RuleChain':
        if not isinstance(other, RuleChain):
            other = chain_of(other)
        return RuleChain(self._rules + other._rules)

    def __radd__(self, other: Any) -> 'RuleChain':
        return chain_of(other) + self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RuleChain):
            return NotImplemented
        return self._rules == other._rules

    def __hash__(self) -> int:
        return hash(self._rules)

    def __repr__(self) -> str:
        return f"RuleChain({list(self._rules)!r})"

    @property
    def is_effectful(self) -> bool:
        """True if any rule in the chain must be awaited."""
        return any(rule.effectful for rule in self._rules)

    def needed_types(self) -> FrozenSet[type]:
        """Target class of every rule, duplicates collapsed."""
        return frozenset(rule.target for rule in self._rules)

    def apply(self, value: Any, observer: Optional[RuleObserver] = None) -> Any:
        """Fold every matching rule over ``value`` in chain order.

        Only this node is rewritten; children are the rewriter's job.

        Raises:
            TypeError: If a matching rule is an EffectRule
        """
        for rule in self._rules:
            if not rule.matches(value):
                continue
            if rule.effectful:
                raise TypeError(
                    f"{rule!r} must be awaited; use the dazzletransform.aio API"
                )
            result = rule(value)
            if observer is not None:
                observer(rule, value, result)
            value = result
        return value

    async def apply_async(self, value: Any, observer: Optional[RuleObserver] = None) -> Any:
        """Async version of apply; effect rules are awaited one at a time."""
        for rule in self._rules:
            if not rule.matches(value):
                continue
            result = rule(value)
            if rule.effectful:
                result = await result
            if observer is not None:
                observer(rule, value, result)
            value = result
        return value


def _to_rules(item: Any) -> Iterator[Rule]:
    if isinstance(item, Rule):
        yield item
    elif isinstance(item, RuleChain):
        yield from item
    elif (isinstance(item, tuple) and len(item) == 2
          and isinstance(item[0], type) and callable(item[1])):
        # (target, func) pair
        yield wrap(item[0], item[1])
    elif isinstance(item, (list, tuple)):
        for sub in item:
            yield from _to_rules(sub)
    elif callable(item):
        yield Rule.from_function(item)
    else:
        raise TypeError(f"Cannot build a rule from {item!r}")


def chain_of(*items: Any) -> RuleChain:
    """Normalize rules, functions, pairs and (nested) lists into one chain.

    Accepted items:
    - Rule / EffectRule instances
    - RuleChain instances
    - ``(target, func)`` pairs
    - functions whose first parameter is annotated with the target class
    - lists or tuples of any of the above

    Order is preserved, so ``chain_of(a, b) == chain_of(a) + chain_of(b)``.

    Raises:
        TypeError: If an item cannot be turned into a rule
    """
    rules = []
    for item in items:
        rules.extend(_to_rules(item))
    return RuleChain(rules)
