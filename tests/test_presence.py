"""Tests for the type presence check.

Reachability combines the type graph of a value's shape with the
classes the value actually holds.
"""

import collections
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar, Union

import pytest

from dazzletransform.sync import (
    AdapterRegistry,
    ConstructionFailureError,
    StructureAdapter,
    TypeMismatchError,
    check_presence,
    default_registry,
    instance_types,
    missing_types,
    reachable_types,
    wrap,
)
from dazzletransform._common.presence import reachable_shape_types


# Expression language used as a recursive sum type

@dataclass(frozen=True)
class Lit:
    value: int


@dataclass(frozen=True)
class Add:
    left: 'Expr'
    right: 'Expr'


@dataclass(frozen=True)
class Neg:
    operand: 'Expr'


Expr = Union[Lit, Add, Neg]


# Class family: variants are the dataclass subclasses

@dataclass
class Shape:
    pass


@dataclass
class Circle(Shape):
    radius: float


@dataclass
class Square(Shape):
    side: float


@dataclass
class Drawing:
    shapes: List[Shape]


@dataclass
class Node:
    value: int
    next: Optional['Node'] = None


T = TypeVar('T')


@dataclass
class Box(Generic[T]):
    item: T


@dataclass
class Broken:
    child: 'DoesNotExist'  # noqa: F821


@dataclass
class Pet(ABC):
    name: str

    @abstractmethod
    def speak(self) -> str:
        pass


# Records whose field shapes say nothing about their contents

Pair = collections.namedtuple("Pair", "x y")


@dataclass
class Holder:
    payload: Any


@dataclass
class Bag:
    items: list


POST_INIT_CALLS = []


@dataclass
class Tracked:
    value: int
    tags: List[str] = field(default_factory=list)

    def __post_init__(self):
        POST_INIT_CALLS.append(self.value)


# Tests for reachable_types

def test_reachable_types_of_nested_builtins():
    """Every class a nested builtin value is built from is reachable."""
    value = (3, 4.0, (True, [4, 5, 6]))

    assert reachable_types(value) == frozenset({tuple, int, float, bool, list})


def test_reachable_types_of_atoms():
    assert reachable_types(5) == frozenset({int})
    assert reachable_types(True) == frozenset({bool})
    assert reachable_types("abc") == frozenset({str})


def test_empty_list_has_no_element_type():
    """An empty list gives no evidence about its items."""
    assert reachable_types([]) == frozenset({list})
    assert reachable_types([], List[int]) == frozenset({list, int})


def test_recursive_union_terminates():
    assert reachable_shape_types(Expr) == frozenset({Lit, Add, Neg, int})


def test_variant_reachable_even_when_absent():
    """A Neg rule is acceptable on a tree that happens to contain no Neg."""
    reachable = reachable_types(Add(Lit(1), Lit(2)))

    assert Neg in reachable


def test_root_shape_is_the_value_class():
    """Without a hint, a Lit root is just a Lit, not any Expr."""
    assert reachable_types(Lit(1)) == frozenset({Lit, int})
    assert Neg in reachable_types(Lit(1), Expr)


def test_class_family_variants_are_reachable():
    assert reachable_shape_types(Drawing) == frozenset(
        {Drawing, list, Shape, Circle, Square, float}
    )


def test_optional_field_and_self_reference():
    assert reachable_shape_types(Node) == frozenset({Node, int, type(None)})
    assert reachable_shape_types(Optional[int]) == frozenset({int, type(None)})


def test_dict_and_variadic_tuple_shapes():
    assert reachable_shape_types(Dict[str, List[float]]) == frozenset({dict, str, list, float})
    assert reachable_shape_types(Tuple[int, ...]) == frozenset({tuple, int})


def test_any_and_opaque_classes_reach_nothing_further():
    assert reachable_shape_types(List[Any]) == frozenset({list})
    assert reachable_shape_types(datetime) == frozenset({datetime})


def test_generic_dataclass_arguments():
    assert reachable_shape_types(Box[int]) == frozenset({Box, int})
    assert reachable_shape_types(Box) == frozenset({Box})


def test_bool_is_distinct_from_int():
    assert int not in reachable_types((True, False))
    assert bool not in reachable_types((1, 2))


def test_probes_do_not_run_post_init():
    """Probing builds placeholder instances without calling user hooks."""
    POST_INIT_CALLS.clear()

    reachable = reachable_shape_types(Tracked)

    assert reachable == frozenset({Tracked, int, list, str})
    assert POST_INIT_CALLS == []


def test_unresolvable_annotation_raises_construction_failure():
    with pytest.raises(ConstructionFailureError) as exc_info:
        reachable_shape_types(Broken)

    assert exc_info.value.hint is Broken


def test_abstract_family_without_variants_raises_construction_failure():
    with pytest.raises(ConstructionFailureError, match="no concrete dataclass variant"):
        reachable_shape_types(Pet)


def test_adapter_errors_while_probing_become_construction_failures():

    class Opaque:
        pass

    class FailingAdapter(StructureAdapter):
        def accepts(self, cls):
            return cls is Opaque

        def children(self, value):
            return []

        def rebuild(self, value, children):
            return value

        def probe_constructors(self, hint):
            raise RuntimeError("no probe")

    registry = default_registry().register(FailingAdapter())

    with pytest.raises(ConstructionFailureError) as exc_info:
        reachable_shape_types(List[Opaque], registry)

    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_empty_registry_knows_only_the_root_class():
    assert reachable_shape_types(List[int], AdapterRegistry()) == frozenset({list})


# Tests for missing_types / check_presence

def test_missing_types():
    to_bool = wrap(bool, lambda b: not b)
    to_int = wrap(int, lambda x: x + 1)

    assert missing_types([to_bool, to_int], 5) == frozenset({bool})
    assert missing_types([to_int], (1, 2)) == frozenset()


def test_missing_types_with_no_rules():
    assert missing_types([], object()) == frozenset()


def test_check_presence_passes_when_all_reachable():
    check_presence([wrap(int, abs), wrap(Neg, lambda n: n)], Add(Lit(1), Lit(-2)))


def test_check_presence_reports_value_shape_and_missing_types():
    rules = [wrap(bool, lambda b: not b), wrap(str, str.upper)]

    with pytest.raises(TypeMismatchError) as exc_info:
        check_presence(rules, 5)

    error = exc_info.value
    assert error.value_type is int
    assert error.missing_types == (bool, str)
    assert str(error) == (
        "Could not find all needed types when rewriting a value of type int. "
        "Types of missing terms: [bool, str]"
    )


# Tests for values held under opaque shapes

def test_untyped_named_tuple_fields_use_their_contents():
    assert reachable_shape_types(Pair) == frozenset({Pair})
    assert reachable_types(Pair(1, 2.0)) == frozenset({Pair, int, float})


def test_any_field_uses_the_shape_of_its_content():
    """The closure of a held Add still reaches Neg."""
    assert reachable_types(Holder(Add(Lit(1), Lit(2)))) == frozenset(
        {Holder, Add, Lit, Neg, int}
    )


def test_bare_list_annotation_uses_its_items():
    assert reachable_types(Bag([1, "a"])) == frozenset({Bag, list, int, str})


def test_hint_only_widens_reachable_types():
    held = reachable_types(Holder(3))

    assert held == frozenset({Holder, int})
    assert reachable_types(Holder(3), Holder) == held
    assert reachable_types(Lit(1), Expr) >= reachable_types(Lit(1))


def test_instance_types_without_hint_match_reachable_types():
    value = (Pair(1, "a"), [Holder(2.0)])

    assert instance_types(value) == reachable_types(value)


def test_present_type_is_never_missing():
    to_int = wrap(int, lambda x: x + 1)

    assert missing_types(to_int, Pair(1, 2)) == frozenset()
    assert missing_types(to_int, Holder(3)) == frozenset()
    check_presence(to_int, Bag([4]))


def test_deep_values_are_walked_without_recursion():
    nested = [1]
    for _ in range(3000):
        nested = [nested]

    assert reachable_types(nested) == frozenset({list, int})
