#!/usr/bin/env python3
"""
Constant folding over a small expression language.

This example demonstrates:
- Rewriting a dataclass tree bottom-up with pure rules
- The type presence check rejecting a rule that can never fire
- Effectful rules awaited in traversal order
- Collecting sub-values
"""

import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Union

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from dazzletransform.sync import TypeMismatchError, collect_all, rewrite, wrap
from dazzletransform.aio import rewrite_effectful


@dataclass(frozen=True)
class Lit:
    value: int


@dataclass(frozen=True)
class Var:
    name: str


@dataclass(frozen=True)
class Add:
    left: 'Expr'
    right: 'Expr'


@dataclass(frozen=True)
class Mul:
    left: 'Expr'
    right: 'Expr'


Expr = Union[Lit, Var, Add, Mul]


def fold_add(node: Add) -> Expr:
    """Add two literals, and drop additions of zero."""
    left, right = node.left, node.right
    if isinstance(left, Lit) and isinstance(right, Lit):
        return Lit(left.value + right.value)
    if left == Lit(0):
        return right
    if right == Lit(0):
        return left
    return node


def fold_mul(node: Mul) -> Expr:
    """Multiply two literals, and simplify multiplications by zero or one."""
    left, right = node.left, node.right
    if isinstance(left, Lit) and isinstance(right, Lit):
        return Lit(left.value * right.value)
    if Lit(0) in (left, right):
        return Lit(0)
    if left == Lit(1):
        return right
    if right == Lit(1):
        return left
    return node


ENVIRONMENT = {"x": 4, "y": 10}


async def lookup(var: Var) -> Expr:
    """Resolve a variable; stands in for a remote lookup."""
    await asyncio.sleep(0.01)
    print(f"   looked up {var.name}")
    return Lit(ENVIRONMENT[var.name]) if var.name in ENVIRONMENT else var


def main():
    # (x * (2 + 3)) + (0 * y)
    expr = Add(Mul(Var("x"), Add(Lit(2), Lit(3))), Mul(Lit(0), Var("y")))

    print("DazzleTransform - Expression Folding")
    print("=" * 60)
    print(f"Input:  {expr}")

    print("\n1. Pure folding:")
    folded = rewrite([fold_add, fold_mul], expr)
    print(f"   {folded}")

    print("\n2. Variables in the input:")
    print(f"   {[v.name for v in collect_all(Var, expr)]}")

    print("\n3. Rule that can never fire:")
    try:
        rewrite(wrap(float, lambda f: f * 2), expr)
    except TypeMismatchError as e:
        print(f"   {e}")

    print("\n4. Effectful lookup, then folding:")
    resolved = asyncio.run(rewrite_effectful([lookup, fold_add, fold_mul], expr))
    print(f"   {resolved}")


if __name__ == "__main__":
    main()
