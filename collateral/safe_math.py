"""
safe_math.py - Checked fixed-width integer arithmetic

Python ints never overflow, so width limits have to be enforced explicitly.
Every helper here either returns an exact in-range result or raises; nothing
truncates or wraps.

Narrowing:
    to_uint128(), to_int128() - exact conversion to a fixed-width amount

Arithmetic:
    add_int256(), sub_int256() - signed accumulator updates
    mul_div() - wide multiply then floor divide (unsigned operands)
"""

from __future__ import annotations
from typing import Type

from .core import (
    INT128_MIN, INT128_MAX, INT256_MIN, INT256_MAX, UINT128_MAX, UINT256_MAX,
    AccumulatorOverflow, DivisionByZero, IntegerOverflow, NarrowingOverflow,
)


def to_uint128(value: int) -> int:
    """Narrow to uint128, raising NarrowingOverflow if out of range."""
    if value < 0 or value > UINT128_MAX:
        raise NarrowingOverflow(f"{value} does not fit in uint128")
    return value


def to_int128(value: int) -> int:
    """Narrow to int128, raising NarrowingOverflow if out of range."""
    if value < INT128_MIN or value > INT128_MAX:
        raise NarrowingOverflow(f"{value} does not fit in int128")
    return value


def check_int256(value: int, error: Type[IntegerOverflow] = AccumulatorOverflow) -> int:
    if value < INT256_MIN or value > INT256_MAX:
        raise error(f"{value} overflows int256")
    return value


def add_int256(a: int, b: int) -> int:
    return check_int256(a + b)


def sub_int256(a: int, b: int) -> int:
    return check_int256(a - b)


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    Compute a * b // denominator for unsigned operands.

    The product is formed at double width (uint256) before dividing, so no
    precision is lost to an early division.

    Raises:
        DivisionByZero: denominator is zero
        IntegerOverflow: the intermediate product exceeds uint256
    """
    if a < 0 or b < 0 or denominator < 0:
        raise ValueError("mul_div operands must be non-negative")
    if denominator == 0:
        raise DivisionByZero("division by zero")
    product = a * b
    if product > UINT256_MAX:
        raise IntegerOverflow(f"{a} * {b} overflows uint256")
    return product // denominator
