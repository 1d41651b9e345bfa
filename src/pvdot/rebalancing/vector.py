"""Arithmetic over currency -> Decimal maps."""

from decimal import Decimal
from typing import Mapping

ZERO = Decimal(0)
ONE = Decimal(1)


def total(m: Mapping[str, Decimal]) -> Decimal:
    """Sum of all values. An empty map sums to 0."""
    return sum(m.values(), ZERO)


def normalize(m: Mapping[str, Decimal]) -> dict[str, Decimal]:
    """Scale values so they sum to 1.

    Returns ``m`` itself when it already sums to exactly 1. The caller must
    ensure the sum is non-zero.
    """
    s = total(m)
    if s == ONE:
        return m
    return {k: v / s for k, v in m.items()}


def elementwise_product(m1: Mapping[str, Decimal], m2: Mapping[str, Decimal]) -> dict[str, Decimal]:
    """Multiply values key by key.

    The result always has exactly the keys of ``m1``; a key missing from
    ``m2`` multiplies by 0 and keys only in ``m2`` are dropped.
    """
    return {k: v * m2.get(k, ZERO) for k, v in m1.items()}
