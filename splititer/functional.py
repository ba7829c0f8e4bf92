"""
Small functional building blocks shared by the producers.

Comparators follow the three-way convention: negative when the first
argument sorts before the second, zero when they are equivalent, positive
otherwise.
"""

from collections.abc import Callable
from typing import Any, Generic, NamedTuple, TypeVar

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")

Comparator = Callable[[T, T], int]
BinaryOperator = Callable[[T, T], T]


class Entry(NamedTuple, Generic[K, V]):
    """A key/value pair produced by the pairing and entry operators."""

    key: K
    value: V


def natural_order(left: Any, right: Any) -> int:
    """Compare two values by their own ``<`` and ``>`` operators."""
    return (left > right) - (left < right)


def reverse_order(comparator: Comparator[T] = natural_order) -> Comparator[T]:
    """Return a comparator imposing the reverse of ``comparator``."""

    def reversed_comparator(left: T, right: T) -> int:
        return comparator(right, left)

    return reversed_comparator


def comparing(key: Callable[[T], Any]) -> Comparator[T]:
    """
    Build a comparator from a key function.

    Args:
        key: Function extracting a naturally ordered sort key

    Returns:
        A comparator ordering elements by their keys
    """

    def key_comparator(left: T, right: T) -> int:
        return natural_order(key(left), key(right))

    return key_comparator
