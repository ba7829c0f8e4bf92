"""
Cross-product producer.

The source is materialized into a tuple of length n, and a linear cursor
walks the n * n cells of its cartesian square in row-major order. The mode
decides which cells become output pairs:

* FULL keeps every cell,
* NO_DOUBLES drops the diagonal (an element paired with itself),
* ORDERED keeps a cell only when its left element is strictly less than
  its right element under a comparator.

Splits hand off the first half of the remaining cells and share the tuple.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import TypeVar

from ._validation import require_not_none
from .functional import Comparator, Entry
from .protocols import Characteristic, Spliterator

T = TypeVar("T")

logger = logging.getLogger(__name__)


class CrossProductMode(Enum):
    FULL = "full"
    NO_DOUBLES = "no_doubles"
    ORDERED = "ordered"


class CrossProductSpliterator(Spliterator[Entry[T, T]]):
    """Spliterator over pairs from the cartesian square of a source."""

    def __init__(
        self,
        elements: tuple[T, ...],
        mode: CrossProductMode,
        comparator: Comparator[T] | None = None,
        start: int = 0,
        end: int | None = None,
        ordered: bool = True,
    ):
        """
        Create a cross-product spliterator over already materialized elements.

        Args:
            elements: The materialized source
            mode: Which cells of the square to emit
            comparator: Required for ORDERED mode, ignored otherwise
            start: First cell index (inclusive)
            end: Last cell index (exclusive), or None for n * n
            ordered: Whether the source had a meaningful encounter order
        """
        if mode is CrossProductMode.ORDERED:
            require_not_none(comparator, "comparator")
        self._elements = elements
        self._mode = mode
        self._comparator = comparator
        self._cursor = start
        self._end = end if end is not None else len(elements) ** 2
        self._ordered = ordered

    @classmethod
    def _materialize(
        cls,
        spliterator: Spliterator[T],
        mode: CrossProductMode,
        comparator: Comparator[T] | None = None,
    ) -> CrossProductSpliterator[T]:
        require_not_none(spliterator, "spliterator")
        if mode is CrossProductMode.ORDERED:
            require_not_none(comparator, "comparator")

        ordered = spliterator.has_characteristics(Characteristic.ORDERED)
        elements: list[T] = []
        spliterator.for_each_remaining(elements.append)
        logger.debug(
            "Cross product (%s) over %d materialized elements",
            mode.value,
            len(elements),
        )
        return cls(tuple(elements), mode, comparator, ordered=ordered)

    @classmethod
    def of(cls, spliterator: Spliterator[T]) -> CrossProductSpliterator[T]:
        """Every pair, self pairs included."""
        return cls._materialize(spliterator, CrossProductMode.FULL)

    @classmethod
    def no_doubles(cls, spliterator: Spliterator[T]) -> CrossProductSpliterator[T]:
        """Every pair except an element paired with itself."""
        return cls._materialize(spliterator, CrossProductMode.NO_DOUBLES)

    @classmethod
    def ordered(
        cls, spliterator: Spliterator[T], comparator: Comparator[T]
    ) -> CrossProductSpliterator[T]:
        """Only the pairs whose key compares strictly less than their value."""
        return cls._materialize(spliterator, CrossProductMode.ORDERED, comparator)

    def _accepts(self, i: int, j: int) -> bool:
        if self._mode is CrossProductMode.FULL:
            return True
        if self._mode is CrossProductMode.NO_DOUBLES:
            return i != j
        return self._comparator(self._elements[i], self._elements[j]) < 0

    def try_advance(self, action: Callable[[Entry[T, T]], object]) -> bool:
        n = len(self._elements)
        while self._cursor < self._end:
            i, j = divmod(self._cursor, n)
            self._cursor += 1
            if self._accepts(i, j):
                action(Entry(self._elements[i], self._elements[j]))
                return True
        return False

    def try_split(self) -> CrossProductSpliterator[T] | None:
        """Hand off the first half of the remaining cells."""
        mid = (self._cursor + self._end) // 2
        if mid <= self._cursor:
            return None

        prefix = CrossProductSpliterator(
            self._elements,
            self._mode,
            self._comparator,
            self._cursor,
            mid,
            self._ordered,
        )
        self._cursor = mid
        return prefix

    def estimate_size(self) -> int:
        remaining = self._end - self._cursor
        if self._mode is CrossProductMode.FULL:
            return remaining
        if self._mode is CrossProductMode.NO_DOUBLES:
            # Diagonal cells sit at multiples of n + 1.
            step = len(self._elements) + 1
            diagonal = -(-self._end // step) - -(-self._cursor // step)
            return remaining - diagonal
        return remaining // 2

    def characteristics(self) -> Characteristic:
        flags = Characteristic.IMMUTABLE
        if self._ordered:
            flags |= Characteristic.ORDERED
        if self._mode is not CrossProductMode.ORDERED:
            flags |= Characteristic.SIZED | Characteristic.SUBSIZED
        return flags
