"""
Accumulating producers.

Each output element is the running fold of the source up to that position:
the first element as is, then ``operator(previous_result, element)``. The
entry variant folds only the values of key/value pairs and passes keys
through unchanged.

Splitting hands the prefix to a new producer with its own, empty
accumulator. A split therefore restarts the fold from its own first
element instead of continuing the parent's prefix. Parallel consumption of
a split accumulation gives per-split running folds, not the sequential
result.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Self, TypeVar

from ._validation import require_not_none, require_ordered
from .functional import BinaryOperator, Entry
from .protocols import Characteristic, Spliterator

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")

_EMPTY: Any = object()


class AccumulatingSpliterator(Spliterator[T]):
    """Spliterator emitting the running fold of an ORDERED source."""

    def __init__(self, spliterator: Spliterator[T], operator: BinaryOperator[T]):
        self.spliterator = spliterator
        self.operator = operator
        self._accumulator = _EMPTY

    @classmethod
    def of(cls, spliterator: Spliterator[T], operator: BinaryOperator[T]) -> Self:
        """
        Wrap ``spliterator`` in a running fold with ``operator``.

        Raises:
            TypeError: If ``spliterator`` or ``operator`` is None
            ValueError: If ``spliterator`` is not ORDERED
        """
        require_not_none(spliterator, "spliterator")
        require_not_none(operator, "operator")
        require_ordered(spliterator, "accumulate")
        return cls(spliterator, operator)

    def _fold(self, value: Any) -> Any:
        if self._accumulator is _EMPTY:
            self._accumulator = value
        else:
            self._accumulator = self.operator(self._accumulator, value)
        return self._accumulator

    def _accumulate(self, element: Any) -> Any:
        return self._fold(element)

    def try_advance(self, action: Callable[[T], object]) -> bool:
        return self.spliterator.try_advance(
            lambda element: action(self._accumulate(element))
        )

    def try_split(self) -> Self | None:
        prefix = self.spliterator.try_split()
        return None if prefix is None else type(self)(prefix, self.operator)

    def estimate_size(self) -> int:
        return self.spliterator.estimate_size()

    def characteristics(self) -> Characteristic:
        return self.spliterator.characteristics()


class AccumulatingEntriesSpliterator(AccumulatingSpliterator[Entry[K, V]]):
    """
    Spliterator folding the values of a stream of key/value pairs.

    The i-th output keeps the i-th key and carries the fold of the first i
    values.
    """

    def __init__(
        self, spliterator: Spliterator[tuple[K, V]], operator: BinaryOperator[V]
    ):
        super().__init__(spliterator, operator)

    def _accumulate(self, element: tuple[K, V]) -> Entry[K, V]:
        key, value = element
        return Entry(key, self._fold(value))
