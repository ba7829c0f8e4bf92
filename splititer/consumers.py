"""
Consumer implementations for stream terminal operations.

Consumers drain the pieces of a split spliterator and combine the results
of neighbouring pieces, left before right.
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from typing import Any, TypeVar

from .protocols import Spliterator

T = TypeVar("T")
A = TypeVar("A")


class CollectConsumer[T]:
    """Consumer that collects all elements into a list."""

    def consume(self, spliterator: Spliterator[T]) -> list[T]:
        collected: list[T] = []
        spliterator.for_each_remaining(collected.append)
        return collected

    def split(self) -> tuple[CollectConsumer[T], CollectConsumer[T]]:
        return (self, self)

    def reduce(self, left: list[T], right: list[T]) -> list[T]:
        """Concatenate two pieces, keeping left first."""
        left.extend(right)
        return left


class FoldConsumer[T, A]:
    """
    Consumer folding each piece into its own accumulator.

    Every piece starts from ``identity()`` and feeds its elements through
    ``accumulate``. Neighbouring results are merged with ``combine``. The
    consumer holds no state of its own, so splitting returns it twice.

    Args:
        identity: Creates the starting accumulator of a piece
        accumulate: Folds one element into an accumulator
        combine: Merges the results of a left and a right piece
    """

    def __init__(
        self,
        identity: Callable[[], A],
        accumulate: Callable[[A, T], A],
        combine: Callable[[A, A], A],
    ):
        self.identity = identity
        self.accumulate = accumulate
        self.combine = combine

    def consume(self, spliterator: Spliterator[T]) -> A:
        result = self.identity()

        def step(element: T) -> None:
            nonlocal result
            result = self.accumulate(result, element)

        spliterator.for_each_remaining(step)
        return result

    def split(self) -> tuple[FoldConsumer[T, A], FoldConsumer[T, A]]:
        return (self, self)

    def reduce(self, left: A, right: A) -> A:
        return self.combine(left, right)


def for_each_consumer(func: Callable[[Any], object]) -> FoldConsumer[Any, None]:
    """Fold calling ``func`` on every element and producing nothing."""

    def call(_: None, element: Any) -> None:
        func(element)

    return FoldConsumer(lambda: None, call, lambda left, right: None)


class CountConsumer(FoldConsumer[Any, int]):
    """
    Fold counting elements.

    A SIZED piece already knows how many elements it holds, so it is
    answered from ``estimate_size`` without being traversed. Callables
    further up a SIZED pipeline, ``map`` for example, do not run then.
    """

    def __init__(self):
        super().__init__(int, lambda count, _: count + 1, operator.add)

    def consume(self, spliterator: Spliterator[Any]) -> int:
        size = spliterator.get_exact_size_if_known()
        if size >= 0:
            return size
        return super().consume(spliterator)
