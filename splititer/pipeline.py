"""
Wrapper spliterators behind the intermediate Stream operations.

Mapping and filtering keep the source's ability to split. Flattening only
splits between inner batches, and limiting never splits.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

from .producers import IteratorSpliterator
from .protocols import UNBOUNDED, Characteristic, Spliterator

T = TypeVar("T")
U = TypeVar("U")

_SIZE_FLAGS = Characteristic.SIZED | Characteristic.SUBSIZED


class MappingSpliterator[T, U](Spliterator[U]):
    """Spliterator applying a function to every element of its source."""

    def __init__(self, source: Spliterator[T], func: Callable[[T], U]):
        self.source = source
        self.func = func

    def try_advance(self, action: Callable[[U], object]) -> bool:
        return self.source.try_advance(lambda element: action(self.func(element)))

    def try_split(self) -> MappingSpliterator[T, U] | None:
        prefix = self.source.try_split()
        return None if prefix is None else MappingSpliterator(prefix, self.func)

    def estimate_size(self) -> int:
        return self.source.estimate_size()

    def characteristics(self) -> Characteristic:
        return self.source.characteristics() & ~(
            Characteristic.DISTINCT | Characteristic.SORTED
        )


class PredicateSpliterator(Spliterator[T]):
    """Spliterator keeping only the elements that satisfy a predicate."""

    def __init__(self, source: Spliterator[T], predicate: Callable[[T], bool]):
        self.source = source
        self.predicate = predicate

    def try_advance(self, action: Callable[[T], object]) -> bool:
        matched: list[T] = []

        def keep(element: T) -> None:
            if self.predicate(element):
                matched.append(element)

        while not matched:
            if not self.source.try_advance(keep):
                return False
        action(matched[0])
        return True

    def try_split(self) -> PredicateSpliterator[T] | None:
        prefix = self.source.try_split()
        if prefix is None:
            return None
        return PredicateSpliterator(prefix, self.predicate)

    def estimate_size(self) -> int:
        return self.source.estimate_size()

    def characteristics(self) -> Characteristic:
        return self.source.characteristics() & ~_SIZE_FLAGS


class FlatteningSpliterator[T, U](Spliterator[U]):
    """
    Spliterator concatenating the iterables produced from each element.

    A split is only possible while no inner batch is half consumed, since
    the handed-off prefix must come before everything the receiver keeps.
    """

    def __init__(self, source: Spliterator[T], func: Callable[[T], Iterable[U]]):
        self.source = source
        self.func = func
        self._current: Spliterator[U] | None = None

    def _open(self, element: T) -> None:
        self._current = IteratorSpliterator(iter(self.func(element)))

    def try_advance(self, action: Callable[[U], object]) -> bool:
        while True:
            if self._current is not None:
                if self._current.try_advance(action):
                    return True
                self._current = None
            if not self.source.try_advance(self._open):
                return False

    def try_split(self) -> FlatteningSpliterator[T, U] | None:
        if self._current is not None:
            return None
        prefix = self.source.try_split()
        return None if prefix is None else FlatteningSpliterator(prefix, self.func)

    def estimate_size(self) -> int:
        return UNBOUNDED

    def characteristics(self) -> Characteristic:
        return self.source.characteristics() & Characteristic.ORDERED


class LimitingSpliterator(Spliterator[T]):
    """Spliterator truncating its source after a fixed number of elements."""

    def __init__(self, source: Spliterator[T], max_size: int):
        if max_size < 0:
            raise ValueError(f"Limit must not be negative: {max_size}")
        self.source = source
        self.remaining = max_size

    def try_advance(self, action: Callable[[T], object]) -> bool:
        if self.remaining <= 0:
            return False
        if not self.source.try_advance(action):
            self.remaining = 0
            return False
        self.remaining -= 1
        return True

    def try_split(self) -> None:
        # The limit counts from the start of the whole source.
        return None

    def estimate_size(self) -> int:
        return min(self.remaining, self.source.estimate_size())

    def characteristics(self) -> Characteristic:
        flags = self.source.characteristics()
        if not flags & Characteristic.SIZED:
            flags &= ~_SIZE_FLAGS
        return flags
