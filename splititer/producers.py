"""
Source spliterators for common data structures.

These turn sequences and plain iterators into spliterators that the
transforming producers can wrap and that executors can split.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from typing import TypeVar

from .protocols import UNBOUNDED, Characteristic, Spliterator

T = TypeVar("T")

SEQUENCE_CHARACTERISTICS = (
    Characteristic.ORDERED | Characteristic.SIZED | Characteristic.SUBSIZED
)

# Iterator batches grow by this many elements per split
BATCH_UNIT = 1 << 10
MAX_BATCH = 1 << 25


class ListSpliterator(Spliterator[T]):
    """
    Spliterator over an index range of a sequence.

    This wraps lists, tuples, ranges and other sequences. Splitting hands
    off the first half of the remaining range.
    """

    def __init__(
        self,
        data: Sequence[T],
        start: int = 0,
        end: int | None = None,
        characteristics: Characteristic = SEQUENCE_CHARACTERISTICS,
    ):
        """
        Create a sequence spliterator.

        Args:
            data: The sequence to iterate over
            start: Starting index (inclusive)
            end: Ending index (exclusive), or None for end of sequence
            characteristics: Flags to report, SIZED and SUBSIZED are
                always added
        """
        self.data = data
        self.start = start
        self.end = end if end is not None else len(data)
        self._characteristics = (
            characteristics | Characteristic.SIZED | Characteristic.SUBSIZED
        )

        if self.start < 0 or self.start > len(data):
            raise ValueError(f"Invalid start index: {self.start}")
        if self.end < 0 or self.end > len(data):
            raise ValueError(f"Invalid end index: {self.end}")
        if self.start > self.end:
            raise ValueError(f"Start index {self.start} > end index {self.end}")

    def try_advance(self, action: Callable[[T], object]) -> bool:
        if self.start >= self.end:
            return False
        element = self.data[self.start]
        self.start += 1
        action(element)
        return True

    def for_each_remaining(self, action: Callable[[T], object]) -> None:
        start, self.start = self.start, self.end
        for index in range(start, self.end):
            action(self.data[index])

    def try_split(self) -> ListSpliterator[T] | None:
        """Hand off the first half of the remaining range."""
        mid = (self.start + self.end) // 2
        if mid <= self.start:
            return None

        prefix = ListSpliterator(
            self.data, self.start, mid, self._characteristics
        )
        self.start = mid
        return prefix

    def estimate_size(self) -> int:
        """Return the number of elements left in this slice."""
        return self.end - self.start

    def characteristics(self) -> Characteristic:
        return self._characteristics


class IteratorSpliterator(Spliterator[T]):
    """
    Spliterator over a plain Python iterator.

    An iterator cannot be divided, so splitting copies a batch of elements
    into a ListSpliterator. Batches grow with every split so that executors
    get increasingly large chunks of work.
    """

    def __init__(
        self,
        iterator: Iterator[T],
        size: int | None = None,
        characteristics: Characteristic = Characteristic.ORDERED,
    ):
        """
        Create an iterator spliterator.

        Args:
            iterator: The iterator to pull elements from
            size: Exact number of elements if known, None otherwise
            characteristics: Flags to report, SIZED and SUBSIZED are added
                when ``size`` is given
        """
        self._iterator = iterator
        self._size = size
        self._batch = 0
        self._exhausted = False
        if size is not None:
            characteristics |= Characteristic.SIZED | Characteristic.SUBSIZED
        self._characteristics = characteristics

    def try_advance(self, action: Callable[[T], object]) -> bool:
        if self._exhausted:
            return False
        try:
            element = next(self._iterator)
        except StopIteration:
            self._exhausted = True
            self._size = 0 if self._size is not None else None
            return False
        if self._size is not None:
            self._size -= 1
        action(element)
        return True

    def try_split(self) -> ListSpliterator[T] | None:
        """Copy the next batch of elements into an independent spliterator."""
        if self._exhausted or self._size is not None and self._size <= 1:
            return None

        batch_size = min(self._batch + BATCH_UNIT, MAX_BATCH)
        if self._size is not None:
            batch_size = min(batch_size, self._size)

        batch: list[T] = []
        for element in self._iterator:
            batch.append(element)
            if len(batch) >= batch_size:
                break
        else:
            self._exhausted = True

        if not batch:
            return None

        self._batch = len(batch)
        if self._size is not None:
            self._size -= len(batch)
        return ListSpliterator(batch, characteristics=self._characteristics)

    def estimate_size(self) -> int:
        if self._size is not None:
            return self._size
        return 0 if self._exhausted else UNBOUNDED

    def characteristics(self) -> Characteristic:
        return self._characteristics
