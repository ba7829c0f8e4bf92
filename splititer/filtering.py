"""
Filtering producers keeping only the greatest elements of a source.

Both need to see the entire source before they know what to emit, so they
drain it on the first advance, buffer the survivors and never split.
"""

from __future__ import annotations

from abc import abstractmethod
from collections import deque
from collections.abc import Callable
from typing import Any, TypeVar

from ._validation import require_not_none
from .functional import Comparator
from .protocols import Characteristic, Spliterator

T = TypeVar("T")

_EMPTY: Any = object()


class _BufferingSpliterator(Spliterator[T]):
    """Single pass over the source into a buffer, then drain the buffer."""

    def __init__(self, spliterator: Spliterator[T], comparator: Comparator[T]):
        self.spliterator = spliterator
        self.comparator = comparator
        self._output: deque[T] | None = None

    @abstractmethod
    def _collect(self) -> list[T]:
        """Drain the source and return the elements to emit, in order."""

    def try_advance(self, action: Callable[[T], object]) -> bool:
        if self._output is None:
            self._output = deque(self._collect())
        if not self._output:
            return False
        action(self._output.popleft())
        return True

    def try_split(self) -> None:
        return None

    def estimate_size(self) -> int:
        if self._output is None:
            return self.spliterator.estimate_size()
        return len(self._output)

    def characteristics(self) -> Characteristic:
        flags = self.spliterator.characteristics() & Characteristic.ORDERED
        if self._output is not None:
            flags |= Characteristic.SIZED
        return flags


class FilteringAllMaxSpliterator(_BufferingSpliterator[T]):
    """
    Spliterator emitting every element tied for the maximum.

    A greater element clears the tie buffer, an equal one joins it. Only
    the elements tied with the final maximum are emitted, in encounter
    order.
    """

    @classmethod
    def of(
        cls, spliterator: Spliterator[T], comparator: Comparator[T]
    ) -> FilteringAllMaxSpliterator[T]:
        """
        Raises:
            TypeError: If ``spliterator`` or ``comparator`` is None
        """
        require_not_none(spliterator, "spliterator")
        require_not_none(comparator, "comparator")
        return cls(spliterator, comparator)

    def _collect(self) -> list[T]:
        maximum = _EMPTY
        ties: list[T] = []

        def offer(element: T) -> None:
            nonlocal maximum
            if maximum is _EMPTY:
                maximum = element
                ties.append(element)
                return
            order = self.comparator(element, maximum)
            if order > 0:
                maximum = element
                ties.clear()
                ties.append(element)
            elif order == 0:
                ties.append(element)

        self.spliterator.for_each_remaining(offer)
        return ties


class FilteringMaxKeysSpliterator(_BufferingSpliterator[T]):
    """
    Spliterator emitting the elements of the N greatest distinct classes.

    Elements that compare equal form one class and are all kept, so the
    output can hold more than N elements, or fewer when the source has
    fewer than N classes. Output runs from the greatest class down, in
    encounter order within a class.

    The insertion buffer is scanned linearly, which costs O(N) per source
    element. Large N makes this slow.
    """

    def __init__(
        self,
        spliterator: Spliterator[T],
        number_of_maxes: int,
        comparator: Comparator[T],
    ):
        super().__init__(spliterator, comparator)
        self.number_of_maxes = number_of_maxes

    @classmethod
    def of(
        cls,
        spliterator: Spliterator[T],
        number_of_maxes: int,
        comparator: Comparator[T],
    ) -> FilteringMaxKeysSpliterator[T]:
        """
        Raises:
            TypeError: If ``spliterator`` or ``comparator`` is None
            ValueError: If ``number_of_maxes`` is less than 1
        """
        require_not_none(spliterator, "spliterator")
        require_not_none(comparator, "comparator")
        if number_of_maxes < 1:
            raise ValueError(
                f"Number of maxes must be at least 1, got {number_of_maxes}"
            )
        return cls(spliterator, number_of_maxes, comparator)

    def _collect(self) -> list[T]:
        # Classes as lists of elements, greatest first; [0] is the representative.
        classes: list[list[T]] = []

        def offer(element: T) -> None:
            position = len(classes)
            for index, members in enumerate(classes):
                order = self.comparator(element, members[0])
                if order == 0:
                    members.append(element)
                    return
                if order > 0:
                    position = index
                    break

            if position >= self.number_of_maxes:
                return
            classes.insert(position, [element])
            if len(classes) > self.number_of_maxes:
                classes.pop()

        self.spliterator.for_each_remaining(offer)
        return [element for members in classes for element in members]
