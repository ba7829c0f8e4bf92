"""
Core protocol definitions for splittable producers.

A spliterator is a pull-based cursor over the remaining elements of a
sequence that can also hand a disjoint prefix of its remaining work to a
new spliterator, so that an external executor can consume the pieces
concurrently.
"""

from __future__ import annotations

import sys
from abc import abstractmethod
from collections.abc import Callable, Iterator
from enum import IntFlag
from typing import Protocol, TypeVar, runtime_checkable

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)  # Covariant for Spliterator (output only)
T_contra = TypeVar(
    "T_contra", contravariant=True
)  # Contravariant for Consumer (input only)
R = TypeVar("R")

# Size reported by spliterators that are infinite or cannot estimate.
UNBOUNDED = sys.maxsize


class Characteristic(IntFlag):
    """Flags describing the structure of a spliterator's elements."""

    NONE = 0
    DISTINCT = 0x0001
    SORTED = 0x0004
    ORDERED = 0x0010
    SIZED = 0x0040
    NONNULL = 0x0100
    IMMUTABLE = 0x0400
    CONCURRENT = 0x1000
    SUBSIZED = 0x4000


@runtime_checkable
class Spliterator(Protocol[T_co]):
    """
    A splittable producer of elements.

    Implementations pull at most one element per ``try_advance`` call and
    may hand off a prefix of their remaining elements with ``try_split``.
    After ``try_advance`` has returned False it keeps returning False.
    """

    @abstractmethod
    def try_advance(self, action: Callable[[T_co], object]) -> bool:
        """
        Feed the next remaining element to ``action``.

        Args:
            action: Callback receiving the element

        Returns:
            True if an element was produced, False if none remain
        """
        ...

    @abstractmethod
    def try_split(self) -> Spliterator[T_co] | None:
        """
        Split off a prefix of the remaining elements.

        The returned spliterator covers the elements that come first in
        encounter order, and this spliterator keeps the rest. The two never
        overlap and together cover exactly what this one covered before.

        Returns:
            The prefix spliterator, or None if this one cannot be split
        """
        ...

    @abstractmethod
    def estimate_size(self) -> int:
        """
        Return the estimated number of remaining elements.

        Returns:
            The exact count when SIZED, an estimate otherwise, and
            UNBOUNDED when infinite or unknown
        """
        ...

    @abstractmethod
    def characteristics(self) -> Characteristic:
        """Return the characteristics of this spliterator and its elements."""
        ...

    def for_each_remaining(self, action: Callable[[T_co], object]) -> None:
        """Feed every remaining element to ``action``, in order."""
        while self.try_advance(action):
            pass

    def has_characteristics(self, flags: Characteristic) -> bool:
        """Return True if all of ``flags`` are reported by this spliterator."""
        return (self.characteristics() & flags) == flags

    def get_exact_size_if_known(self) -> int:
        """Return ``estimate_size()`` if SIZED, otherwise -1."""
        if self.has_characteristics(Characteristic.SIZED):
            return self.estimate_size()
        return -1


def iterate[T](spliterator: Spliterator[T]) -> Iterator[T]:
    """
    Adapt a spliterator to a plain Python iterator.

    Args:
        spliterator: The spliterator to drain

    Returns:
        A generator yielding the remaining elements in order
    """
    box: list[T] = []
    while spliterator.try_advance(box.append):
        yield box.pop()


class Consumer(Protocol[T_contra, R]):
    """
    A consumer processes elements and produces a result.

    Consumers can be split to process work in parallel, and their results
    can be reduced back together.
    """

    @abstractmethod
    def consume(self, spliterator: Spliterator[T_contra]) -> R:
        """
        Drain a spliterator that will not be split further.

        Args:
            spliterator: The piece of work to consume

        Returns:
            The result of consuming all elements
        """
        ...

    @abstractmethod
    def split(self) -> tuple[Consumer[T_contra, R], Consumer[T_contra, R]]:
        """
        Split this consumer into two independent consumers.

        Returns:
            A tuple of (left_consumer, right_consumer)
        """
        ...

    @abstractmethod
    def reduce(self, left: R, right: R) -> R:
        """
        Combine results from two consumers.

        Args:
            left: Result from the left consumer
            right: Result from the right consumer

        Returns:
            The combined result
        """
        ...
