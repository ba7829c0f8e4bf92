"""
Stream operators built on the transforming spliterators.

Each operator validates its arguments, wraps the source's spliterator in
the matching producer and returns a new Stream. The new stream keeps the
source's parallel flag, and closing it closes the source.

Example:
    >>> from splititer import operators
    >>> operators.cycle(["tick", "tock"]).limit(5).to_list()
    ['tick', 'tock', 'tick', 'tock', 'tick']
    >>> operators.accumulate([1, 2, 5, 3], max).to_list()
    [1, 2, 5, 5]
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from ._validation import require_not_none
from .accumulating import AccumulatingEntriesSpliterator, AccumulatingSpliterator
from .adapters import into_stream
from .cross_product import CrossProductSpliterator
from .cycling import CyclingSpliterator
from .filtering import FilteringAllMaxSpliterator, FilteringMaxKeysSpliterator
from .functional import BinaryOperator, Comparator, Entry, comparing, natural_order
from .protocols import Spliterator
from .stream import Stream

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")
U = TypeVar("U")

Source = Iterable[T] | Stream[T]


def _open(source: Source[T]) -> Stream[T]:
    return into_stream(require_not_none(source, "source"))


def _apply(
    source: Source[T], build: Callable[[Spliterator[T]], Spliterator[U]]
) -> Stream[U]:
    stream = _open(source)
    try:
        spliterator = build(stream.spliterator())
    except Exception:
        stream.close()
        raise
    return Stream(spliterator, stream.is_parallel).on_close(stream.close)


def _resolve_comparator(
    comparator: Comparator[T] | None, key: Callable[[T], Any] | None
) -> Comparator[T]:
    if comparator is not None and key is not None:
        raise ValueError("Pass either a comparator or a key, not both")
    if key is not None:
        return comparing(key)
    return comparator if comparator is not None else natural_order


def cycle(source: Source[T]) -> Stream[T]:
    """
    Repeat the elements of an ordered source forever.

    The source is read fully when this is called. The result is infinite
    unless the source is empty, so limit it before collecting.

    Raises:
        TypeError: If ``source`` is None
        ValueError: If ``source`` is not ORDERED (a set, for example)
    """
    return _apply(source, CyclingSpliterator.of).flat_map(iter)


def cross_product(source: Source[T]) -> Stream[Entry[T, T]]:
    """
    Pair every element with every element, itself included.

    For ``[a, b]`` this gives ``(a, a), (a, b), (b, a), (b, b)``.
    """
    return _apply(source, CrossProductSpliterator.of)


def cross_product_no_doubles(source: Source[T]) -> Stream[Entry[T, T]]:
    """
    Pair every element with every other element.

    For ``[a, b, c]`` this gives ``(a, b), (a, c), (b, a), (b, c), (c, a), (c, b)``.
    """
    return _apply(source, CrossProductSpliterator.no_doubles)


def cross_product_ordered(
    source: Source[T], comparator: Comparator[T]
) -> Stream[Entry[T, T]]:
    """
    Pair elements whose key compares strictly less than their value.

    For ``[a, b, c]`` in increasing order this gives ``(a, b), (a, c), (b, c)``.
    Equal elements are never paired.

    Raises:
        TypeError: If ``source`` or ``comparator`` is None
    """
    require_not_none(comparator, "comparator")
    return _apply(
        source, lambda spliterator: CrossProductSpliterator.ordered(spliterator, comparator)
    )


def cross_product_naturally_ordered(source: Source[T]) -> Stream[Entry[T, T]]:
    """``cross_product_ordered`` using the elements' natural order."""
    return cross_product_ordered(source, natural_order)


def filtering_all_max(
    source: Source[T],
    comparator: Comparator[T] | None = None,
    *,
    key: Callable[[T], Any] | None = None,
) -> Stream[T]:
    """
    Keep every element tied for the greatest value.

    Args:
        source: The elements to filter
        comparator: Ordering of the elements, natural order if omitted
        key: Sort key to build the ordering from, instead of ``comparator``

    Returns:
        A stream of the maximal elements, in encounter order

    Raises:
        TypeError: If ``source`` is None
        ValueError: If both ``comparator`` and ``key`` are given
    """
    resolved = _resolve_comparator(comparator, key)
    return _apply(
        source, lambda spliterator: FilteringAllMaxSpliterator.of(spliterator, resolved)
    )


def filtering_max_keys(
    source: Source[T],
    number_of_maxes: int,
    comparator: Comparator[T] | None = None,
    *,
    key: Callable[[T], Any] | None = None,
) -> Stream[T]:
    """
    Keep the elements belonging to the N greatest distinct values.

    Duplicates of a retained value are all kept, so the result can hold
    more than ``number_of_maxes`` elements. It holds fewer values when the
    source has fewer distinct ones. The result runs from the greatest value
    down.

    Args:
        source: The elements to filter
        number_of_maxes: How many distinct values to keep, at least 1
        comparator: Ordering of the elements, natural order if omitted
        key: Sort key to build the ordering from, instead of ``comparator``

    Raises:
        TypeError: If ``source`` is None
        ValueError: If ``number_of_maxes`` is less than 1, or both
            ``comparator`` and ``key`` are given
    """
    if number_of_maxes < 1:
        raise ValueError(f"Number of maxes must be at least 1, got {number_of_maxes}")
    resolved = _resolve_comparator(comparator, key)
    return _apply(
        source,
        lambda spliterator: FilteringMaxKeysSpliterator.of(
            spliterator, number_of_maxes, resolved
        ),
    )


def accumulate(source: Source[T], operator: BinaryOperator[T]) -> Stream[T]:
    """
    Replace each element with the fold of all elements up to it.

    ``accumulate([1, 1, 1, 1], operator.add)`` gives ``[1, 2, 3, 4]``.

    When a parallel stream splits the work, every piece folds from its own
    first element, so the result differs from the sequential one.

    Raises:
        TypeError: If ``source`` or ``operator`` is None
        ValueError: If ``source`` is not ORDERED
    """
    require_not_none(operator, "operator")
    return _apply(
        source, lambda spliterator: AccumulatingSpliterator.of(spliterator, operator)
    )


def accumulate_entries(
    source: Source[tuple[K, V]], operator: BinaryOperator[V]
) -> Stream[Entry[K, V]]:
    """
    Fold the values of key/value pairs, keeping each key in place.

    ``accumulate_entries([("a", 1), ("b", 2)], operator.add)`` gives
    ``[("a", 1), ("b", 3)]``.

    Raises:
        TypeError: If ``source`` or ``operator`` is None
        ValueError: If ``source`` is not ORDERED
    """
    require_not_none(operator, "operator")
    return _apply(
        source,
        lambda spliterator: AccumulatingEntriesSpliterator.of(spliterator, operator),
    )
