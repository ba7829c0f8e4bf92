"""
Adapters for converting standard Python objects into spliterators and
streams.

Sequences, mappings, mapping views and plain iterators are ORDERED. Sets
are not, since their iteration order carries no meaning.
"""

from __future__ import annotations

from collections.abc import Iterable, MappingView, Sequence, Set, Sized
from typing import Any, TypeVar

from ._validation import require_not_none
from .producers import SEQUENCE_CHARACTERISTICS, IteratorSpliterator, ListSpliterator
from .protocols import Characteristic, Spliterator
from .stream import Stream

T = TypeVar("T")


def into_spliterator[T](data: Iterable[T] | Spliterator[T] | Stream[T]) -> Spliterator[T]:
    """
    Convert an iterable into a spliterator.

    Args:
        data: A spliterator, a stream, or any iterable

    Returns:
        A spliterator over the elements of ``data``

    Raises:
        TypeError: If ``data`` is None or not iterable

    Example:
        >>> from splititer import into_spliterator
        >>> spliterator = into_spliterator([1, 2, 3])
        >>> spliterator.estimate_size()
        3
    """
    require_not_none(data, "data")
    if isinstance(data, Spliterator):
        return data
    if isinstance(data, Stream):
        return data.spliterator()
    if isinstance(data, Sequence):
        characteristics = SEQUENCE_CHARACTERISTICS
        if isinstance(data, tuple | range | str | bytes):
            characteristics |= Characteristic.IMMUTABLE
        return ListSpliterator(data, characteristics=characteristics)
    if isinstance(data, Set) and not isinstance(data, MappingView):
        return IteratorSpliterator(iter(data), len(data), Characteristic.DISTINCT)
    if isinstance(data, Iterable):
        size = len(data) if isinstance(data, Sized) else None
        return IteratorSpliterator(iter(data), size)
    raise TypeError(f"Cannot create a spliterator from {type(data).__name__}")


def into_stream[T](data: Iterable[T] | Spliterator[T] | Stream[T], parallel: bool = False) -> Stream[T]:
    """
    Convert an iterable into a stream.

    A stream is returned unchanged. For anything else with a callable
    ``close`` (generators, for example) that ``close`` becomes a close
    handler of the new stream.

    Args:
        data: A stream, a spliterator, or any iterable
        parallel: Whether terminal operations may split the work

    Returns:
        A stream over the elements of ``data``

    Example:
        >>> from splititer import into_stream
        >>> into_stream(range(5)).map(lambda x: x * 2).to_list()
        [0, 2, 4, 6, 8]
    """
    require_not_none(data, "data")
    if isinstance(data, Stream):
        return data

    stream = Stream(into_spliterator(data), parallel)
    close: Any = getattr(data, "close", None)
    if callable(close):
        stream.on_close(close)
    return stream
