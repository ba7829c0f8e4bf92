"""
Lazy sequences backed by spliterators.

A Stream is a one-shot Python iterator over a spliterator, with close
handlers and a few intermediate and terminal operations. Parallel streams
run their terminal operations through the bridge, which splits the
spliterator across the global thread pool.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Any, TypeVar

from ._validation import require_not_none
from .bridge import bridge, sequential_bridge
from .consumers import CollectConsumer, CountConsumer, FoldConsumer, for_each_consumer
from .pipeline import (
    FlatteningSpliterator,
    LimitingSpliterator,
    MappingSpliterator,
    PredicateSpliterator,
)
from .protocols import Consumer, Spliterator, iterate

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")

logger = logging.getLogger(__name__)


class Stream[T]:
    """
    A lazy, single-use sequence of elements pulled from a spliterator.

    Streams are consumed once: iterating, deriving a new stream, running a
    terminal operation or taking the spliterator all link the stream, and
    a second attempt raises RuntimeError. Closing a stream runs its close
    handlers exactly once, derived streams close their parent.
    """

    def __init__(self, spliterator: Spliterator[T], parallel: bool = False):
        """
        Create a stream over a spliterator.

        Args:
            spliterator: The spliterator supplying elements
            parallel: Whether terminal operations may split the work
        """
        self._spliterator = require_not_none(spliterator, "spliterator")
        self._parallel = parallel
        self._close_handlers: list[Callable[[], object]] = []
        self._linked = False
        self._closed = False
        self._iterator: Iterator[T] | None = None

    # Lifecycle

    @property
    def is_parallel(self) -> bool:
        """Whether terminal operations split the spliterator across threads."""
        return self._parallel

    def parallel(self) -> Stream[T]:
        """Mark this stream parallel and return it."""
        self._parallel = True
        return self

    def sequential(self) -> Stream[T]:
        """Mark this stream sequential and return it."""
        self._parallel = False
        return self

    def on_close(self, handler: Callable[[], object]) -> Stream[T]:
        """
        Register a handler to run when this stream is closed.

        Args:
            handler: Callable taking no arguments

        Returns:
            This stream
        """
        require_not_none(handler, "handler")
        if self._closed:
            raise RuntimeError("Stream has already been closed")
        self._close_handlers.append(handler)
        return self

    def close(self) -> None:
        """
        Run every close handler once, in registration order.

        All handlers run even if some fail. A single failure is re-raised
        as is, several are raised together as an ExceptionGroup.
        """
        if self._closed:
            return
        self._closed = True
        handlers, self._close_handlers = self._close_handlers, []

        errors: list[Exception] = []
        for handler in handlers:
            try:
                handler()
            except Exception as exc:
                logger.debug("Close handler %r failed: %s", handler, exc)
                errors.append(exc)

        if len(errors) == 1:
            raise errors[0]
        if errors:
            raise ExceptionGroup("Stream close handlers failed", errors)

    def __enter__(self) -> Stream[T]:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def _link(self) -> Spliterator[T]:
        if self._closed:
            raise RuntimeError("Stream has already been closed")
        if self._linked:
            raise RuntimeError("Stream has already been operated upon")
        self._linked = True
        return self._spliterator

    def spliterator(self) -> Spliterator[T]:
        """Hand out the underlying spliterator, consuming this stream."""
        return self._link()

    # Iteration

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        if self._iterator is None:
            self._iterator = iterate(self._link())
        return next(self._iterator)

    # Intermediate operations

    def _derive(self, spliterator: Spliterator[U]) -> Stream[U]:
        return Stream(spliterator, self._parallel).on_close(self.close)

    def map(self, func: Callable[[T], U]) -> Stream[U]:
        """
        Apply a function to each element.

        Args:
            func: Function to apply to each element

        Returns:
            A new stream of transformed elements
        """
        require_not_none(func, "func")
        return self._derive(MappingSpliterator(self._link(), func))

    def filter(self, predicate: Callable[[T], bool]) -> Stream[T]:
        """
        Keep only the elements matching a predicate.

        Args:
            predicate: Function that returns True for elements to keep

        Returns:
            A new stream of the matching elements
        """
        require_not_none(predicate, "predicate")
        return self._derive(PredicateSpliterator(self._link(), predicate))

    def flat_map(self, func: Callable[[T], Iterable[U]]) -> Stream[U]:
        """
        Replace each element with the elements of the iterable it maps to.

        Args:
            func: Function returning an iterable for each element

        Returns:
            A new stream of the concatenated elements
        """
        require_not_none(func, "func")
        return self._derive(FlatteningSpliterator(self._link(), func))

    def limit(self, max_size: int) -> Stream[T]:
        """
        Truncate this stream to at most ``max_size`` elements.

        A limited stream never splits, which is what makes limiting an
        infinite stream safe even when it is parallel.
        """
        return self._derive(LimitingSpliterator(self._link(), max_size))

    # Terminal operations

    def _evaluate(self, consumer: Consumer[T, R]) -> R:
        spliterator = self._link()
        if self._parallel:
            return bridge(spliterator, consumer)
        return sequential_bridge(spliterator, consumer)

    def to_list(self) -> list[T]:
        """
        Collect all elements into a list, in encounter order.

        Returns:
            A list containing all elements
        """
        return self._evaluate(CollectConsumer())

    def count(self) -> int:
        """
        Count the remaining elements.

        A SIZED stream is counted from its size without being traversed.
        """
        return self._evaluate(CountConsumer())

    def reduce(self, identity: Callable[[], Any], reduce_op: Callable[[Any, Any], Any]) -> Any:
        """
        Reduce all elements to a single value.

        Args:
            identity: Function that creates the initial/identity value
            reduce_op: Associative function to combine two values

        Returns:
            The final reduced value
        """
        return self._evaluate(FoldConsumer(identity, reduce_op, reduce_op))

    def for_each(self, func: Callable[[T], object]) -> None:
        """
        Execute a function on each element.

        Args:
            func: Function to execute for each element
        """
        self._evaluate(for_each_consumer(func))
