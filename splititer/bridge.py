"""
Bridge functions that connect spliterators and consumers.

The bridge implements the divide-and-conquer strategy: it keeps asking a
spliterator for a prefix, runs prefixes on the thread pool and reduces the
partial results left to right, so ordered sources keep their order.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import TypeVar

from .config import get_executor, get_settings
from .protocols import Consumer, Spliterator

T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger(__name__)


def bridge(
    spliterator: Spliterator[T], consumer: Consumer[T, R], depth: int = 0
) -> R:
    """
    Bridge a spliterator with a consumer, executing in parallel.

    1. If the work is small enough or we're too deep, execute sequentially
    2. Otherwise, ask the spliterator for a prefix and split the consumer
    3. Offer the prefix to the pool near the top and run the remainder here
    4. Combine the results, prefix first

    A spliterator that refuses to split is simply consumed sequentially.
    A prefix still queued when the remainder is done is taken back and run
    on this thread, so a task never waits on work no worker has started.
    Nested parallel operations and several calling threads therefore
    share the pool without exhausting it.

    Args:
        spliterator: The spliterator producing elements
        consumer: The consumer processing elements
        depth: Current recursion depth (for preventing excessive splitting)

    Returns:
        The result from the consumer
    """
    settings = get_settings()

    if spliterator.estimate_size() <= settings.min_split_size or depth >= settings.max_depth:
        return sequential_bridge(spliterator, consumer)

    prefix = spliterator.try_split()
    if prefix is None:
        return sequential_bridge(spliterator, consumer)

    logger.debug(
        "Split at depth %d: prefix ~%d, remainder ~%d",
        depth,
        prefix.estimate_size(),
        spliterator.estimate_size(),
    )
    left_consumer, right_consumer = consumer.split()

    if depth < settings.parallel_depth:
        left_future: Future[R] = get_executor().submit(
            bridge, prefix, left_consumer, depth + 1
        )
        right_result = bridge(spliterator, right_consumer, depth + 1)

        if left_future.cancel():
            logger.debug("Pool busy at depth %d, running prefix inline", depth)
            left_result = bridge(prefix, left_consumer, depth + 1)
        else:
            left_result = left_future.result()
    else:
        left_result = bridge(prefix, left_consumer, depth + 1)
        right_result = bridge(spliterator, right_consumer, depth + 1)

    return consumer.reduce(left_result, right_result)


def sequential_bridge(spliterator: Spliterator[T], consumer: Consumer[T, R]) -> R:
    """
    Drain a spliterator into a consumer without splitting.

    Args:
        spliterator: The spliterator producing elements
        consumer: The consumer processing elements

    Returns:
        The result from the consumer
    """
    return consumer.consume(spliterator)
