"""
Cycling producer.

The source is materialized once into a tuple, and every advance emits that
whole tuple as a single batch. Callers flatten the batches into an endless
stream of elements.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from ._validation import require_not_none, require_ordered
from .protocols import UNBOUNDED, Characteristic, Spliterator

T = TypeVar("T")

logger = logging.getLogger(__name__)


class CyclingSpliterator(Spliterator[tuple[T, ...]]):
    """
    Spliterator replaying a materialized source forever.

    Splits share the same read-only tuple, so splitting is unlimited and
    costs nothing. An empty source gives an empty cycle.
    """

    def __init__(self, elements: tuple[T, ...]):
        self._elements = elements

    @classmethod
    def of(cls, spliterator: Spliterator[T]) -> CyclingSpliterator[T]:
        """
        Materialize ``spliterator`` and cycle over its elements.

        Raises:
            TypeError: If ``spliterator`` is None
            ValueError: If ``spliterator`` is not ORDERED
        """
        require_not_none(spliterator, "spliterator")
        require_ordered(spliterator, "cycle")

        elements: list[T] = []
        spliterator.for_each_remaining(elements.append)
        logger.debug("Cycling over %d materialized elements", len(elements))
        return cls(tuple(elements))

    def try_advance(self, action: Callable[[tuple[T, ...]], object]) -> bool:
        if not self._elements:
            return False
        action(self._elements)
        return True

    def try_split(self) -> CyclingSpliterator[T] | None:
        if not self._elements:
            return None
        return CyclingSpliterator(self._elements)

    def estimate_size(self) -> int:
        return UNBOUNDED if self._elements else 0

    def characteristics(self) -> Characteristic:
        return Characteristic.ORDERED | Characteristic.IMMUTABLE
