"""
Settings deciding how parallel streams split their spliterators.

The bridge reads one immutable ``SplitSettings`` snapshot per terminal
operation. Changing a setting swaps the snapshot, and changing the thread
count also retires the shared pool so the next parallel operation starts
one of the new size.
"""

from __future__ import annotations

import dataclasses
import logging
import math
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

logger = logging.getLogger(__name__)

NUM_THREADS_ENV = "SPLITITER_NUM_THREADS"


def threads_from_environment() -> int:
    """
    Read the thread count from ``SPLITITER_NUM_THREADS``.

    Unset, unparseable or non-positive values fall back to the CPU count.
    """
    raw = os.environ.get(NUM_THREADS_ENV)
    if raw:
        try:
            threads = int(raw)
        except ValueError:
            logger.warning("Ignoring %s=%r, not an integer", NUM_THREADS_ENV, raw)
        else:
            if threads >= 1:
                return threads
            logger.warning("Ignoring %s=%r, must be at least 1", NUM_THREADS_ENV, raw)
    return os.cpu_count() or 4


@dataclass(frozen=True)
class SplitSettings:
    """
    Thresholds for the bridge.

    Attributes:
        num_threads: Workers in the shared pool
        min_split_size: Estimated sizes at or below this are not split
        max_depth: Splitting stops at this recursion depth
    """

    num_threads: int
    min_split_size: int = 10000
    max_depth: int = 8

    def __post_init__(self):
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if value < 1:
                raise ValueError(f"{field.name} must be at least 1, got {value}")

    @property
    def parallel_depth(self) -> int:
        """Depth above which prefixes are offered to the pool, 0 for one thread."""
        if self.num_threads == 1:
            return 0
        return max(2, min(4, int(math.log2(self.num_threads)) + 1))


_lock = threading.Lock()
_settings: SplitSettings | None = None
_executor: ThreadPoolExecutor | None = None


def get_settings() -> SplitSettings:
    """Return the current settings, reading the environment on first use."""
    global _settings
    if _settings is None:
        with _lock:
            if _settings is None:
                _settings = SplitSettings(num_threads=threads_from_environment())
    return _settings


def configure(**changes: int) -> SplitSettings:
    """
    Replace some of the current settings.

    Args:
        **changes: New values for ``num_threads``, ``min_split_size`` or
            ``max_depth``

    Returns:
        The new settings

    Raises:
        ValueError: If a value is less than 1
        TypeError: If a name is not a setting

    Example:
        >>> from splititer import configure
        >>> configure(min_split_size=1000, max_depth=4)
    """
    global _settings, _executor
    current = get_settings()
    updated = dataclasses.replace(current, **changes)
    with _lock:
        _settings = updated
        if updated.num_threads != current.num_threads and _executor is not None:
            logger.debug("Replacing thread pool with %d workers", updated.num_threads)
            _executor.shutdown(wait=False)
            _executor = None
    return updated


def get_executor() -> ThreadPoolExecutor:
    """Return the shared pool, created with the current thread count."""
    global _executor
    if _executor is None:
        num_threads = get_settings().num_threads
        with _lock:
            if _executor is None:
                _executor = ThreadPoolExecutor(
                    max_workers=num_threads,
                    thread_name_prefix="splititer",
                )
    return _executor


def set_num_threads(num_threads: int) -> None:
    """
    Set the number of threads used by parallel streams.

    Example:
        >>> from splititer import set_num_threads
        >>> set_num_threads(8)
    """
    configure(num_threads=num_threads)


def get_num_threads() -> int:
    """Get the number of threads used by parallel streams."""
    return get_settings().num_threads
