"""
Shared fixtures for the splititer tests.
"""

import pytest

from splititer import configure, get_settings
from splititer.protocols import iterate


@pytest.fixture
def drain():
    """Return a function draining a spliterator into a list."""

    def _drain(spliterator):
        return list(iterate(spliterator))

    return _drain


@pytest.fixture
def split_all():
    """
    Return a function splitting a spliterator as far as it goes.

    The pieces come back in encounter order: every prefix before the
    spliterator it was split from.
    """

    def _split_all(spliterator, depth=10):
        if depth == 0:
            return [spliterator]
        prefix = spliterator.try_split()
        if prefix is None:
            return [spliterator]
        return _split_all(prefix, depth - 1) + _split_all(spliterator, depth - 1)

    return _split_all


@pytest.fixture
def eager_splitting():
    """Make parallel streams split down to single elements on 4 threads."""
    saved = get_settings()
    yield configure(min_split_size=1, max_depth=8, num_threads=4)
    configure(
        num_threads=saved.num_threads,
        min_split_size=saved.min_split_size,
        max_depth=saved.max_depth,
    )
