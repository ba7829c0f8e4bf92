"""
Tests for parallel execution of streams and the thread pool configuration.
"""

import logging
import operator
import threading

import pytest

from splititer import (
    IteratorSpliterator,
    SplitSettings,
    accumulate,
    configure,
    cross_product_naturally_ordered,
    cross_product_no_doubles,
    filtering_all_max,
    filtering_max_keys,
    get_num_threads,
    get_settings,
    into_stream,
    set_num_threads,
)
from splititer.bridge import bridge
from splititer.config import threads_from_environment
from splititer.consumers import CollectConsumer, CountConsumer, FoldConsumer
from splititer.producers import ListSpliterator


class TestParallelStreams:
    """Tests for terminal operations on parallel streams."""

    def test_parallel_flag(self):
        """Test switching a stream between parallel and sequential."""
        stream = into_stream([1], parallel=True)
        assert stream.is_parallel
        assert not stream.sequential().is_parallel
        assert stream.parallel().is_parallel

    def test_collect_keeps_order(self, eager_splitting):
        """Test that a parallel collect matches the sequential order."""
        data = list(range(1000))
        assert into_stream(data, parallel=True).to_list() == data

    def test_map_filter(self, eager_splitting):
        """Test a parallel map and filter pipeline."""
        result = (
            into_stream(range(500), parallel=True)
            .map(lambda x: x * 3)
            .filter(lambda x: x % 2 == 0)
            .to_list()
        )
        assert result == [x * 3 for x in range(500) if (x * 3) % 2 == 0]

    def test_operator_keeps_parallel_flag(self):
        """Test that operator streams inherit the source's flag."""
        derived = cross_product_no_doubles(into_stream([1, 2], parallel=True))
        assert derived.is_parallel
        assert not cross_product_no_doubles([1, 2]).is_parallel

    def test_cross_product(self, eager_splitting):
        """Test that a split cross product gives the sequential result."""
        data = list(range(30))
        sequential = cross_product_naturally_ordered(data).to_list()
        parallel = cross_product_naturally_ordered(
            into_stream(data, parallel=True)
        ).to_list()

        assert parallel == sequential
        assert len(parallel) == 30 * 29 // 2

    def test_cross_product_count(self, eager_splitting):
        """Test counting pairs in parallel."""
        stream = cross_product_no_doubles(into_stream(range(40), parallel=True))
        assert stream.count() == 40 * 39

    def test_accumulate_restarts_per_split(self, eager_splitting):
        """Test that a parallel accumulation folds each split on its own."""
        stream = accumulate(into_stream([1] * 8, parallel=True), operator.add)
        assert stream.to_list() == [1] * 8

    def test_accumulate_sequential_reference(self):
        """Test the same accumulation without splitting."""
        assert accumulate([1] * 8, operator.add).to_list() == list(range(1, 9))

    def test_filtering_is_not_split(self, eager_splitting):
        """Test that unsplittable producers give the sequential result."""
        data = [3, 9, 1, 9, 4, 7, 7, 2] * 50
        assert filtering_all_max(into_stream(data, parallel=True)).to_list() == [9] * 100
        result = filtering_max_keys(into_stream(data, parallel=True), 2).to_list()
        assert result == [9] * 100 + [7] * 100

    def test_reduce_and_for_each(self, eager_splitting):
        """Test parallel reduce and for_each."""
        assert into_stream(range(1, 101), parallel=True).reduce(
            lambda: 0, operator.add
        ) == 5050

        seen = []
        lock = threading.Lock()

        def record(x):
            with lock:
                seen.append(x)

        into_stream(range(200), parallel=True).for_each(record)
        assert sorted(seen) == list(range(200))

    def test_generator_source(self, eager_splitting):
        """Test a parallel stream over an unsized generator."""
        result = into_stream((x for x in range(5000)), parallel=True).to_list()
        assert result == list(range(5000))


class TestBridge:
    """Tests for the bridge function itself."""

    def test_small_work_is_not_split(self):
        """Test that the default threshold keeps small inputs sequential."""
        spliterator = ListSpliterator(list(range(10)))
        assert bridge(spliterator, CollectConsumer()) == list(range(10))

    def test_single_thread(self, eager_splitting):
        """Test splitting without handing work to other threads."""
        set_num_threads(1)
        spliterator = ListSpliterator(list(range(100)))
        assert bridge(spliterator, CollectConsumer()) == list(range(100))


class TestNestedParallelism:
    """Tests for parallel operations started from pool threads."""

    def test_reduce_inside_for_each(self, eager_splitting):
        """Test that a parallel reduce inside a parallel for_each completes."""
        set_num_threads(2)
        totals = []
        lock = threading.Lock()

        def inner(_):
            total = into_stream(range(100), parallel=True).reduce(lambda: 0, operator.add)
            with lock:
                totals.append(total)

        outer = threading.Thread(
            target=lambda: into_stream(range(8), parallel=True).for_each(inner),
            daemon=True,
        )
        outer.start()
        outer.join(timeout=30)

        assert not outer.is_alive()
        assert totals == [4950] * 8

    def test_concurrent_callers(self, eager_splitting):
        """Test several threads running parallel collects at once."""
        set_num_threads(2)
        results = {}

        def run(index):
            results[index] = into_stream(range(300), parallel=True).to_list()

        callers = [threading.Thread(target=run, args=(i,), daemon=True) for i in range(4)]
        for caller in callers:
            caller.start()
        for caller in callers:
            caller.join(timeout=30)

        assert not any(caller.is_alive() for caller in callers)
        assert results == {i: list(range(300)) for i in range(4)}


class TestConsumers:
    """Tests for the consumers behind terminal operations."""

    def test_count_uses_exact_size(self):
        """Test that a SIZED spliterator is counted without being traversed."""
        spliterator = ListSpliterator(list(range(40)))
        assert CountConsumer().consume(spliterator) == 40
        assert spliterator.estimate_size() == 40

    def test_count_traverses_unsized(self):
        """Test counting a spliterator of unknown size."""
        spliterator = IteratorSpliterator(x for x in range(7))
        assert CountConsumer().consume(spliterator) == 7

    def test_fold_pieces(self):
        """Test that each piece folds from the identity before combining."""
        consumer = FoldConsumer(list, lambda acc, x: acc + [x], operator.add)
        spliterator = ListSpliterator(list(range(6)))
        prefix = spliterator.try_split()

        left, right = consumer.split()
        assert consumer.reduce(left.consume(prefix), right.consume(spliterator)) == list(range(6))


class TestThreadConfiguration:
    """Tests for thread configuration."""

    def test_set_num_threads(self, eager_splitting):
        """Test setting number of threads."""
        set_num_threads(2)
        assert get_num_threads() == 2
        assert get_settings().parallel_depth == 2
        assert into_stream(range(100), parallel=True).reduce(lambda: 0, operator.add) == sum(range(100))

    def test_single_thread_never_offers_work(self):
        """Test that one thread means no parallel depth."""
        assert SplitSettings(num_threads=1).parallel_depth == 0
        assert SplitSettings(num_threads=64).parallel_depth == 4

    def test_invalid_values(self, eager_splitting):
        """Test that invalid settings are refused and leave the old ones."""
        with pytest.raises(ValueError):
            set_num_threads(0)
        with pytest.raises(ValueError):
            configure(min_split_size=0)
        with pytest.raises(ValueError):
            configure(max_depth=0)
        with pytest.raises(TypeError):
            configure(chunk_size=5)
        assert get_settings() == eager_splitting

    def test_configure_keeps_other_settings(self, eager_splitting):
        """Test that configure only changes what it is given."""
        updated = configure(max_depth=3)
        assert updated.max_depth == 3
        assert updated.min_split_size == 1
        assert updated.num_threads == 4

    def test_threads_from_environment(self, monkeypatch):
        """Test reading the thread count from the environment."""
        monkeypatch.setenv("SPLITITER_NUM_THREADS", "3")
        assert threads_from_environment() == 3

    @pytest.mark.parametrize("value", ["many", "0"])
    def test_invalid_environment_value(self, monkeypatch, caplog, value):
        """Test that an unusable thread count falls back with a warning."""
        monkeypatch.setenv("SPLITITER_NUM_THREADS", value)
        with caplog.at_level(logging.WARNING, logger="splititer.config"):
            threads = threads_from_environment()

        assert threads >= 1
        assert "SPLITITER_NUM_THREADS" in caplog.text
