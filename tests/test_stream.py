"""
Tests for streams: iteration, intermediate operations and close handling.
"""

import operator

import pytest

from splititer import (
    Characteristic,
    ListSpliterator,
    Stream,
    accumulate,
    cross_product,
    cycle,
    filtering_all_max,
    filtering_max_keys,
    into_stream,
)


class Closable:
    """An iterable source counting how often it was closed."""

    def __init__(self, items):
        self.items = list(items)
        self.closed = 0

    def __iter__(self):
        return iter(self.items)

    def close(self):
        self.closed += 1


class TestIteration:
    """Tests for using a stream as a Python iterator."""

    def test_for_loop(self):
        """Test iterating a stream with a for loop."""
        assert [x for x in into_stream([1, 2, 3])] == [1, 2, 3]

    def test_next_after_exhaustion(self):
        """Test that an exhausted stream keeps raising StopIteration."""
        stream = into_stream([1])
        assert next(stream) == 1
        with pytest.raises(StopIteration):
            next(stream)
        with pytest.raises(StopIteration):
            next(stream)

    def test_stream_from_spliterator(self):
        """Test wrapping a spliterator directly."""
        assert Stream(ListSpliterator("ab")).to_list() == ["a", "b"]

    def test_spliterator_handoff(self):
        """Test that the spliterator of a derived stream is the operator's."""
        spliterator = cross_product([1, 2]).spliterator()
        assert spliterator.estimate_size() == 4
        assert spliterator.has_characteristics(Characteristic.ORDERED)


class TestIntermediateOperations:
    """Tests for map, filter, flat_map and limit."""

    def test_map(self):
        """Test mapping elements."""
        assert into_stream([1, 2, 3]).map(lambda x: x * 10).to_list() == [10, 20, 30]

    def test_filter(self):
        """Test filtering elements."""
        result = into_stream(range(10)).filter(lambda x: x % 3 == 0).to_list()
        assert result == [0, 3, 6, 9]

    def test_flat_map(self):
        """Test flattening mapped iterables."""
        result = into_stream(["ab", "", "c"]).flat_map(list).to_list()
        assert result == ["a", "b", "c"]

    def test_limit(self):
        """Test truncating a stream."""
        assert into_stream(range(100)).limit(3).to_list() == [0, 1, 2]
        assert into_stream(range(2)).limit(5).to_list() == [0, 1]
        assert into_stream(range(2)).limit(0).to_list() == []

    def test_negative_limit(self):
        """Test that a negative limit is refused."""
        with pytest.raises(ValueError):
            into_stream([1]).limit(-1)

    def test_chained_operators(self):
        """Test operators composed on top of each other."""
        result = (
            cycle([3, 1, 2])
            .limit(9)
            .map(lambda x: x * 2)
            .filter(lambda x: x > 2)
            .to_list()
        )
        assert result == [6, 4, 6, 4, 6, 4]

    def test_operator_on_operator(self):
        """Test feeding one operator's stream into another."""
        pairs = cross_product([1, 2, 3]).map(lambda pair: pair.key * pair.value)
        assert filtering_all_max(pairs).to_list() == [9]

    def test_terminal_operations(self):
        """Test count, reduce and for_each."""
        assert into_stream(range(5)).count() == 5
        assert into_stream(range(5)).reduce(lambda: 0, operator.add) == 10

        seen = []
        into_stream("xyz").for_each(seen.append)
        assert seen == ["x", "y", "z"]


class TestSingleUse:
    """Tests for the one-shot nature of streams."""

    def test_second_terminal_operation(self):
        """Test that a consumed stream cannot be consumed again."""
        stream = into_stream([1, 2])
        stream.to_list()
        with pytest.raises(RuntimeError):
            stream.to_list()

    def test_derive_twice(self):
        """Test that a stream can only feed one pipeline."""
        stream = into_stream([1, 2])
        stream.map(str)
        with pytest.raises(RuntimeError):
            stream.filter(bool)

    def test_operator_links_source(self):
        """Test that an operator consumes its source stream."""
        source = into_stream([1, 2])
        accumulate(source, operator.add)
        with pytest.raises(RuntimeError):
            source.to_list()

    def test_use_after_close(self):
        """Test that a closed stream cannot be used."""
        stream = into_stream([1])
        stream.close()
        with pytest.raises(RuntimeError):
            stream.to_list()
        with pytest.raises(RuntimeError):
            stream.on_close(lambda: None)


class TestClose:
    """Tests for close handlers and their propagation."""

    def test_handlers_run_once_in_order(self):
        """Test that handlers run in registration order, once."""
        calls = []
        stream = into_stream([1]).on_close(lambda: calls.append(1))
        stream.on_close(lambda: calls.append(2))

        stream.close()
        stream.close()
        assert calls == [1, 2]

    def test_context_manager(self):
        """Test closing with a with block."""
        source = Closable([1, 2])
        with into_stream(source) as stream:
            assert stream.to_list() == [1, 2]
        assert source.closed == 1

    @pytest.mark.parametrize(
        "build",
        [
            cycle,
            cross_product,
            lambda s: filtering_all_max(s),
            lambda s: accumulate(s, operator.add),
        ],
    )
    def test_derived_stream_closes_source(self, build):
        """Test that closing an operator's stream closes its source once."""
        source = Closable([1, 2, 3])
        derived = build(source)

        derived.close()
        derived.close()
        assert source.closed == 1

    @pytest.mark.parametrize(
        "build",
        [
            cycle,
            lambda s: accumulate(s, operator.add),
        ],
    )
    def test_rejected_source_is_closed(self, build):
        """Test that a source refused by an operator is closed."""
        closed = []
        source = into_stream({1, 2, 3}).on_close(lambda: closed.append("source"))
        with pytest.raises(ValueError):
            build(source)
        assert closed == ["source"]

    def test_invalid_argument_leaves_stream_usable(self):
        """Test that a bad count fails before the source stream is touched."""
        stream = into_stream([3, 1, 2])
        with pytest.raises(ValueError):
            filtering_max_keys(stream, 0)
        assert filtering_max_keys(stream, 1).to_list() == [3]

    def test_close_propagates_through_stream_chain(self):
        """Test close propagation from a mapped operator stream to the origin."""
        closed = []
        origin = into_stream([(1, 2), (3, 4)]).on_close(lambda: closed.append("origin"))
        derived = cross_product(origin).map(lambda pair: pair.key)

        derived.close()
        assert closed == ["origin"]

    def test_single_failure_is_raised(self):
        """Test that a failing handler's exception is raised after all ran."""
        calls = []

        def fail():
            raise OSError("disk gone")

        stream = into_stream([1]).on_close(fail).on_close(lambda: calls.append("ran"))
        with pytest.raises(OSError, match="disk gone"):
            stream.close()
        assert calls == ["ran"]

    def test_several_failures_are_grouped(self):
        """Test that several failing handlers are reported together."""

        def fail_first():
            raise ValueError("first")

        def fail_second():
            raise KeyError("second")

        stream = into_stream([1]).on_close(fail_first).on_close(fail_second)
        with pytest.raises(ExceptionGroup) as info:
            stream.close()
        assert len(info.value.exceptions) == 2
