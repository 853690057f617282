import itertools

import pytest
from lazyutil import END, Sequence, InvalidPushbackError, NotAProducerError, LazyError

from conftest import CountingProducer


class TestPull:
    """Test pulling values out of a Sequence"""

    def test_pull_returns_values_then_end(self):
        """Values come out in producer order, then END for good"""
        seq = Sequence(CountingProducer([1, 2, 3]))

        assert [seq.pull(), seq.pull(), seq.pull()] == [1, 2, 3]
        assert seq.pull() is END
        assert seq.pull() is END
        assert seq.exhausted

    def test_exhaustion_is_sticky(self):
        """Producer is never called again once it reported END"""
        producer = CountingProducer([1])
        seq = Sequence(producer)

        assert seq.drain_all() == [1]
        assert producer.calls == 2, f"Expected 2 calls, got {producer.calls}"

        producer.items.append(99)
        for _ in range(3):
            assert seq.pull() is END
        assert producer.calls == 2, "Exhausted sequence must not call its producer"
        assert producer.items == [99]

    def test_shared_pending_collection(self):
        """Producer consuming a shared list is called once per value plus once for END"""
        pending = ["a", "b"]
        calls = []

        def producer():
            calls.append(1)
            return pending.pop(0) if pending else END

        seq = Sequence(producer)
        assert seq.drain_all() == ["a", "b"]
        assert len(calls) == 3

        pending.append("c")
        assert seq.pull() is END
        assert len(calls) == 3
        assert pending == ["c"], "Items added after exhaustion must not be consumed"

    def test_stop_iteration_ends_sequence(self):
        """An iterator's __next__ works as a producer"""
        seq = Sequence(iter([1, 2]).__next__)
        assert seq.drain_all() == [1, 2]
        assert seq.exhausted

    def test_none_is_a_legal_value(self):
        """None is data, not the end marker"""
        seq = Sequence.from_iterable([None, 0, "", None])
        assert seq.drain_all() == [None, 0, "", None]

    def test_from_iterable_is_lazy(self):
        """from_iterable pulls from the iterable on demand"""
        seen = []

        def gen():
            for i in range(5):
                seen.append(i)
                yield i

        seq = Sequence.from_iterable(gen())
        assert seen == []
        assert seq.pull() == 0
        assert seen == [0]

    def test_empty_sequence(self):
        """Sequence.empty() is exhausted from the start"""
        seq = Sequence.empty()
        assert seq.exhausted
        assert seq.pull() is END
        assert seq.drain_all() == []


class TestPushback:
    """Test pushing values back onto a Sequence"""

    def test_pushback_returned_next(self):
        """A pushed back value is returned by the next pull"""
        seq = Sequence(itertools.count().__next__)

        assert seq.pull() == 0
        seq.pushback("x")
        assert seq.pull() == "x"
        assert seq.pull() == 1, "Pushback must not disturb the producer"

    def test_pushback_is_lifo(self):
        """The latest pushed value comes out first"""
        seq = Sequence.from_iterable([10])
        seq.pushback(1).pushback(2).pushback(3)

        assert seq.drain_all() == [3, 2, 1, 10]

    def test_pushback_on_exhausted_sequence(self):
        """Pushed back values are honored even after exhaustion"""
        seq = Sequence.from_iterable([1])
        assert seq.drain_all() == [1]

        seq.pushback(5)
        assert seq.pull() == 5
        assert seq.pull() is END

    def test_pushback_end_rejected(self):
        """Pushing back END is a programming error"""
        seq = Sequence.from_iterable([1, 2])

        with pytest.raises(InvalidPushbackError):
            seq.pushback(END)

        with pytest.raises(ValueError):
            seq.pushback(END)

        assert seq.drain_all() == [1, 2], "Rejected pushback must not change the sequence"

    def test_pushback_none_allowed(self):
        """None can be pushed back like any value"""
        seq = Sequence.empty()
        seq.pushback(None)
        assert seq.pull() is None
        assert seq.pull() is END


class TestExhaustionProbe:
    """Test is_exhausted()"""

    def test_probe_is_non_destructive(self):
        """Probing keeps the probed value for the next pull"""
        producer = CountingProducer([1, 2])
        seq = Sequence(producer)

        assert seq.is_exhausted() is False
        assert producer.calls == 1
        assert seq.is_exhausted() is False
        assert producer.calls == 1, "Second probe should reuse the stashed value"
        assert seq.drain_all() == [1, 2]
        assert seq.is_exhausted() is True

    def test_probe_detects_end(self):
        """Probing an exhausted source reports True"""
        seq = Sequence.from_iterable([])
        assert seq.is_exhausted() is True
        assert seq.exhausted

    def test_probe_reports_flag_with_pending_pushback(self):
        """An exhausted producer stays exhausted while pushed back values wait"""
        seq = Sequence.empty()
        seq.pushback("late")
        assert seq.is_exhausted() is True
        assert seq.pull() == "late", "Probe must not drop the pushed back value"
        assert seq.pull() is END

    def test_probe_after_drain_and_pushback(self):
        """Pushing back onto a drained sequence does not reset the flag"""
        seq = Sequence.from_iterable([1])
        assert seq.drain_all() == [1]

        seq.pushback(5)
        assert seq.is_exhausted() is True
        assert seq.exhausted
        assert seq.pull() == 5

    def test_probe_with_pushback_on_live_source(self):
        """A pushback on a live source leaves it not exhausted"""
        seq = Sequence.from_iterable([1, 2])
        seq.pushback(0)
        assert seq.is_exhausted() is False
        assert seq.drain_all() == [0, 1, 2]


class TestConstruction:
    """Test building Sequences from different sources"""

    def test_not_a_producer(self):
        """Non-callable sources are rejected immediately"""
        for bad in (42, "text", [1, 2], None):
            with pytest.raises(NotAProducerError):
                Sequence(bad)

    def test_construction_error_hierarchy(self):
        """Construction errors are TypeErrors and LazyErrors"""
        with pytest.raises(TypeError):
            Sequence(3.14)
        with pytest.raises(LazyError):
            Sequence(object())

    def test_construction_error_logged(self, caplog):
        """Construction errors are logged before raising"""
        with pytest.raises(NotAProducerError):
            Sequence(42)
        assert "Cannot build a Sequence from 42" in caplog.text

    def test_iterator_protocol(self):
        """Sequences work with for loops and itertools"""
        seq = Sequence(itertools.count(1).__next__)
        assert list(itertools.islice(seq, 3)) == [1, 2, 3]

        seq2 = Sequence.from_iterable("ab")
        assert [c for c in seq2] == ["a", "b"]
        assert iter(seq2) is seq2

    def test_end_marker(self):
        """END is a falsy singleton with a readable repr"""
        assert not END
        assert repr(END) == "<END>"
        assert type(END)() is END
