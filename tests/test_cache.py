"""
Tests for LazySlot / KeyedSlots — at-most-once memoization

These tests validate:
- Values are computed once and reused
- Empty values count as populated
- Failed computations leave the slot empty
- Concurrent first access computes once
"""

import threading
import time

import pytest

from svnlook.core.cache import LazySlot, KeyedSlots


class Counter:
    """Callable that counts invocations and returns a fixed value."""

    def __init__(self, value, delay=0.0):
        self.value = value
        self.delay = delay
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        return self.value


class TestLazySlot:
    """Single-value slots."""

    def test_computes_once(self):
        """Second get reuses the first result."""
        slot = LazySlot()
        compute = Counter("value")
        assert slot.get(compute) == "value"
        assert slot.get(compute) == "value"
        assert compute.calls == 1

    @pytest.mark.parametrize("empty", ["", [], 0, None, ()])
    def test_empty_value_is_cached(self, empty):
        """Falsy results are cached, not recomputed."""
        slot = LazySlot()
        compute = Counter(empty)
        slot.get(compute)
        slot.get(compute)
        assert compute.calls == 1
        assert slot.populated

    def test_not_populated_initially(self):
        assert LazySlot().populated is False

    def test_failure_leaves_slot_empty(self):
        """An exception propagates and the next call retries."""
        slot = LazySlot()

        def boom():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            slot.get(boom)
        assert slot.populated is False
        assert slot.get(lambda: 7) == 7

    def test_concurrent_first_access(self):
        """Racing threads trigger a single computation."""
        slot = LazySlot()
        compute = Counter("shared", delay=0.05)
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(slot.get(compute))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert compute.calls == 1
        assert results == ["shared"] * 8


class TestKeyedSlots:
    """Per-key slots."""

    def test_independent_keys(self):
        """Each key computes separately."""
        slots = KeyedSlots()
        a = Counter({"k": "a"})
        b = Counter({"k": "b"})
        assert slots.get("a", a) == {"k": "a"}
        assert slots.get("b", b) == {"k": "b"}
        assert slots.get("a", a) == {"k": "a"}
        assert (a.calls, b.calls) == (1, 1)

    def test_membership_tracks_population(self):
        """A key is 'in' the slots only once populated."""
        slots = KeyedSlots()
        slots.slot("pending")
        assert "pending" not in slots
        slots.get("done", lambda: 1)
        assert "done" in slots
        assert list(slots) == ["done"]
        assert len(slots) == 1

    def test_same_slot_returned(self):
        slots = KeyedSlots()
        assert slots.slot("x") is slots.slot("x")
