"""
Lazy slots — At-most-once memoization for session queries

Each cached query owns one slot. A slot records whether it has been
populated with an explicit sentinel, so an empty log message, a
zero-length listing or an empty change set is a cached value like any
other.

Thread Safety:
- Population is serialized per slot (double-checked under a lock)
- Concurrent first access computes exactly once
- Reads after population take no lock
"""

import threading
from typing import Any, Callable, Dict, Hashable, Iterator


_UNSET = object()


class LazySlot:
    """One lazily computed, never invalidated value."""

    __slots__ = ("_lock", "_value")

    def __init__(self):
        self._lock = threading.Lock()
        self._value: Any = _UNSET

    @property
    def populated(self) -> bool:
        return self._value is not _UNSET

    def get(self, compute: Callable[[], Any]) -> Any:
        """
        Return the cached value, computing it on first access.

        If compute raises, the slot stays unpopulated and the error
        propagates; a later call will try again.
        """
        value = self._value
        if value is not _UNSET:
            return value

        with self._lock:
            if self._value is _UNSET:
                self._value = compute()
            return self._value


class KeyedSlots:
    """A LazySlot per key, created on demand."""

    def __init__(self):
        self._lock = threading.Lock()
        self._slots: Dict[Hashable, LazySlot] = {}

    def slot(self, key: Hashable) -> LazySlot:
        slot = self._slots.get(key)
        if slot is not None:
            return slot

        with self._lock:
            return self._slots.setdefault(key, LazySlot())

    def get(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        return self.slot(key).get(compute)

    def __contains__(self, key: Hashable) -> bool:
        slot = self._slots.get(key)
        return slot is not None and slot.populated

    def __iter__(self) -> Iterator[Hashable]:
        return (key for key, slot in list(self._slots.items()) if slot.populated)

    def __len__(self) -> int:
        return sum(1 for _ in self)
