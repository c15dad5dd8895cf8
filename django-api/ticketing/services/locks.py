"""Per-key mutual exclusion for records that are mutated concurrently."""

import threading
import weakref
from collections.abc import Hashable, Iterable, Iterator
from contextlib import ExitStack, contextmanager


class KeyedLocks:
    """Hands out one lock per key, created on first use.

    A key's lock lives only while some caller holds or waits on it.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def _lock_for(self, key: Hashable):
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            return lock

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        lock = self._lock_for(key)
        with lock:
            yield

    @contextmanager
    def hold_all(self, keys: Iterable[Hashable]) -> Iterator[None]:
        """Acquire several keys in sorted order so that callers cannot deadlock."""
        ordered = sorted(set(keys), key=str)
        with ExitStack() as stack:
            for key in ordered:
                stack.enter_context(self._lock_for(key))
            yield
