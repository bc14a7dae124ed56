"""Thread-safe TTL cache for flow simulation results.

One dict guarded by one reader/writer lock. Expiry is tracked in a min-heap
ordered by deadline and swept on every write, so no timer is left behind
per entry; reads skip anything past its deadline even if not yet swept.
"""

import heapq
import itertools
import threading
import time
from contextlib import contextmanager
from typing import Callable, Generic, Iterator, Optional, TypeVar

from ..core.logging import get_logger

log = get_logger("flow_cache")

V = TypeVar("V")


class ReadWriteLock:
    """Many concurrent readers or one writer."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._readers:
                self._cond.wait()
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class FlowCache(Generic[V]):
    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        if ttl <= 0:
            raise ValueError(f"TTL must be positive, got {ttl}")
        self.ttl = ttl
        self._clock = clock
        self._lock = ReadWriteLock()
        self._entries: dict[str, tuple[float, V]] = {}
        self._expiry: list[tuple[float, int, str]] = []
        self._seq = itertools.count()

    def get(self, key: str) -> Optional[V]:
        now = self._clock()
        with self._lock.read_locked():
            entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if now >= expires_at:
            return None
        return value

    def put(self, key: str, value: V) -> None:
        now = self._clock()
        expires_at = now + self.ttl
        with self._lock.write_locked():
            self._entries[key] = (expires_at, value)
            heapq.heappush(self._expiry, (expires_at, next(self._seq), key))
            self._evict_locked(now)

    def evict_expired(self) -> int:
        """Drop every entry past its deadline; returns how many were dropped."""
        now = self._clock()
        with self._lock.write_locked():
            return self._evict_locked(now)

    def _evict_locked(self, now: float) -> int:
        evicted = 0
        while self._expiry and self._expiry[0][0] <= now:
            expires_at, _, key = heapq.heappop(self._expiry)
            entry = self._entries.get(key)
            # Overwritten keys leave a stale heap record behind
            if entry is not None and entry[0] == expires_at:
                del self._entries[key]
                evicted += 1
        if evicted:
            log.debug("Evicted %d expired flow result(s)", evicted)
        return evicted

    def clear(self) -> None:
        with self._lock.write_locked():
            self._entries = {}
            self._expiry = []

    def __len__(self) -> int:
        now = self._clock()
        with self._lock.read_locked():
            return sum(1 for expires_at, _ in self._entries.values() if now < expires_at)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
