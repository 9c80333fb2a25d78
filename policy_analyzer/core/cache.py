"""
In-process expiring key/value cache.

Mirrors the small surface the rate limiter needs from a shared cache:
compute-on-miss reads with a per-entry TTL, and explicit deletes. Each
operation is atomic on its own; sequences of operations are not.
"""

import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple


class ExpiringCache:
    """
    Thread-safe dictionary whose entries expire after a per-entry TTL.

    Expired entries are dropped by a sweep that runs inside ``get`` at most
    once every ``sweep_interval`` seconds, so keys that are never read again
    do not accumulate.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None, sweep_interval: float = 60.0):
        self._clock = clock or time.monotonic
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self._sweep_interval = sweep_interval
        self._next_sweep = self._clock() + sweep_interval

    def get(self, key: str, factory: Callable[[], Any], ttl_seconds: float) -> Any:
        """
        Return the live value for ``key``.

        On a miss (absent or expired) the value is produced by ``factory``,
        stored with an expiry of ``ttl_seconds`` from now, and returned.
        """
        with self._lock:
            now = self._clock()
            if now >= self._next_sweep:
                self._sweep(now)

            entry = self._entries.get(key)
            if entry is not None and entry[1] > now:
                return entry[0]

            value = factory()
            self._entries[key] = (value, now + ttl_seconds)
            return value

    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns True when a live entry was removed."""
        with self._lock:
            entry = self._entries.pop(key, None)
            return entry is not None and entry[1] > self._clock()

    def expires_at(self, key: str) -> Optional[float]:
        """Expiry timestamp of a live entry, or None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry[1] <= self._clock():
                return None
            return entry[1]

    @property
    def stored_count(self) -> int:
        """Entries held in memory, expired ones included until the next sweep."""
        with self._lock:
            return len(self._entries)

    def _sweep(self, now: float) -> None:
        # Caller holds the lock.
        expired = [key for key, (_, expiry) in self._entries.items() if expiry <= now]
        for key in expired:
            del self._entries[key]
        self._next_sweep = now + self._sweep_interval

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for _, expiry in self._entries.values() if expiry > now)
