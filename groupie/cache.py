"""Expiring in-memory cache for upstream API payloads."""
from __future__ import annotations

from threading import Lock
from time import monotonic
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from . import config

Clock = Callable[[], float]


class TTLCache:
    """Thread-safe key/value cache whose entries expire after a fixed TTL.

    A TTL of zero or None keeps entries until ``invalidate`` or ``clear``.
    Expired entries are purged on every write, and once ``max_entries`` live
    entries are held the oldest one is evicted to make room.
    ``None`` values are never stored, so a miss and a cached ``None`` cannot
    be confused.
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = config.CACHE_DEFAULT_TTL_SECONDS,
        *,
        max_entries: Optional[int] = config.CACHE_MAX_ENTRIES,
        clock: Clock = monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._lock = Lock()
        self._entries: Dict[Hashable, Tuple[Any, float]] = {}

    def get(self, key: Hashable) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at and expires_at <= self._clock():
                del self._entries[key]
                return None
            return value

    def set(self, key: Hashable, value: Any) -> None:
        if value is None:
            return
        expires_at = self._clock() + self.ttl_seconds if self.ttl_seconds else 0.0
        with self._lock:
            self._purge_expired()
            # re-inserting moves the key to the newest position
            self._entries.pop(key, None)
            if self.max_entries:
                while len(self._entries) >= self.max_entries:
                    del self._entries[next(iter(self._entries))]
            self._entries[key] = (value, expires_at)

    def get_or_set(self, key: Hashable, factory: Callable[[], Any]) -> Any:
        """Return the cached value or compute, store and return a fresh one.

        The factory runs outside the lock; concurrent misses may both call it.
        Exceptions from the factory propagate and nothing is cached.
        """

        existing = self.get(key)
        if existing is not None:
            return existing
        value = factory()
        self.set(key, value)
        return value

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    # Callers must hold the lock.
    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._entries.items() if expires_at and expires_at <= now]
        for key in expired:
            del self._entries[key]

    def __len__(self) -> int:
        now = self._clock()
        with self._lock:
            return sum(1 for _, expires_at in self._entries.values() if not expires_at or expires_at > now)


def build_cache_key(*parts: Hashable) -> str:
    return "::".join(str(part) for part in parts)
