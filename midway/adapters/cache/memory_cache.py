"""In-memory cache with optional TTL and bounded size.

Used by the directions adapter to avoid re-querying legs that a
recent resolution already asked for. Entries expire after the
configured TTL; when the cache is full the oldest entry is evicted.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple


_NEVER = float("inf")


@dataclass
class InMemoryCache:
    """Bounded TTL cache safe to share between threads.

    Implements CachePort.

    Attributes:
        default_ttl_seconds: Lifetime of an entry, None to keep forever
        max_size: Entry limit, None for unbounded
        name: Label used in log records
        clock: Time source in seconds, injectable for tests

    Example:
        cache = InMemoryCache(name="directions", default_ttl_seconds=300)
        cache.set("walking:2.350000,48.850000;4.830000,45.760000", route)
    """

    default_ttl_seconds: Optional[float] = None
    max_size: Optional[int] = None
    name: str = "cache"
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)

    _entries: "OrderedDict[str, Tuple[Any, float]]" = field(
        default_factory=OrderedDict, init=False, repr=False
    )
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)
    _hits: int = field(default=0, init=False, repr=False)
    _misses: int = field(default=0, init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(f"{__name__}.{self.name}")

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self.clock() > entry[1]:
                del self._entries[key]
                self._logger.debug("Entry expired", extra={"key": key})
                entry = None
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry[0]

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store ``value``; ``ttl`` overrides the default lifetime."""
        lifetime = self.default_ttl_seconds if ttl is None else ttl
        expires_at = _NEVER if lifetime is None else self.clock() + lifetime
        with self._lock:
            if key in self._entries:
                self._entries[key] = (value, expires_at)
                return
            if self.max_size is not None:
                while self._entries and len(self._entries) >= self.max_size:
                    evicted, _ = self._entries.popitem(last=False)
                    self._logger.debug("Entry evicted", extra={"key": evicted})
            self._entries[key] = (value, expires_at)

    def get_or_compute(self, key: str, compute_fn: Callable[[], Any]) -> Any:
        cached = self.get(key)
        if cached is None:
            cached = compute_fn()
            self.set(key, cached)
        return cached

    def invalidate(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        with self._lock:
            dropped = len(self._entries)
            self._entries.clear()
            self._hits = self._misses = 0
        self._logger.info("Cache cleared", extra={"entries": dropped})
        return dropped

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            lookups = self._hits + self._misses
            return {
                "size": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate_percent": round(100 * self._hits / lookups, 1) if lookups else 0.0,
            }
