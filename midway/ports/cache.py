"""Cache port - Key/value store injected into network adapters.

A resolution issues two directions queries per sample, and repeated
resolutions over the same endpoints ask most of them again. Adapters
receive a cache through this port rather than keeping module state.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol


class CachePort(Protocol):
    """Port for caching adapter results.

    Implementations:
    - adapters/cache/memory_cache.py (InMemoryCache)
    - adapters/cache/null_cache.py (NullCache)
    """

    def get(self, key: str) -> Optional[Any]:
        """Cached value, or None when absent or expired."""
        ...

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store a value, optionally with its own lifetime in seconds."""
        ...

    def get_or_compute(self, key: str, compute_fn: Callable[[], Any]) -> Any:
        """Cached value, or ``compute_fn()`` stored and returned."""
        ...

    def invalidate(self, key: str) -> bool:
        """Drop one entry; True if it was present."""
        ...

    def clear(self) -> int:
        """Drop every entry and return how many there were."""
        ...

    def size(self) -> int:
        ...
