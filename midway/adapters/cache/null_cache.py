"""Cache that stores nothing.

Lets a network adapter run uncached, e.g. in tests that count the
requests it sends.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


@dataclass
class NullCache:
    """CachePort implementation where every lookup misses."""

    name: str = "null"

    def get(self, key: str) -> Optional[Any]:
        return None

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        return None

    def get_or_compute(self, key: str, compute_fn: Callable[[], Any]) -> Any:
        return compute_fn()

    def invalidate(self, key: str) -> bool:
        return False

    def clear(self) -> int:
        return 0

    def size(self) -> int:
        return 0

    def stats(self) -> Dict[str, Any]:
        return {"size": 0, "hits": 0, "misses": 0, "hit_rate_percent": 0.0}
