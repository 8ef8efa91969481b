"""Cache adapters for CachePort.

- InMemoryCache: bounded TTL cache used for directions responses
- NullCache: never stores anything
"""

from .memory_cache import InMemoryCache
from .null_cache import NullCache

__all__ = ["InMemoryCache", "NullCache"]
