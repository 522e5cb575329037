"""The cache engine.

  - ConcurrentKeyedCache: thread-safe get/put/remove and bulk removal
  - AsyncKeyedCache: the same engine for asyncio callers, with bulk
    removals run in a worker thread and cancellable from the task
"""
from keyed_cache_lite.cache.async_cache import AsyncKeyedCache
from keyed_cache_lite.cache.keyed_cache import ConcurrentKeyedCache

__all__ = [
    "AsyncKeyedCache",
    "ConcurrentKeyedCache",
]
