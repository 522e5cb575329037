"""Asyncio facade over ConcurrentKeyedCache.

Single-key operations hold a stripe lock for one dict operation, which is
short enough to run directly on the event loop. Bulk removals can walk
millions of entries, so they go to a worker thread via asyncio.to_thread()
and the loop stays responsive.

Cancelling the awaiting task sets a threading.Event that the worker
checks before each key. The worker stops at the next key boundary:
entries already removed stay removed and the rest are left alone.
"""
from __future__ import annotations

import asyncio
import threading
from typing import Any, Iterable

from keyed_cache_lite.cache.keyed_cache import ConcurrentKeyedCache
from keyed_cache_lite.domain.config import CacheConfig
from keyed_cache_lite.domain.types import CacheKey, KeyPredicate, RemovalStrategy


class AsyncKeyedCache:
    """Task-friendly wrapper sharing the thread-safe engine.

    Args:
        cache: Existing cache to wrap. Threads and tasks may then use the
            same table. Created from ``config`` if None.
        config: Settings for a newly created cache.
    """

    def __init__(
        self,
        cache: ConcurrentKeyedCache | None = None,
        config: CacheConfig | None = None,
    ) -> None:
        if cache is not None and config is not None:
            raise ValueError("Pass either cache or config, not both")
        self._cache = cache or ConcurrentKeyedCache(config)

    @property
    def cache(self) -> ConcurrentKeyedCache:
        """The underlying thread-safe cache."""
        return self._cache

    def put(self, key: CacheKey, value: Any) -> None:
        self._cache.put(key, value)

    def get(self, key: CacheKey, default: Any = None) -> Any:
        return self._cache.get(key, default)

    def contains(self, key: CacheKey) -> bool:
        return self._cache.contains(key)

    def remove(self, key: CacheKey) -> bool:
        return self._cache.remove(key)

    def size(self) -> int:
        return self._cache.size()

    async def bulk_remove(
        self,
        keys: Iterable[CacheKey],
        *,
        strategy: RemovalStrategy | None = None,
    ) -> int:
        """Run ConcurrentKeyedCache.bulk_remove() off the event loop."""
        cancel = threading.Event()
        try:
            return await asyncio.to_thread(
                self._cache.bulk_remove, keys, strategy=strategy, cancel=cancel
            )
        except asyncio.CancelledError:
            cancel.set()
            raise

    async def remove_where(self, predicate: KeyPredicate) -> int:
        """Run ConcurrentKeyedCache.remove_where() off the event loop."""
        cancel = threading.Event()
        try:
            return await asyncio.to_thread(
                self._cache.remove_where, predicate, cancel=cancel
            )
        except asyncio.CancelledError:
            cancel.set()
            raise
