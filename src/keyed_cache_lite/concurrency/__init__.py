"""Locking primitives behind the cache table.

  - ReadWriteLock: multiple readers OR one writer, writer-preferring
  - StripedMap: hash-partitioned dicts, one ReadWriteLock per stripe
"""
from keyed_cache_lite.concurrency.rwlock import ReadWriteLock
from keyed_cache_lite.concurrency.striped_map import StripedMap

__all__ = [
    "ReadWriteLock",
    "StripedMap",
]
