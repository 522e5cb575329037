"""Striped hash map: the cache table split across N locked dicts.

Each key lives in stripe ``hash(key) & (N - 1)``. A caller only ever
locks the stripe its key falls in, so puts on keys in different stripes
run side by side and a get never waits on a writer elsewhere in the table.

N must be a power of two so the stripe index is a bitmask rather than a
modulo.

Bulk removal comes in two shapes:
  - delete_many(keys): bucket the requested keys by stripe, then lock
    each touched stripe once and pop its keys.
  - delete_matching(predicate): snapshot each stripe's keys, run the
    predicate with no lock held, then write-lock the stripe and pop the
    keys that passed.

Both hold at most one stripe lock at a time. A concurrent reader may see
some of the targeted keys gone and others still present, but any single
key is either fully there or fully gone.
"""
from __future__ import annotations

import threading
from collections import defaultdict
from typing import Callable, Iterable, TypeVar

from keyed_cache_lite.concurrency.rwlock import ReadWriteLock
from keyed_cache_lite.domain.errors import RemovalCancelled

K = TypeVar("K")
V = TypeVar("V")

_MISSING = object()


class StripedMap:
    """Thread-safe hash map with one read-write lock per stripe.

    Args:
        num_stripes: Number of lock stripes (default 16, must be power of 2).
    """

    def __init__(self, num_stripes: int = 16) -> None:
        if num_stripes <= 0 or (num_stripes & (num_stripes - 1)) != 0:
            raise ValueError("num_stripes must be a positive power of 2")
        self._num_stripes = num_stripes
        self._mask = num_stripes - 1
        self._stripes: list[dict] = [{} for _ in range(num_stripes)]
        self._locks: list[ReadWriteLock] = [
            ReadWriteLock() for _ in range(num_stripes)
        ]

    @property
    def num_stripes(self) -> int:
        return self._num_stripes

    def get(self, key: K, default: V | None = None) -> V | None:
        idx = self._stripe_index(key)
        with self._locks[idx].read():
            return self._stripes[idx].get(key, default)

    def put(self, key: K, value: V) -> None:
        idx = self._stripe_index(key)
        with self._locks[idx].write():
            self._stripes[idx][key] = value

    def delete(self, key: K) -> bool:
        """Remove one key. Returns True if it was present."""
        idx = self._stripe_index(key)
        with self._locks[idx].write():
            stripe = self._stripes[idx]
            if key in stripe:
                del stripe[key]
                return True
            return False

    def contains(self, key: K) -> bool:
        idx = self._stripe_index(key)
        with self._locks[idx].read():
            return key in self._stripes[idx]

    def size(self) -> int:
        """Entries across all stripes.

        Stripes are counted one after another under their own read lock,
        so writers active during the count make the total approximate.
        """
        total = 0
        for idx in range(self._num_stripes):
            with self._locks[idx].read():
                total += len(self._stripes[idx])
        return total

    def keys(self) -> list[K]:
        """Snapshot of all keys, stripe by stripe (not atomic)."""
        result: list[K] = []
        for idx in range(self._num_stripes):
            with self._locks[idx].read():
                result.extend(self._stripes[idx])
        return result

    def delete_many(
        self,
        keys: Iterable[K],
        cancel: threading.Event | None = None,
    ) -> int:
        """Delete each of ``keys`` that is present. Returns the count removed.

        Keys are grouped by stripe first so every stripe is write-locked
        at most once. ``cancel`` is checked before each key; once it is
        set, RemovalCancelled is raised carrying the count so far.
        """
        by_stripe: dict[int, list[K]] = defaultdict(list)
        for key in keys:
            by_stripe[self._stripe_index(key)].append(key)

        removed = 0
        for idx, bucket in by_stripe.items():
            with self._locks[idx].write():
                stripe = self._stripes[idx]
                for key in bucket:
                    if cancel is not None and cancel.is_set():
                        raise RemovalCancelled(removed)
                    if key in stripe:
                        del stripe[key]
                        removed += 1
        return removed

    def delete_matching(
        self,
        predicate: Callable[[K], bool],
        cancel: threading.Event | None = None,
    ) -> int:
        """Delete every entry whose key satisfies ``predicate``.

        One pass over the table. Each stripe's keys are snapshotted under
        the read lock and the predicate runs once per key with no lock
        held, so it may read this map and slow predicates never stall
        readers. Keys that pass are popped under the write lock; a key
        removed concurrently in between is not counted.

        ``cancel`` is checked before each key. Keys that already passed
        the predicate are removed before RemovalCancelled is raised.
        """
        removed = 0
        for idx in range(self._num_stripes):
            with self._locks[idx].read():
                snapshot = list(self._stripes[idx])
            matched: list[K] = []
            for key in snapshot:
                if cancel is not None and cancel.is_set():
                    removed += self._pop_all(idx, matched)
                    raise RemovalCancelled(removed)
                if predicate(key):
                    matched.append(key)
            removed += self._pop_all(idx, matched)
        return removed

    def _pop_all(self, idx: int, keys: list[K]) -> int:
        if not keys:
            return 0
        popped = 0
        with self._locks[idx].write():
            stripe = self._stripes[idx]
            for key in keys:
                if stripe.pop(key, _MISSING) is not _MISSING:
                    popped += 1
        return popped

    def clear(self) -> int:
        """Empty every stripe. Returns the number of entries dropped."""
        removed = 0
        for idx in range(self._num_stripes):
            with self._locks[idx].write():
                removed += len(self._stripes[idx])
                self._stripes[idx].clear()
        return removed

    def _stripe_index(self, key: K) -> int:
        return hash(key) & self._mask
