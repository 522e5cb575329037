"""Concurrent keyed cache with bulk removal.

ConcurrentKeyedCache is the public face of the engine: it validates
arguments, picks a bulk-removal strategy and delegates storage to a
StripedMap. All locking lives below this layer; callers never see it.

Bulk removal strategies:
  - ITERATE_KEYS: cost ~ len(keys). Best when deleting a handful of keys
    from a large cache.
  - SCAN_CACHE: cost ~ size(). Best when the key set is comparable to
    the cache, because each entry is visited once instead of hashing
    every requested key (many of which may be absent).
  - AUTO compares len(keys) with scan_ratio * size() on each call.

Neither strategy makes the whole removal atomic. Each key goes away
under its stripe's write lock, so a concurrent get on that key returns
the old value or the default, never anything in between.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Iterable

from keyed_cache_lite.concurrency.striped_map import StripedMap
from keyed_cache_lite.domain.config import CacheConfig
from keyed_cache_lite.domain.errors import InvalidArgument, RemovalCancelled
from keyed_cache_lite.domain.types import CacheKey, KeyPredicate, RemovalStrategy

log = logging.getLogger(__name__)


def _check_key(key: Any) -> None:
    if key is None:
        raise InvalidArgument("key must not be None")
    if not isinstance(key, str):
        raise InvalidArgument(f"key must be a str, got {type(key).__name__}")


def _collect_keys(keys: Any) -> frozenset[CacheKey]:
    """Validate a bulk key collection up front and freeze it.

    A bare string is rejected: iterating it would yield characters.
    """
    if keys is None:
        raise InvalidArgument("keys must not be None")
    if isinstance(keys, (str, bytes)):
        raise InvalidArgument("keys must be a collection of str, not a single string")
    try:
        frozen = frozenset(keys)
    except TypeError as exc:
        raise InvalidArgument(f"keys must be an iterable of str: {exc}") from exc
    for key in frozen:
        _check_key(key)
    return frozen


class ConcurrentKeyedCache:
    """Thread-safe str -> object cache.

    Args:
        config: Full settings. Mutually exclusive with the keyword
            shortcuts below.
        num_stripes: Lock stripes (power of 2, default 16).
        scan_ratio: AUTO threshold, see CacheConfig.
        strategy: Default bulk-removal strategy.
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        *,
        num_stripes: int | None = None,
        scan_ratio: float | None = None,
        strategy: RemovalStrategy | None = None,
    ) -> None:
        overrides = {
            name: value
            for name, value in (
                ("num_stripes", num_stripes),
                ("scan_ratio", scan_ratio),
                ("strategy", strategy),
            )
            if value is not None
        }
        if config is not None and overrides:
            raise ValueError("Pass either config or keyword settings, not both")
        self._config = config or CacheConfig(**overrides)
        self._table: StripedMap = StripedMap(self._config.num_stripes)

    @property
    def config(self) -> CacheConfig:
        return self._config

    def put(self, key: CacheKey, value: Any) -> None:
        """Insert or overwrite. Last completed write wins."""
        _check_key(key)
        self._table.put(key, value)

    def get(self, key: CacheKey, default: Any = None) -> Any:
        """Current value for key, or ``default`` when absent.

        A stored None is indistinguishable from absence here; use
        contains() when that matters.
        """
        _check_key(key)
        return self._table.get(key, default)

    def contains(self, key: CacheKey) -> bool:
        _check_key(key)
        return self._table.contains(key)

    def remove(self, key: CacheKey) -> bool:
        """Delete key if present. Idempotent; True if an entry went away."""
        _check_key(key)
        return self._table.delete(key)

    def bulk_remove(
        self,
        keys: Iterable[CacheKey],
        *,
        strategy: RemovalStrategy | None = None,
        cancel: threading.Event | None = None,
    ) -> int:
        """Remove every entry whose key is in ``keys``.

        Absent keys are ignored and an empty collection is a no-op.
        Every member is validated before anything is removed.

        Args:
            keys: Collection of str keys (set, frozenset, list, ...).
            strategy: Per-call override of the configured strategy.
            cancel: When set mid-pass, stops before the next key and
                raises RemovalCancelled. Keys already removed stay removed.

        Returns:
            Number of entries actually removed.
        """
        targets = _collect_keys(keys)
        if not targets:
            return 0

        chosen = self._config.pick_strategy(len(targets), self._table.size(), strategy)
        log.debug("bulk_remove: %d keys requested, strategy=%s", len(targets), chosen.name)
        try:
            if chosen is RemovalStrategy.SCAN_CACHE:
                removed = self._table.delete_matching(targets.__contains__, cancel)
            else:
                removed = self._table.delete_many(targets, cancel)
        except RemovalCancelled as exc:
            log.warning("bulk_remove cancelled after %d of %d keys", exc.removed, len(targets))
            raise
        log.debug("bulk_remove: removed %d entries", removed)
        return removed

    def remove_where(
        self,
        predicate: KeyPredicate,
        *,
        cancel: threading.Event | None = None,
    ) -> int:
        """Remove every entry whose key satisfies ``predicate``.

        The predicate is called once per entry, in no particular order,
        with no lock held, so it may read the cache. If it raises, the
        error propagates and the entries removed so far stay removed.
        """
        if predicate is None or not callable(predicate):
            raise InvalidArgument("predicate must be callable")
        try:
            removed = self._table.delete_matching(predicate, cancel)
        except RemovalCancelled as exc:
            log.warning("remove_where cancelled after %d entries", exc.removed)
            raise
        log.debug("remove_where: removed %d entries", removed)
        return removed

    def clear(self) -> int:
        """Drop every entry. Returns how many were removed."""
        removed = self._table.clear()
        log.debug("clear: removed %d entries", removed)
        return removed

    def size(self) -> int:
        """Live entry count. Exact in isolation, approximate under writes."""
        return self._table.size()

    def keys(self) -> list[CacheKey]:
        """Snapshot of the current keys (not a point-in-time view)."""
        return self._table.keys()
