"""Shared fixtures for the cache tests."""
from __future__ import annotations

import pytest

from keyed_cache_lite.cache.keyed_cache import ConcurrentKeyedCache


def fill(cache: ConcurrentKeyedCache, n: int, prefix: str = "key") -> list[str]:
    """Put n entries ``{prefix}-{i}`` -> i and return their keys."""
    keys = [f"{prefix}-{i}" for i in range(n)]
    for i, key in enumerate(keys):
        cache.put(key, i)
    return keys


@pytest.fixture()
def cache() -> ConcurrentKeyedCache:
    return ConcurrentKeyedCache()


@pytest.fixture()
def xyz_cache() -> ConcurrentKeyedCache:
    c = ConcurrentKeyedCache()
    c.put("x", 1)
    c.put("y", 2)
    c.put("z", 3)
    return c


@pytest.fixture()
def thousand_cache() -> ConcurrentKeyedCache:
    c = ConcurrentKeyedCache(num_stripes=16)
    fill(c, 1000)
    return c
