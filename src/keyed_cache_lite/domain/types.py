"""Shared type aliases and enums used across the cache."""
from __future__ import annotations

from enum import Enum, auto
from typing import Callable, TypeAlias

CacheKey: TypeAlias = str
KeyPredicate: TypeAlias = Callable[[str], bool]


class RemovalStrategy(Enum):
    """How a bulk removal walks the table.

    ITERATE_KEYS: visit each requested key and delete it. Cost grows
        with the size of the key set.
    SCAN_CACHE: visit each cached entry once and test it for membership.
        Cost grows with the size of the cache.
    AUTO: pick one of the two per call, by comparing the key set with
        the current cache size.
    """
    AUTO = auto()
    ITERATE_KEYS = auto()
    SCAN_CACHE = auto()
