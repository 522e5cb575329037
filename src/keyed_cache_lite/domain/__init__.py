"""Domain types for keyed-cache-lite.

Re-exports the public types for convenient access:
    from keyed_cache_lite.domain import CacheConfig, InvalidArgument
"""
from keyed_cache_lite.domain.config import CacheConfig
from keyed_cache_lite.domain.errors import CacheError, InvalidArgument, RemovalCancelled
from keyed_cache_lite.domain.types import CacheKey, KeyPredicate, RemovalStrategy

__all__ = [
    "CacheConfig",
    "CacheError",
    "InvalidArgument",
    "RemovalCancelled",
    "CacheKey",
    "KeyPredicate",
    "RemovalStrategy",
]
