"""Exceptions raised by the cache engine."""
from __future__ import annotations


class CacheError(Exception):
    """Base class for every error the cache raises on purpose."""


class InvalidArgument(CacheError, ValueError):
    """A key, key collection or predicate the cache cannot accept.

    Raised before any entry is touched, so the table is never left
    half-modified by a bad call.
    """


class RemovalCancelled(CacheError):
    """A bulk removal stopped early because its cancel event was set.

    Entries deleted before the stop stay deleted; entries not yet
    visited are untouched. ``removed`` is how many went.
    """

    def __init__(self, removed: int) -> None:
        super().__init__(f"bulk removal cancelled after removing {removed} entries")
        self.removed = removed
