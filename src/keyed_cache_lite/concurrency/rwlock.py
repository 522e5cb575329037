"""Read-write lock guarding one stripe of the cache table.

Many readers may hold a stripe at once (concurrent get/contains), but a
writer (put, remove, a bulk pass over the stripe) needs it alone.

Writer preference: as soon as a writer is queued, newcomers on the read
side wait behind it. A bulk removal that sweeps every stripe therefore
makes steady progress even while gets keep arriving.

Usage:
    lock = ReadWriteLock()

    with lock.read():
        value = table.get(key)

    with lock.write():
        table.pop(key, None)
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class ReadWriteLock:
    """Condition-based read-write lock with writer preference."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._active_readers = 0
        self._queued_writers = 0
        self._writing = False

    def acquire_read(self) -> None:
        with self._cond:
            while self._writing or self._queued_writers:
                self._cond.wait()
            self._active_readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._active_readers -= 1
            if self._active_readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._queued_writers += 1
            try:
                while self._writing or self._active_readers:
                    self._cond.wait()
            except BaseException:
                # Interrupted while queued: let blocked readers back in.
                self._queued_writers -= 1
                self._cond.notify_all()
                raise
            self._queued_writers -= 1
            self._writing = True

    def release_write(self) -> None:
        with self._cond:
            self._writing = False
            self._cond.notify_all()

    @contextmanager
    def read(self) -> Iterator[None]:
        """Shared access. Waits while a writer holds or is queued for the lock."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self) -> Iterator[None]:
        """Exclusive access. Waits for active readers to drain."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    @property
    def active_readers(self) -> int:
        with self._cond:
            return self._active_readers

    @property
    def writing(self) -> bool:
        with self._cond:
            return self._writing
