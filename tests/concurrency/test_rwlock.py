"""Tests for ReadWriteLock.

Covers: shared readers, writer exclusivity, writer preference over new
readers, a queued writer giving up, and stress without deadlock.
"""
from __future__ import annotations

import threading
import time

import pytest

from keyed_cache_lite.concurrency.rwlock import ReadWriteLock


def test_readers_share_the_lock():
    """8 readers are inside the lock at the same moment."""
    lock = ReadWriteLock()
    all_inside = threading.Barrier(8)
    peak = []

    def reader():
        with lock.read():
            all_inside.wait(timeout=5.0)
            peak.append(lock.active_readers)

    threads = [threading.Thread(target=reader) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10.0)

    assert len(peak) == 8
    assert max(peak) == 8
    assert lock.active_readers == 0


def test_writer_blocks_readers_until_release():
    lock = ReadWriteLock()
    got_read = threading.Event()

    lock.acquire_write()
    assert lock.writing is True

    def reader():
        with lock.read():
            got_read.set()

    t = threading.Thread(target=reader)
    t.start()
    assert not got_read.wait(timeout=0.2), "Reader entered during a write"

    lock.release_write()
    assert got_read.wait(timeout=5.0), "Reader never entered after release"
    t.join(timeout=5.0)
    assert lock.writing is False


def test_writer_waits_for_readers_to_drain():
    lock = ReadWriteLock()
    got_write = threading.Event()

    lock.acquire_read()

    def writer():
        with lock.write():
            got_write.set()

    t = threading.Thread(target=writer)
    t.start()
    assert not got_write.wait(timeout=0.2), "Writer entered while a reader held the lock"

    lock.release_read()
    assert got_write.wait(timeout=5.0)
    t.join(timeout=5.0)


def test_queued_writer_holds_back_new_readers():
    """A writer waiting on an active reader goes before later readers."""
    lock = ReadWriteLock()
    order: list[str] = []
    order_lock = threading.Lock()

    lock.acquire_read()

    def writer():
        with lock.write():
            with order_lock:
                order.append("writer")

    def late_reader():
        with lock.read():
            with order_lock:
                order.append("reader")

    wt = threading.Thread(target=writer)
    wt.start()
    time.sleep(0.1)  # writer is now queued

    rt = threading.Thread(target=late_reader)
    rt.start()
    time.sleep(0.1)
    assert order == [], "Nobody should get in while the first reader holds on"

    lock.release_read()
    wt.join(timeout=5.0)
    rt.join(timeout=5.0)

    assert order == ["writer", "reader"]


def test_mixed_load_finishes():
    """64 threads mixing reads and writes complete and lose no increments."""
    lock = ReadWriteLock()
    total = 0

    def worker(n):
        nonlocal total
        for _ in range(100):
            if n % 4 == 0:
                with lock.write():
                    total += 1
            else:
                with lock.read():
                    _ = total

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(64)]
    start = time.perf_counter()
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10.0)
    elapsed = time.perf_counter() - start

    assert elapsed < 10.0, f"Took {elapsed:.1f}s, possible deadlock"
    assert total == 16 * 100


def test_interrupted_writer_unblocks_readers(monkeypatch):
    """A writer that errors out while queued stops holding readers back."""
    lock = ReadWriteLock()
    lock.acquire_read()

    def interrupted_wait(timeout=None):
        raise RuntimeError("interrupted")

    monkeypatch.setattr(lock._cond, "wait", interrupted_wait)
    with pytest.raises(RuntimeError):
        lock.acquire_write()
    monkeypatch.undo()

    assert lock._queued_writers == 0
    assert lock.writing is False

    got_read = threading.Event()

    def reader():
        with lock.read():
            got_read.set()

    t = threading.Thread(target=reader)
    t.start()
    assert got_read.wait(timeout=5.0), "Reader stuck behind a writer that gave up"
    t.join(timeout=5.0)
    lock.release_read()
    assert lock.active_readers == 0
