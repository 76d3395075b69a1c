"""
Per-owner mutual exclusion.

A solvency check reads the balance and then writes. Two
requests for the same owner must not interleave between the
read and the write, or both could pass against a balance
neither has debited yet. Different owners never block each
other.
"""

import threading
from contextlib import contextmanager
from typing import Iterator


class OwnerLocks:
    """
    Registry of one lock per owner id.

    Locks are created on first use and never removed, so the
    registry grows by one small lock per owner that has ever
    written. That is bounded by the number of users.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = {}

    def _lock_for(self, owner_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(owner_id)
            if lock is None:
                lock = self._locks[owner_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, owner_id: int) -> Iterator[None]:
        """Hold the owner's lock for the duration of the block."""
        lock = self._lock_for(owner_id)
        with lock:
            yield
