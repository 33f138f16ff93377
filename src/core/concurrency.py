"""
Per-driver serialization.

Every read-modify-write of one driver (document uploads, review,
profile changes) runs while holding that driver's lock, so two
concurrent requests for the same driver never interleave their
completeness checks. Locks for idle drivers are dropped.
"""

import threading
from contextlib import contextmanager


class DriverLocks:
    """Process-local keyed lock registry."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._holders: dict[str, int] = {}

    @contextmanager
    def hold(self, driver_id: str):
        with self._guard:
            lock = self._locks.setdefault(driver_id, threading.Lock())
            self._holders[driver_id] = self._holders.get(driver_id, 0) + 1
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                self._holders[driver_id] -= 1
                if self._holders[driver_id] == 0:
                    del self._holders[driver_id]
                    del self._locks[driver_id]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
