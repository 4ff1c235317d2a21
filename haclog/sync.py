"""Threading helpers: a spin lock, sleeping, yielding and thread ids."""

from __future__ import annotations

import os
import threading
import time


def nsleep(ns: int) -> None:
    """Sleep the calling thread for ``ns`` nanoseconds."""
    if ns < 0:
        raise ValueError("sleep duration must not be negative")
    time.sleep(ns / 1_000_000_000)


def thread_yield() -> None:
    """Give up the rest of the calling thread's time slice."""
    time.sleep(0)


def thread_readable_id() -> int:
    """Return the operating-system id of the calling thread."""
    return threading.get_native_id()


def hardware_concurrency() -> int:
    """Return the number of processors available, at least 1."""
    return os.cpu_count() or 1


class SpinLock:
    """A lock acquired by repeatedly trying and yielding between attempts."""

    def __init__(self) -> None:
        self._flag = threading.Lock()

    def lock(self) -> None:
        while not self._flag.acquire(blocking=False):
            thread_yield()

    def unlock(self) -> None:
        if self._flag.locked():
            self._flag.release()

    def __enter__(self) -> "SpinLock":
        self.lock()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unlock()