"""
Readers-writer lock for the document cache.

Reads of cached documents vastly outnumber writes (every completion or
definition request reads, only open/change/close/save write), so readers are
allowed to proceed concurrently. Waiting writers block new readers, which
keeps a burst of requests from starving a didChange.

Usage:
    >>> lock = ReadWriteLock()
    >>> with lock.read_locked():
    ...     lines = content.get(path)
    >>> with lock.write_locked():
    ...     content[path] = new_lines
"""

import threading
from contextlib import contextmanager
from typing import Iterator


class ReadWriteLock:
    """
    Writer-preferring readers-writer lock built on a single condition.

    Thread Safety:
        This class IS thread-safe. It is not reentrant: a thread holding
        the write lock must not acquire the read lock.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        """Hold the lock in shared mode for the duration of the block."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        """Hold the lock in exclusive mode for the duration of the block."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
