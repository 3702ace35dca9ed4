"""Scoped acquisition of the exclusive reformatting lock."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Protocol


class ReformatLock(Protocol):
    """Host-provided lock guarding the document for a whole reformat pass."""

    def lock(self) -> None:
        """Block until exclusive access is granted."""
        ...

    def unlock(self) -> None:
        """Release access granted by ``lock``."""
        ...


class ThreadLock:
    """``ReformatLock`` backed by a re-entrant thread lock."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._depth = 0

    @property
    def held(self) -> bool:
        return self._depth > 0

    def lock(self) -> None:
        self._lock.acquire()
        self._depth += 1

    def unlock(self) -> None:
        self._depth -= 1
        self._lock.release()


@contextmanager
def hold(lock: Optional[ReformatLock]) -> Iterator[None]:
    """Acquire ``lock`` for the block and always release it afterwards."""

    if lock is None:
        yield
        return
    lock.lock()
    try:
        yield
    finally:
        lock.unlock()


__all__ = ["ReformatLock", "ThreadLock", "hold"]
