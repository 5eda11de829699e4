from __future__ import annotations

from contextlib import contextmanager
from threading import Lock, RLock
from typing import Dict, Iterator


class ScheduleLockRegistry:
    """
    One re-entrant lock per project id. Critical path recomputes, cascades and
    task date edits of the same project run one at a time; different projects
    do not block each other.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, RLock] = {}
        self._guard: Lock = Lock()

    def lock_for(self, project_id: str) -> RLock:
        with self._guard:
            lock = self._locks.get(project_id)
            if lock is None:
                lock = RLock()
                self._locks[project_id] = lock
            return lock

    @contextmanager
    def hold(self, project_id: str) -> Iterator[None]:
        lock = self.lock_for(project_id)
        with lock:
            yield


# SINGLE process-wide registry
schedule_locks = ScheduleLockRegistry()


__all__ = ["ScheduleLockRegistry", "schedule_locks"]
