from __future__ import annotations

import weakref
from threading import RLock
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")

_Slot = Union[Callable[[T], None], "weakref.WeakMethod[Callable[[T], None]]"]


class Signal(Generic[T]):
    """
    Synchronous signal used for project-plan domain events.

    Subscribers run in connection order on the emitting thread. A bound
    method connected with ``weak=True`` does not keep its owner alive and is
    dropped once the owner is collected. Exceptions raised by a subscriber
    propagate to the emitter.
    """

    def __init__(self) -> None:
        self._slots: list[_Slot] = []
        self._lock: RLock = RLock()

    @staticmethod
    def _resolve(slot: _Slot) -> Callable[[T], None] | None:
        if isinstance(slot, weakref.WeakMethod):
            return slot()
        return slot

    def connect(self, callback: Callable[[T], None], *, weak: bool = False) -> None:
        slot: _Slot = weakref.WeakMethod(callback) if weak else callback
        with self._lock:
            if all(self._resolve(existing) != callback for existing in self._slots):
                self._slots.append(slot)

    def disconnect(self, callback: Callable[[T], None]) -> None:
        with self._lock:
            self._slots = [s for s in self._slots if self._resolve(s) != callback]

    def emit(self, payload: T) -> None:
        with self._lock:
            slots = list(self._slots)
        dead: list[_Slot] = []
        for slot in slots:
            callback = self._resolve(slot)
            if callback is None:
                dead.append(slot)
                continue
            try:
                callback(payload)
            except ReferenceError:
                # callback bound through a proxy whose referent is gone
                dead.append(slot)
        if dead:
            with self._lock:
                self._slots = [s for s in self._slots if s not in dead]

    def subscriber_count(self) -> int:
        with self._lock:
            return sum(1 for s in self._slots if self._resolve(s) is not None)
