"""Pool of reusable promise slots, addressed by small integer ids.

Each slot holds a future that is completed through the manager. Released
slots are kept on a free list and handed out again, most recently released
first. Slot 0 is reserved: it is created already completed and inactive,
and id 0 on the free list means that the list is empty.
"""

from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any


@dataclass(eq=False)
class _Slot:
    future: Future = field(default_factory=Future)
    next_available: int = 0
    active: bool = True

    def occupy(self) -> None:
        self.future = Future()
        self.active = True

    def release(self) -> None:
        self.active = False


class PromiseManager:
    """Hands out promise ids and completes the futures behind them."""

    def __init__(self, init_reserve_size: int = 0) -> None:
        if init_reserve_size < 0:
            raise ValueError("init_reserve_size must not be negative")
        reserved = _Slot()
        reserved.future.set_result(None)
        reserved.release()
        self._slots: list[_Slot] = [reserved]
        self._available = 0

    def __len__(self) -> int:
        return len(self._slots)

    def _slot(self, pr_id: int) -> _Slot:
        if not 0 <= pr_id < len(self._slots):
            raise IndexError(f"unknown promise id {pr_id}")
        return self._slots[pr_id]

    def acquire_pr(self) -> int:
        """Take a free slot, or add a new one, and return its id."""
        if self._available == 0:
            self._slots.append(_Slot())
            return len(self._slots) - 1
        pr_id = self._available
        slot = self._slots[pr_id]
        self._available = slot.next_available
        slot.occupy()
        return pr_id

    def remove_pr(self, pr_id: int) -> None:
        """Release a slot so that a later acquire can reuse it."""
        slot = self._slot(pr_id)
        slot.release()
        slot.next_available = self._available
        self._available = pr_id

    def is_active(self, pr_id: int) -> bool:
        return self._slot(pr_id).active

    def get_future(self, pr_id: int) -> Future:
        """The future completed by :meth:`set_value` or :meth:`set_exception`."""
        return self._slot(pr_id).future

    def set_value(self, pr_id: int, value: Any = None) -> None:
        self._slot(pr_id).future.set_result(value)

    def set_exception(self, pr_id: int, exc: BaseException) -> None:
        self._slot(pr_id).future.set_exception(exc)