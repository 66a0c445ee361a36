"""Unbounded single-producer single-consumer queue with asynchronous waits."""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Callable
from typing import Any, Optional


class DynamicQueue:
    """A queue that never fills up; consumers may wait for items.

    After :meth:`abort` every later operation, and any pending wait,
    raises the exception given to it.
    """

    def __init__(self) -> None:
        self._items: deque = deque()
        self._not_empty: Optional[asyncio.Future] = None
        self._exc: Optional[BaseException] = None

    def __len__(self) -> int:
        return len(self._items)

    def _notify_not_empty(self) -> None:
        waiter = self._not_empty
        self._not_empty = None
        if waiter is not None and not waiter.done():
            waiter.set_result(None)

    def _raise_if_aborted(self) -> None:
        if self._exc is not None:
            raise self._exc

    def push(self, item: Any) -> bool:
        """Add an item; always succeeds and returns True."""
        self._items.append(item)
        self._notify_not_empty()
        return True

    def pop(self) -> Any:
        """Remove and return the oldest item; IndexError if empty."""
        if not self._items:
            raise IndexError("pop from an empty queue")
        return self._items.popleft()

    def consume(self, func: Callable[[Any], bool]) -> bool:
        """Pass items to ``func`` until it returns False or the queue empties.

        Returns False if ``func`` did.
        """
        self._raise_if_aborted()
        running = True
        while self._items and running:
            running = bool(func(self._items.popleft()))
        return running

    def empty(self) -> bool:
        return not self._items

    def full(self) -> bool:
        return False

    async def not_empty(self) -> None:
        """Wait until an item is available."""
        self._raise_if_aborted()
        if self._items:
            return
        if self._not_empty is None or self._not_empty.done():
            self._not_empty = asyncio.get_running_loop().create_future()
        await self._not_empty

    async def not_full(self) -> None:
        """Return at once: the queue has no capacity limit."""
        self._raise_if_aborted()

    async def pop_eventually(self) -> Any:
        """Pop an item, waiting for one if the queue is empty."""
        self._raise_if_aborted()
        if not self._items:
            await self.not_empty()
            self._raise_if_aborted()
        return self.pop()

    async def push_eventually(self, item: Any) -> None:
        """Push an item; raises if the queue was aborted."""
        self._raise_if_aborted()
        self.push(item)

    def abort(self, exc: BaseException) -> None:
        """Drop all items and fail current and future operations with ``exc``."""
        self._items.clear()
        self._exc = exc
        waiter = self._not_empty
        self._not_empty = None
        if waiter is not None and not waiter.done():
            waiter.set_exception(exc)