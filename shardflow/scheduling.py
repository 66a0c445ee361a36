"""Task queue for actor groups, with an urgent lane and optional priorities."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from typing import Any, Optional

Comparator = Callable[[Any, Any], bool]


class SchedulableTaskQueue:
    """Urgent tasks run first; others run in FIFO or comparator order.

    A comparator ``comp(a, b)`` returns True when ``a`` has lower priority
    than ``b``; the highest-priority task is popped first.
    """

    def __init__(self, comparator: Optional[Comparator] = None) -> None:
        self._urgent: deque = deque()
        self._queue: list = []
        self._comparator = comparator
        self._need_scheduling = False

    def set_comparator(self, comparator: Optional[Comparator]) -> None:
        self._comparator = comparator

    def push_urgent_task(self, task: Any) -> None:
        self._urgent.append(task)

    def push_task(self, task: Any) -> None:
        self._queue.append(task)
        self._need_scheduling = True

    def _sift_down(self, index: int, size: int) -> None:
        comp = self._comparator
        heap = self._queue
        while True:
            largest = index
            for child in (2 * index + 1, 2 * index + 2):
                if child < size and comp(heap[largest], heap[child]):
                    largest = child
            if largest == index:
                return
            heap[index], heap[largest] = heap[largest], heap[index]
            index = largest

    def _make_heap(self) -> None:
        size = len(self._queue)
        for index in range(size // 2 - 1, -1, -1):
            self._sift_down(index, size)

    def pop_task(self) -> Any:
        """Remove and return the next task; IndexError if the queue is empty."""
        if self._urgent:
            return self._urgent.popleft()
        if not self._queue:
            raise IndexError("pop from an empty task queue")
        if self._comparator is None:
            return self._queue.pop(0)
        if self._need_scheduling:
            self._make_heap()
            self._need_scheduling = False
        last = len(self._queue) - 1
        self._queue[0], self._queue[last] = self._queue[last], self._queue[0]
        task = self._queue.pop()
        self._sift_down(0, len(self._queue))
        return task

    def cancel_all(self) -> None:
        """Call ``cancel()`` on every queued task; tasks stay queued."""
        for task in self._urgent:
            task.cancel()
        for task in self._queue:
            task.cancel()

    def empty(self) -> bool:
        return not self._urgent and not self._queue

    def __len__(self) -> int:
        return len(self._urgent) + len(self._queue)