import random

import pytest

from shardflow.scheduling import SchedulableTaskQueue


class Task:
    def __init__(self, name, priority=0):
        self.name = name
        self.priority = priority
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


def by_priority(a, b):
    return a.priority < b.priority


def _drain(queue):
    out = []
    while not queue.empty():
        out.append(queue.pop_task())
    return out


def test_fifo_without_comparator():
    queue = SchedulableTaskQueue()
    tasks = [Task(n) for n in "abc"]
    for t in tasks:
        queue.push_task(t)
    assert _drain(queue) == tasks


def test_urgent_tasks_come_first():
    queue = SchedulableTaskQueue()
    normal = Task("n")
    urgent = [Task("u1"), Task("u2")]
    queue.push_task(normal)
    for t in urgent:
        queue.push_urgent_task(t)
    assert _drain(queue) == urgent + [normal]


def test_comparator_orders_by_priority():
    queue = SchedulableTaskQueue()
    queue.set_comparator(by_priority)
    for name, prio in [("low", 1), ("high", 9), ("mid", 5)]:
        queue.push_task(Task(name, prio))
    assert [t.name for t in _drain(queue)] == ["high", "mid", "low"]


def test_priority_pops_are_non_increasing():
    rng = random.Random(7)
    queue = SchedulableTaskQueue(by_priority)
    prios = [rng.randrange(100) for _ in range(50)]
    for i, p in enumerate(prios):
        queue.push_task(Task(i, p))
    popped = [t.priority for t in _drain(queue)]
    assert popped == sorted(prios, reverse=True)


def test_push_after_pop_reschedules():
    queue = SchedulableTaskQueue(by_priority)
    queue.push_task(Task("a", 2))
    queue.push_task(Task("b", 1))
    assert queue.pop_task().name == "a"
    queue.push_task(Task("c", 10))
    assert queue.pop_task().name == "c"
    assert queue.pop_task().name == "b"


def test_len_and_empty():
    queue = SchedulableTaskQueue()
    assert queue.empty() is True
    queue.push_task(Task("a"))
    queue.push_urgent_task(Task("b"))
    assert len(queue) == 2
    assert queue.empty() is False


def test_pop_empty_raises():
    with pytest.raises(IndexError):
        SchedulableTaskQueue().pop_task()


def test_cancel_all_marks_every_task():
    queue = SchedulableTaskQueue()
    tasks = [Task("a"), Task("b"), Task("c")]
    queue.push_task(tasks[0])
    queue.push_urgent_task(tasks[1])
    queue.push_task(tasks[2])
    queue.cancel_all()
    assert all(t.cancelled for t in tasks)
    assert len(queue) == 3