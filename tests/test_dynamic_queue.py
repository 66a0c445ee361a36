import asyncio

import pytest

from shardflow.dynamic_queue import DynamicQueue
from shardflow.errors import TaskCanceledError


def test_push_pop_is_fifo():
    q = DynamicQueue()
    assert q.empty()
    assert q.push("a") is True
    assert q.push("b") is True
    assert len(q) == 2
    assert q.full() is False
    assert q.pop() == "a"
    assert q.pop() == "b"
    assert q.empty()


def test_pop_empty_raises():
    with pytest.raises(IndexError):
        DynamicQueue().pop()


def test_consume_until_false():
    q = DynamicQueue()
    for item in ["x", "y", "z"]:
        q.push(item)
    seen = []

    def take(item):
        seen.append(item)
        return item != "y"

    assert q.consume(take) is False
    assert seen == ["x", "y"]
    assert q.pop() == "z"


def test_consume_drains_when_func_keeps_going():
    q = DynamicQueue()
    q.push(1)
    q.push(2)
    seen = []
    assert q.consume(lambda item: seen.append(item) is None) is True
    assert seen == [1, 2]
    assert q.empty()


def test_consume_after_abort_raises():
    q = DynamicQueue()
    q.push(1)
    q.abort(TaskCanceledError("stop"))
    assert q.empty()
    with pytest.raises(TaskCanceledError):
        q.consume(lambda item: True)


@pytest.mark.asyncio
async def test_pop_eventually_returns_ready_item():
    q = DynamicQueue()
    q.push("ready")
    assert await q.pop_eventually() == "ready"


@pytest.mark.asyncio
async def test_pop_eventually_waits_for_push():
    q = DynamicQueue()
    waiter = asyncio.ensure_future(q.pop_eventually())
    await asyncio.sleep(0)
    assert not waiter.done()
    await q.push_eventually("late")
    assert await asyncio.wait_for(waiter, 1) == "late"


@pytest.mark.asyncio
async def test_not_empty_returns_when_items_exist():
    q = DynamicQueue()
    q.push(5)
    await asyncio.wait_for(q.not_empty(), 1)
    assert len(q) == 1


@pytest.mark.asyncio
async def test_abort_fails_pending_waiter():
    q = DynamicQueue()
    waiter = asyncio.ensure_future(q.pop_eventually())
    await asyncio.sleep(0)
    assert not waiter.done()
    q.abort(TaskCanceledError("aborted"))
    with pytest.raises(TaskCanceledError) as info:
        await asyncio.wait_for(waiter, 1)
    assert str(info.value) == "aborted"
    assert q.empty()


@pytest.mark.asyncio
async def test_operations_after_abort_raise():
    q = DynamicQueue()
    q.abort(TaskCanceledError("closed"))
    with pytest.raises(TaskCanceledError):
        await q.push_eventually(1)
    with pytest.raises(TaskCanceledError):
        await q.pop_eventually()
    with pytest.raises(TaskCanceledError):
        await q.not_empty()
    assert q.empty()