from datetime import timedelta

import pytest

from shardflow.timer import DEFAULT_ACTOR_QUOTA, ActorClock


def make_source(values):
    it = iter(values)
    return lambda: next(it)


def test_initial_read_uses_construction_time():
    clock = ActorClock(now=make_source([10.0, 20.0]))
    assert clock.read() == 10.0


def test_refresh_only_after_interval():
    clock = ActorClock(execution_interval=3, now=make_source([1.0, 2.0, 3.0]))
    clock.advance()
    clock.advance()
    assert clock.read() == 1.0
    assert clock.execution_count == 2
    clock.advance()
    assert clock.read() == 2.0
    assert clock.execution_count == 0
    clock.advance()
    clock.advance()
    assert clock.read() == 2.0
    clock.advance()
    assert clock.read() == 3.0


def test_interval_one_refreshes_every_time():
    clock = ActorClock(execution_interval=1, now=make_source([0.5, 1.5, 2.5]))
    clock.advance()
    assert clock.read() == 1.5
    clock.advance()
    assert clock.read() == 2.5


def test_quota_default_and_override():
    clock = ActorClock(now=make_source([0.0]))
    assert clock.quota == DEFAULT_ACTOR_QUOTA
    assert DEFAULT_ACTOR_QUOTA == timedelta(microseconds=500)
    clock.quota = timedelta(microseconds=200)
    assert clock.quota == timedelta(microseconds=200)


def test_invalid_interval_rejected():
    with pytest.raises(ValueError):
        ActorClock(execution_interval=0)


def test_real_clock_is_monotonic():
    clock = ActorClock()
    before = clock.read()
    clock.advance()
    assert clock.read() >= before