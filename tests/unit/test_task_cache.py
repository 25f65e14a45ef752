"""Unit tests for the task list cache."""

from __future__ import annotations

from taskzen.models import Task
from taskzen.tasks.cache import TaskListCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_entry_expires_after_ttl() -> None:
    clock = FakeClock()
    cache = TaskListCache(ttl_seconds=30, clock=clock)
    cache.put("a", [Task(id=1, title="A")])

    clock.now = 10
    assert cache.get("a") == [Task(id=1, title="A")]

    clock.now = 31
    assert cache.get("a") is None


def test_put_drops_expired_entries_of_other_sessions() -> None:
    clock = FakeClock()
    cache = TaskListCache(ttl_seconds=30, clock=clock)
    cache.put("old-1", [])
    cache.put("old-2", [])

    clock.now = 20
    cache.put("recent", [])
    clock.now = 40
    cache.put("new", [])

    assert len(cache) == 2
    assert cache.get("recent") == []
    assert cache.get("old-1") is None


def test_invalidate_and_clear() -> None:
    cache = TaskListCache()
    cache.put("a", [])
    cache.put("b", [])

    cache.invalidate("a")
    assert cache.get("a") is None
    assert len(cache) == 1

    cache.clear()
    assert len(cache) == 0
