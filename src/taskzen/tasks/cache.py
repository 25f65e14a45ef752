"""In-process cache of task list views, keyed per session."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from taskzen.models import Task


@dataclass(frozen=True, slots=True)
class _Entry:
    tasks: tuple[Task, ...]
    stored_at: float


@dataclass
class TaskListCache:
    """Read-through cache for `list_tasks`.

    Mutations invalidate the caller's entry so the next read reflects the change.
    Entries also expire after `ttl_seconds` so changes made elsewhere show up;
    expired entries of every session are dropped on each `put`.
    """

    ttl_seconds: float = 30.0
    clock: Callable[[], float] = field(default=time.monotonic)

    def __post_init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    def get(self, key: str) -> list[Task] | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self.clock() - entry.stored_at > self.ttl_seconds:
                del self._entries[key]
                return None
            return list(entry.tasks)

    def put(self, key: str, tasks: list[Task]) -> None:
        with self._lock:
            now = self.clock()
            expired = [k for k, e in self._entries.items() if now - e.stored_at > self.ttl_seconds]
            for k in expired:
                del self._entries[k]
            self._entries[key] = _Entry(tasks=tuple(tasks), stored_at=now)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
