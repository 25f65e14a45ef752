"""Test configuration and fixtures."""

from __future__ import annotations

import threading
from typing import Any
from unittest.mock import Mock

import pytest

from taskzen.auth.session import AccessTokenProvider, StaticTokenProvider
from taskzen.config import TaskZenSettings
from taskzen.errors import TransportError
from taskzen.llm.provider import LLMProvider
from taskzen.models import Task
from taskzen.tasks.actions import TaskActions
from taskzen.tasks.cache import TaskListCache


class FakeTaskApi:
    """In-memory stand-in for the remote task store.

    - checks the session credential on every call, like the real client
    - counts calls for "no network call" assertions
    - `fail_next` makes the next call fail with a TransportError
    - `gate` (if set) blocks `update` until released
    """

    def __init__(self, token_provider: AccessTokenProvider | None = None) -> None:
        self.token_provider = token_provider or StaticTokenProvider("test-token")
        self.tasks: dict[int, Task] = {}
        self.next_id = 1
        self.calls: list[tuple[str, Any]] = []
        self.fail_next: str | None = None
        self.gate: threading.Event | None = None

    def seed(self, *tasks: Task) -> None:
        for task in tasks:
            self.tasks[task.id] = task
            self.next_id = max(self.next_id, task.id + 1)

    def _enter(self, name: str, arg: Any = None) -> None:
        self.calls.append((name, arg))
        self.token_provider.access_token()
        if self.fail_next is not None:
            message, self.fail_next = self.fail_next, None
            raise TransportError(message, status_code=500)

    def list(self) -> list[Task]:
        self._enter("list")
        return list(self.tasks.values())

    def create(self, title: str, description: str | None = None) -> Task:
        self._enter("create", title)
        task = Task(id=self.next_id, title=title, description=description or "")
        self.tasks[task.id] = task
        self.next_id += 1
        return task

    def update(self, task_id: int, fields: dict[str, Any]) -> Task:
        self._enter("update", (task_id, dict(fields)))
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if task_id not in self.tasks:
            raise TransportError("Failed to update task: Not Found", status_code=404)
        task = self.tasks[task_id].model_copy(update=fields)
        self.tasks[task_id] = task
        return task

    def delete(self, task_id: int) -> None:
        self._enter("delete", task_id)
        if task_id not in self.tasks:
            raise TransportError("Failed to delete task: Not Found", status_code=404)
        del self.tasks[task_id]


@pytest.fixture
def settings() -> TaskZenSettings:
    """Provide test settings that ignore any local `.env`."""
    return TaskZenSettings(
        _env_file=None,
        api_base_url="https://tasks.example.com",
        base_url="http://testserver",
        session_secret="test-secret",
        auth0_issuer_base_url="https://tenant.example.com/",
        auth0_client_id="client-id",
        auth0_client_secret="client-secret",
        auth0_audience="https://tasks.example.com",
        openai_api_key="test-key",
        log_level="DEBUG",
    )


@pytest.fixture
def fake_api() -> FakeTaskApi:
    return FakeTaskApi()


@pytest.fixture
def cache() -> TaskListCache:
    return TaskListCache()


@pytest.fixture
def actions(fake_api: FakeTaskApi, cache: TaskListCache) -> TaskActions:
    return TaskActions(client=fake_api, cache=cache, cache_key="session-1")


@pytest.fixture
def llm() -> Mock:
    provider = Mock(spec=LLMProvider)
    provider.generate.return_value = (
        '["Research destinations", "Book flights and hotel", "Plan a daily itinerary"]'
    )
    return provider
