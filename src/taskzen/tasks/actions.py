"""Server-side task actions.

Each action performs one validated query or mutation against the remote task
store and reports the outcome as an `ActionResult`. Taxonomy errors never
escape an action; they are converted into a human-readable `error`.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from taskzen.errors import TaskZenError
from taskzen.models import ActionResult, Task, parse_draft, parse_patch
from taskzen.tasks.cache import TaskListCache

logger = logging.getLogger(__name__)


class TaskGateway(Protocol):
    """What the actions need from a task store client."""

    def list(self) -> list[Task]: ...

    def create(self, title: str, description: str | None = None) -> Task: ...

    def update(self, task_id: int, fields: dict[str, Any]) -> Task: ...

    def delete(self, task_id: int) -> None: ...


class TaskActions:
    """Validated entry points over a `TaskGateway`, with list cache invalidation."""

    def __init__(
        self,
        *,
        client: TaskGateway,
        cache: TaskListCache | None = None,
        cache_key: str | None = None,
    ) -> None:
        self._client = client
        self._cache = cache
        self._cache_key = cache_key

    def _invalidate(self) -> None:
        if self._cache is not None and self._cache_key is not None:
            self._cache.invalidate(self._cache_key)

    def list_tasks(self) -> ActionResult[list[Task]]:
        if self._cache is not None and self._cache_key is not None:
            cached = self._cache.get(self._cache_key)
            if cached is not None:
                return ActionResult.success(cached)
        try:
            tasks = self._client.list()
        except TaskZenError as e:
            logger.warning("Listing tasks failed", extra={"kind": e.kind, "error": e.message})
            return ActionResult.failure(e)

        if self._cache is not None and self._cache_key is not None:
            self._cache.put(self._cache_key, tasks)
        return ActionResult.success(tasks)

    def create_task(self, title: object, description: object = None) -> ActionResult[Task]:
        try:
            draft = parse_draft(title, description)
            task = self._client.create(draft.title, draft.description)
        except TaskZenError as e:
            logger.info("Create task rejected", extra={"kind": e.kind, "error": e.message})
            return ActionResult.failure(e)
        self._invalidate()
        return ActionResult.success(task)

    def update_task(
        self, task_id: int, title: object, description: object = None
    ) -> ActionResult[Task]:
        """Full edit from the task form: title and description."""

        try:
            draft = parse_draft(title, description)
            fields: dict[str, Any] = {"title": draft.title}
            if draft.description is not None:
                fields["description"] = draft.description
            return self._patch(task_id, fields)
        except TaskZenError as e:
            return ActionResult.failure(e)

    def toggle_task_completion(self, task_id: int, completed: bool) -> ActionResult[Task]:
        """Set the completion flag; only the changed field is sent."""

        return self._patch(task_id, {"completed": completed})

    def _patch(self, task_id: int, fields: dict[str, Any]) -> ActionResult[Task]:
        try:
            patch = parse_patch(fields)
            task = self._client.update(task_id, patch.payload())
        except TaskZenError as e:
            logger.info(
                "Update task failed",
                extra={"task_id": task_id, "kind": e.kind, "error": e.message},
            )
            return ActionResult.failure(e)
        self._invalidate()
        return ActionResult.success(task)

    def delete_task(self, task_id: int) -> ActionResult[None]:
        try:
            self._client.delete(task_id)
        except TaskZenError as e:
            logger.info(
                "Delete task failed",
                extra={"task_id": task_id, "kind": e.kind, "error": e.message},
            )
            return ActionResult.failure(e)
        self._invalidate()
        return ActionResult.success(None)
