"""Task list state with optimistic completion toggles.

The board keeps the last state confirmed by the server and, per task, an
optional overlay for an in-flight completion toggle. A failed mutation always
drops the overlay so the displayed value returns to the confirmed one.

Mutations run in worker threads (`asyncio.to_thread`) so several may be in
flight for different tasks while the event loop keeps serving the page; a task's
controls stay disabled while one of its own mutations is pending.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

from taskzen.models import ActionResult, Task
from taskzen.presentation.notifications import NotificationCenter
from taskzen.tasks.actions import TaskActions

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass(slots=True)
class OptimisticField(Generic[V]):
    """A server-confirmed value with an optional pending overlay."""

    server_value: V
    pending_overlay: V | None = None

    @property
    def value(self) -> V:
        return self.pending_overlay if self.pending_overlay is not None else self.server_value

    @property
    def pending(self) -> bool:
        return self.pending_overlay is not None

    def apply(self, value: V) -> None:
        self.pending_overlay = value

    def commit(self, value: V) -> None:
        self.server_value = value
        self.pending_overlay = None

    def revert(self) -> None:
        self.pending_overlay = None


@dataclass(frozen=True, slots=True)
class TaskView:
    """What the page renders for one task."""

    task: Task
    completed: bool
    pending: bool

    @property
    def id(self) -> int:
        return self.task.id


def order_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Incomplete before complete; newest (highest id) first within each group."""

    return sorted(tasks, key=lambda t: (t.completed, -t.id))


class TaskBoard:
    """Client-side view of the user's tasks."""

    def __init__(
        self,
        actions: TaskActions,
        notifications: NotificationCenter | None = None,
    ) -> None:
        self._actions = actions
        self.notifications = notifications or NotificationCenter()
        self._tasks: dict[int, Task] = {}
        self._completed: dict[int, OptimisticField[bool]] = {}
        self._pending: set[int] = set()
        self._submitting = False
        self.load_error: str | None = None

    def load(self, tasks: Iterable[Task]) -> None:
        """Replace the confirmed state with a fresh list.

        Tasks with a mutation in flight keep their current task and overlay;
        the mutation's own result settles them.
        """

        incoming = {t.id: t for t in tasks}
        completed: dict[int, OptimisticField[bool]] = {}
        for task_id in self._pending:
            if task_id in self._tasks:
                incoming[task_id] = self._tasks[task_id]
                completed[task_id] = self._completed[task_id]
        for task_id, task in incoming.items():
            if task_id not in completed:
                completed[task_id] = OptimisticField(server_value=task.completed)
        self._tasks = incoming
        self._completed = completed
        self.load_error = None

    async def refresh(self) -> bool:
        result = await asyncio.to_thread(self._actions.list_tasks)
        if not result.ok:
            self.load_error = result.error
            return False
        self.load(result.data or [])
        return True

    def is_pending(self, task_id: int) -> bool:
        return task_id in self._pending

    @property
    def submitting(self) -> bool:
        return self._submitting

    def displayed_completed(self, task_id: int) -> bool:
        return self._completed[task_id].value

    def ordered(self) -> list[TaskView]:
        views = [
            TaskView(
                task=task,
                completed=self._completed[task.id].value,
                pending=task.id in self._pending,
            )
            for task in self._tasks.values()
        ]
        return sorted(views, key=lambda v: (v.completed, -v.id))

    def _accept(self, task: Task) -> None:
        self._tasks[task.id] = task
        field = self._completed.get(task.id)
        if field is None:
            self._completed[task.id] = OptimisticField(server_value=task.completed)
        else:
            field.commit(task.completed)

    async def toggle(self, task_id: int) -> bool:
        """Flip completion immediately, then confirm with the server.

        Returns False when the task is unknown or already has a mutation in flight.
        """

        if task_id not in self._tasks or task_id in self._pending:
            return False

        field = self._completed[task_id]
        new_value = not field.value
        field.apply(new_value)
        self._pending.add(task_id)
        try:
            result = await asyncio.to_thread(
                self._actions.toggle_task_completion, task_id, new_value
            )
        except BaseException:
            field.revert()
            raise
        finally:
            self._pending.discard(task_id)

        if not result.ok:
            field.revert()
            logger.info("Reverted optimistic toggle", extra={"task_id": task_id})
            self.notifications.error("Error updating task", result.error or "")
            return False

        if result.data is not None:
            self._accept(result.data)
        else:
            field.commit(new_value)
        return True

    async def delete(self, task_id: int) -> bool:
        """Delete without an optimistic removal; the task stays until confirmed."""

        task = self._tasks.get(task_id)
        if task is None or task_id in self._pending:
            return False

        self._pending.add(task_id)
        try:
            result: ActionResult[None] = await asyncio.to_thread(
                self._actions.delete_task, task_id
            )
        finally:
            self._pending.discard(task_id)

        if not result.ok:
            self.notifications.error("Error deleting task", result.error or "")
            return False

        self._tasks.pop(task_id, None)
        self._completed.pop(task_id, None)
        self.notifications.push("Task deleted", f'"{task.title}" has been removed.')
        return True

    async def submit(
        self,
        title: str,
        description: str | None = None,
        *,
        task_id: int | None = None,
    ) -> ActionResult[Task]:
        """Create a task, or edit title and description of an existing one."""

        if task_id is not None:
            if task_id in self._pending:
                return ActionResult(error="Task has a pending change.", error_kind="validation")
            self._pending.add(task_id)
            try:
                result = await asyncio.to_thread(
                    self._actions.update_task, task_id, title, description
                )
            finally:
                self._pending.discard(task_id)
        else:
            if self._submitting:
                return ActionResult(
                    error="A task is already being saved.", error_kind="validation"
                )
            self._submitting = True
            try:
                result = await asyncio.to_thread(self._actions.create_task, title, description)
            finally:
                self._submitting = False

        if not result.ok or result.data is None:
            self.notifications.error("An error occurred", result.error or "")
            return result

        self._accept(result.data)
        verb = "updated" if task_id is not None else "created"
        self.notifications.push(f"Task {verb}", f'"{result.data.title}" has been saved.')
        return result
