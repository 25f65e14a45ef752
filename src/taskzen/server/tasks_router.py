"""Task and suggestion REST API.

All routes are mounted under `/api`. Handlers are thin wrappers over the task
actions and the suggestion flow; a failed `ActionResult` becomes an
`ActionFailed` that the app renders as `{"error": ..., "kind": ...}`.
"""

from __future__ import annotations

from typing import TypeVar, cast

from fastapi import APIRouter, Depends, Request

from taskzen.auth.session import SessionTokenProvider, current_user
from taskzen.errors import AuthError
from taskzen.models import ActionResult, Task
from taskzen.presentation.board import order_tasks
from taskzen.server.context import get_context
from taskzen.server.models import (
    SuggestionRequest,
    SuggestionResponse,
    TaskFormRequest,
    ToggleRequest,
)
from taskzen.tasks.actions import TaskActions

T = TypeVar("T")

router = APIRouter()

STATUS_BY_KIND: dict[str, int] = {
    "validation": 422,
    "auth": 401,
    "transport": 502,
    "flow_parse": 502,
}


class ActionFailed(Exception):
    def __init__(self, error: str, kind: str) -> None:
        super().__init__(error)
        self.error = error
        self.kind = kind

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND.get(self.kind, 500)


def task_actions(request: Request) -> TaskActions:
    return get_context(request).actions_for(SessionTokenProvider(request.session))


def _unwrap(result: ActionResult[T]) -> T | None:
    if not result.ok:
        raise ActionFailed(result.error or "Unknown error", result.error_kind or "error")
    return result.data


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/tasks", response_model=list[Task])
def list_tasks(actions: TaskActions = Depends(task_actions)) -> list[Task]:
    return order_tasks(_unwrap(actions.list_tasks()) or [])


@router.post("/tasks", response_model=Task, status_code=201)
def create_task(req: TaskFormRequest, actions: TaskActions = Depends(task_actions)) -> Task:
    return cast(Task, _unwrap(actions.create_task(req.title, req.description)))


@router.put("/tasks/{task_id}", response_model=Task)
def update_task(
    task_id: int, req: TaskFormRequest, actions: TaskActions = Depends(task_actions)
) -> Task:
    return cast(Task, _unwrap(actions.update_task(task_id, req.title, req.description)))


@router.post("/tasks/{task_id}/toggle", response_model=Task)
def toggle_task(
    task_id: int, req: ToggleRequest, actions: TaskActions = Depends(task_actions)
) -> Task:
    return cast(Task, _unwrap(actions.toggle_task_completion(task_id, req.completed)))


@router.delete("/tasks/{task_id}", status_code=204)
def delete_task(task_id: int, actions: TaskActions = Depends(task_actions)) -> None:
    _unwrap(actions.delete_task(task_id))


@router.post("/suggestions", response_model=SuggestionResponse)
def suggest(request: Request, req: SuggestionRequest) -> SuggestionResponse:
    if current_user(request.session) is None:
        err = AuthError("Not authenticated.")
        raise ActionFailed(err.message, err.kind)

    flow = get_context(request).suggestion_flow()
    suggestions = _unwrap(flow.suggest(req.mode, req.seed)) or []
    return SuggestionResponse(suggestions=suggestions)
