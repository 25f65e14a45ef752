"""HTTP client for the remote task storage API.

This intentionally wraps `requests` to keep HTTP calls out of the actions and make
tests easy (inject a session).
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from taskzen.auth.session import AccessTokenProvider, auth_headers
from taskzen.errors import TransportError, ValidationError
from taskzen.models import Task, TaskPatch, parse_draft, parse_patch

logger = logging.getLogger(__name__)


class TaskApiClient:
    """Typed wrapper around `GET/POST /tasks` and `PUT/DELETE /tasks/{id}`.

    Every call attaches the session's bearer token. Failures surface as:

    - `AuthError` when no valid credential is available (no request is sent)
    - `ValidationError` for bad input (no request is sent)
    - `TransportError` for network failures and non-2xx responses
    """

    def __init__(
        self,
        *,
        base_url: str,
        token_provider: AccessTokenProvider,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        if not base_url.strip():
            raise ValueError("Task API base URL is required")

        self._base_url = base_url.strip().rstrip("/")
        self._token_provider = token_provider
        self._timeout = timeout
        self._session = session or requests.Session()
        self._owns_session = session is None

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def _tasks_url(self, task_id: int | None = None) -> str:
        if task_id is None:
            return f"{self._base_url}/tasks"
        return f"{self._base_url}/tasks/{task_id}"

    def _request(
        self,
        method: str,
        url: str,
        *,
        failure: str,
        json: dict[str, Any] | None = None,
    ) -> requests.Response:
        headers = auth_headers(self._token_provider)
        try:
            resp = self._session.request(
                method, url, headers=headers, json=json, timeout=self._timeout
            )
        except requests.Timeout as e:
            logger.warning("Task API request timed out", extra={"method": method, "url": url})
            raise TransportError(f"{failure}: request timed out") from e
        except requests.RequestException as e:
            logger.warning(
                "Task API request failed", extra={"method": method, "url": url, "error": str(e)}
            )
            raise TransportError(f"{failure}: {e}") from e

        if not resp.ok:
            detail = resp.text.strip() or resp.reason or str(resp.status_code)
            logger.warning(
                "Task API returned an error",
                extra={"method": method, "url": url, "status": resp.status_code},
            )
            raise TransportError(f"{failure}: {detail}", status_code=resp.status_code)
        return resp

    @staticmethod
    def _task_from(resp: requests.Response, *, failure: str) -> Task:
        try:
            return Task.model_validate(resp.json())
        except ValueError as e:
            # Covers both undecodable JSON and pydantic validation errors.
            raise TransportError(f"{failure}: unexpected response from task API") from e

    def list(self) -> list[Task]:
        failure = "Failed to fetch tasks"
        resp = self._request("GET", self._tasks_url(), failure=failure)
        try:
            payload = resp.json()
        except ValueError as e:
            raise TransportError(f"{failure}: unexpected response from task API") from e
        if not isinstance(payload, list):
            raise TransportError(f"{failure}: unexpected response from task API")
        try:
            tasks = [Task.model_validate(item) for item in payload]
        except ValueError as e:
            raise TransportError(f"{failure}: unexpected response from task API") from e
        logger.debug("Fetched tasks", extra={"count": len(tasks)})
        return tasks

    def create(self, title: str, description: str | None = None) -> Task:
        draft = parse_draft(title, description)
        failure = "Failed to create task"
        resp = self._request(
            "POST",
            self._tasks_url(),
            failure=failure,
            json=draft.model_dump(exclude_none=True),
        )
        task = self._task_from(resp, failure=failure)
        logger.info("Task created", extra={"task_id": task.id})
        return task

    def update(self, task_id: int, fields: dict[str, Any] | TaskPatch) -> Task:
        patch = fields if isinstance(fields, TaskPatch) else parse_patch(fields)
        payload = patch.payload()
        if not payload:
            raise ValidationError("Nothing to update.")
        failure = "Failed to update task"
        resp = self._request("PUT", self._tasks_url(task_id), failure=failure, json=payload)
        task = self._task_from(resp, failure=failure)
        logger.info("Task updated", extra={"task_id": task.id, "fields": sorted(payload)})
        return task

    def delete(self, task_id: int) -> None:
        self._request("DELETE", self._tasks_url(task_id), failure="Failed to delete task")
        logger.info("Task deleted", extra={"task_id": task_id})
