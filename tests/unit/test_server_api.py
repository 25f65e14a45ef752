"""Unit tests for the FastAPI server."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock
from urllib.parse import parse_qs, urlparse

import pytest
import requests
from fastapi.testclient import TestClient

from taskzen.auth import routes as auth_routes
from taskzen.auth.session import AccessTokenProvider
from taskzen.config import TaskZenSettings
from taskzen.models import Task
from taskzen.server.app import create_app
from taskzen.server.context import AppContext
from taskzen.tasks.actions import TaskGateway
from taskzen.tasks.cache import TaskListCache

# Captured before the client fixture replaces it.
_fetch_userinfo = auth_routes._fetch_userinfo


@pytest.fixture
def store(fake_api: Any) -> Any:
    return fake_api


@pytest.fixture
def client(
    settings: TaskZenSettings,
    store: Any,
    llm: Mock,
    monkeypatch: pytest.MonkeyPatch,
) -> TestClient:
    def client_factory(provider: AccessTokenProvider) -> TaskGateway:
        # One shared store; each request checks its own session credential.
        store.token_provider = provider
        return store

    def exchange_code(_settings: TaskZenSettings, code: str) -> dict[str, Any]:
        assert code == "auth-code"
        return {"access_token": "user-token", "expires_in": 3600}

    monkeypatch.setattr(auth_routes, "_exchange_code", exchange_code)
    monkeypatch.setattr(
        auth_routes, "_fetch_userinfo", lambda _s, _t: {"name": "Ada", "email": "ada@example.com"}
    )

    context = AppContext(
        settings=settings,
        client_factory=client_factory,
        cache=TaskListCache(),
        llm=llm,
    )
    return TestClient(create_app(settings, context))


def _login(client: TestClient) -> None:
    resp = client.get("/api/auth/login", follow_redirects=False)
    assert resp.status_code == 302
    location = urlparse(resp.headers["location"])
    assert location.netloc == "tenant.example.com"
    assert location.path == "/authorize"
    query = parse_qs(location.query)
    assert query["audience"] == ["https://tasks.example.com"]
    assert query["redirect_uri"] == ["http://testserver/api/auth/callback"]

    resp = client.get(
        "/api/auth/callback",
        params={"code": "auth-code", "state": query["state"][0]},
        follow_redirects=False,
    )
    assert resp.status_code == 302
    assert resp.headers["location"] == "/"


def test_health(client: TestClient) -> None:
    assert client.get("/api/health").json() == {"status": "ok"}


def test_tasks_require_login(client: TestClient, store: Any) -> None:
    resp = client.get("/api/tasks")

    assert resp.status_code == 401
    assert resp.json() == {"error": "Not authenticated.", "kind": "auth"}
    assert client.get("/api/auth/me").status_code == 401


def test_callback_rejects_wrong_state(client: TestClient) -> None:
    client.get("/api/auth/login", follow_redirects=False)

    resp = client.get(
        "/api/auth/callback",
        params={"code": "auth-code", "state": "forged"},
        follow_redirects=False,
    )

    assert resp.status_code == 400


def test_login_then_me(client: TestClient) -> None:
    _login(client)

    assert client.get("/api/auth/me").json() == {"name": "Ada", "email": "ada@example.com"}


def test_task_crud_flow(client: TestClient, store: Any) -> None:
    _login(client)
    store.seed(Task(id=1, title="Old", completed=True))

    resp = client.post("/api/tasks", json={"title": "Write report", "description": "Q3"})
    assert resp.status_code == 201
    created = resp.json()
    assert created["completed"] is False

    listed = client.get("/api/tasks").json()
    assert [t["id"] for t in listed] == [created["id"], 1]

    resp = client.post(f"/api/tasks/{created['id']}/toggle", json={"completed": True})
    assert resp.status_code == 200
    assert resp.json()["completed"] is True

    resp = client.put(f"/api/tasks/{created['id']}", json={"title": "Write final report"})
    assert resp.json()["title"] == "Write final report"

    assert client.delete("/api/tasks/1").status_code == 204
    assert [t["id"] for t in client.get("/api/tasks").json()] == [created["id"]]


def test_empty_title_is_422_without_store_call(client: TestClient, store: Any) -> None:
    _login(client)

    resp = client.post("/api/tasks", json={"title": "  "})

    assert resp.status_code == 422
    assert resp.json() == {"error": "Title is required.", "kind": "validation"}
    assert [name for name, _ in store.calls if name == "create"] == []


def test_store_failure_is_502(client: TestClient) -> None:
    _login(client)

    resp = client.delete("/api/tasks/42")

    assert resp.status_code == 502
    assert resp.json()["kind"] == "transport"


def test_suggestions(client: TestClient, llm: Mock) -> None:
    assert client.post("/api/suggestions", json={"seed": "Plan vacation"}).status_code == 401

    _login(client)
    resp = client.post("/api/suggestions", json={"seed": "Plan vacation"})

    assert resp.status_code == 200
    assert len(resp.json()["suggestions"]) == 3

    llm.generate.return_value = "no json here"
    resp = client.post("/api/suggestions", json={"seed": "Plan vacation", "mode": "title"})
    assert resp.status_code == 502
    assert resp.json()["kind"] == "flow_parse"


def test_page_renders_hero_then_tasks(client: TestClient, store: Any) -> None:
    page = client.get("/")
    assert "Log In to Get Started" in page.text

    _login(client)
    assert "No tasks yet" in client.get("/").text

    store.seed(Task(id=1, title="Buy <milk>"))
    client.post("/api/tasks", json={"title": "Invalidate cache"})
    page = client.get("/").text
    assert "Your Tasks" in page
    assert "Buy &lt;milk&gt;" in page


def test_page_shows_fetch_error(client: TestClient, store: Any) -> None:
    _login(client)
    store.fail_next = "Failed to fetch tasks: boom"

    page = client.get("/").text

    assert "Error Fetching Tasks" in page
    assert "Failed to fetch tasks: boom" in page


def test_logout_clears_session(client: TestClient) -> None:
    _login(client)

    resp = client.get("/api/auth/logout", follow_redirects=False)

    assert resp.status_code == 302
    assert resp.headers["location"].startswith("https://tenant.example.com/v2/logout?")
    assert client.get("/api/auth/me").status_code == 401


def test_page_form_creates_task(client: TestClient, store: Any) -> None:
    _login(client)
    assert 'action="/tasks"' in client.get("/").text

    resp = client.post(
        "/tasks", data={"title": "Write report", "description": "Q3"}, follow_redirects=False
    )

    assert resp.status_code == 303
    assert resp.headers["location"] == "/"
    assert [t.title for t in store.tasks.values()] == ["Write report"]
    page = client.get("/").text
    assert "Task created" in page
    assert 'action="/tasks/1/toggle"' in page


def test_page_forms_toggle_edit_and_delete(client: TestClient, store: Any) -> None:
    _login(client)
    store.seed(Task(id=1, title="A"))

    client.post("/tasks/1/toggle")
    assert store.tasks[1].completed is True

    client.post("/tasks/1/edit", data={"title": "A2", "description": "more"})
    assert store.tasks[1].title == "A2"
    assert store.tasks[1].description == "more"

    page = client.post("/tasks/1/delete").text
    assert 1 not in store.tasks
    assert "Task deleted" in page


def test_page_form_failure_shows_notification(client: TestClient, store: Any) -> None:
    _login(client)

    page = client.post("/tasks", data={"title": "  "}).text

    assert "An error occurred" in page
    assert "Title is required." in page
    assert store.tasks == {}


def test_page_forms_require_login(client: TestClient, store: Any) -> None:
    resp = client.post("/tasks", data={"title": "X"}, follow_redirects=False)

    assert resp.status_code == 303
    assert store.calls == []


def test_page_suggest_offers_descriptions(client: TestClient, llm: Mock) -> None:
    _login(client)

    page = client.post("/suggest", data={"title": "Plan vacation"}).text

    assert "Research destinations" in page
    assert 'value="Plan vacation"' in page

    page = client.post("/suggest", data={"title": ""}).text
    assert "Title required" in page
    assert llm.generate.call_count == 1


def test_callback_survives_profile_fetch_failure(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    def unreachable(*_args: Any, **_kwargs: Any) -> Any:
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr(auth_routes, "_fetch_userinfo", _fetch_userinfo)
    monkeypatch.setattr(auth_routes.requests, "get", unreachable)

    _login(client)

    assert client.get("/api/auth/me").json() == {}


def test_callback_rejects_non_object_token_response(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(auth_routes, "_exchange_code", lambda _s, _c: ["not", "a", "dict"])
    resp = client.get("/api/auth/login", follow_redirects=False)
    state = parse_qs(urlparse(resp.headers["location"]).query)["state"][0]

    resp = client.get(
        "/api/auth/callback",
        params={"code": "auth-code", "state": state},
        follow_redirects=False,
    )

    assert resp.status_code == 502
    assert client.get("/api/auth/me").status_code == 401
