"""Server-rendered task page.

Markup is deliberately plain. Every control is a form that posts to a page
handler; the handler drives the task board or the suggestion panel, keeps the
resulting notifications in the session and redirects back to `/`.
"""

from __future__ import annotations

import logging
from html import escape
from typing import Any

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from taskzen.auth.session import SessionTokenProvider, current_user
from taskzen.errors import TaskZenError
from taskzen.presentation.board import TaskBoard, TaskView
from taskzen.presentation.notifications import Notification, NotificationCenter
from taskzen.presentation.suggest_panel import SuggestionPanel
from taskzen.server.context import get_context

logger = logging.getLogger(__name__)

router = APIRouter()

FLASH_KEY = "notifications"
SUGGESTIONS_KEY = "suggestions"
DRAFT_TITLE_KEY = "draft_title"

_LAYOUT = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>TaskZen</title>
</head>
<body>
<header><a href="/">TaskZen</a>{account}</header>
{flash}<main>{body}</main>
</body>
</html>
"""

_HERO = """<section class="hero">
<h1>Focus, Organize, Achieve</h1>
<p>Welcome to TaskZen, your personal space to conquer your daily goals with calm and clarity.</p>
<a class="button" href="/api/auth/login">Log In to Get Started</a>
</section>"""

_EMPTY = """<section class="empty">
<h3>No tasks yet</h3>
<p>Get started by creating a new task.</p>
</section>"""


def _account(user: dict[str, Any] | None) -> str:
    if user is None:
        return ' <a href="/api/auth/login">Log In</a>'
    name = str(user.get("name") or user.get("email") or "")
    return f' <span class="user">{escape(name)}</span> <a href="/api/auth/logout">Log out</a>'


def _remember(request: Request, notifications: list[Notification]) -> None:
    if not notifications:
        return
    stored = list(request.session.get(FLASH_KEY) or [])
    stored.extend(
        {"title": n.title, "description": n.description, "variant": n.variant}
        for n in notifications
    )
    request.session[FLASH_KEY] = stored


def _render_flash(request: Request) -> str:
    stored = request.session.pop(FLASH_KEY, None) or []
    items = "".join(
        f'<div class="toast {escape(str(n.get("variant", "default")))}" role="status">'
        f'<strong>{escape(str(n.get("title", "")))}</strong>'
        f'<p>{escape(str(n.get("description", "")))}</p></div>'
        for n in stored
        if isinstance(n, dict)
    )
    return f'<div class="toasts">{items}</div>\n' if items else ""


def _render_item(view: TaskView) -> str:
    task = view.task
    state = "complete" if view.completed else "incomplete"
    checked = " checked" if view.completed else ""
    disabled = " disabled" if view.pending else ""
    title = escape(task.title)
    return (
        f'<li class="task {state}" data-task-id="{task.id}">'
        f'<form method="post" action="/tasks/{task.id}/toggle">'
        f'<input type="checkbox" id="task-{task.id}"{checked}{disabled} '
        'onchange="this.form.submit()" '
        f'aria-label="Mark &quot;{title}&quot; as '
        f'{"incomplete" if view.completed else "complete"}">'
        f'<label for="task-{task.id}">{title}</label>'
        "</form>"
        f"<p>{escape(task.description)}</p>"
        f'<details class="edit"><summary aria-label="Edit task &quot;{title}&quot;">Edit</summary>'
        f'<form method="post" action="/tasks/{task.id}/edit">'
        f'<input name="title" value="{title}" required>'
        f'<textarea name="description">{escape(task.description)}</textarea>'
        f"<button{disabled}>Save</button></form></details>"
        f'<form method="post" action="/tasks/{task.id}/delete">'
        f'<button class="delete"{disabled} aria-label="Delete task &quot;{title}&quot;">'
        "Delete</button></form>"
        "</li>"
    )


def _render_new_task_form(draft_title: str, suggestions: list[str]) -> str:
    title = escape(draft_title)
    form = (
        '<form class="new" method="post" action="/tasks">'
        f'<input name="title" placeholder="Title" value="{title}">'
        '<textarea name="description" placeholder="Description"></textarea>'
        "<button>Create Task</button>"
        '<button formaction="/suggest">Suggest</button>'
        "</form>"
    )
    if not suggestions:
        return form
    options = "".join(
        '<li><form method="post" action="/tasks">'
        f'<input type="hidden" name="title" value="{title}">'
        f'<input type="hidden" name="description" value="{escape(s)}">'
        f"<span>{escape(s)}</span><button>Use</button></form></li>"
        for s in suggestions
    )
    return f'{form}<ul class="suggestions">{options}</ul>'


def _error_alert(message: str) -> str:
    return (
        '<div class="alert destructive"><h4>Error Fetching Tasks</h4>'
        f"<p>{escape(message)}</p></div>"
    )


def render_task_list(board: TaskBoard) -> str:
    if board.load_error is not None:
        return _error_alert(board.load_error)

    header = '<div class="toolbar"><h1>Your Tasks</h1></div>'
    views = board.ordered()
    if not views:
        return header + _EMPTY
    items = "".join(_render_item(v) for v in views)
    return f'{header}<ul class="tasks">{items}</ul>'


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def index(request: Request) -> HTMLResponse:
    user = current_user(request.session)
    flash = _render_flash(request)
    if user is None:
        return HTMLResponse(_LAYOUT.format(account=_account(None), flash=flash, body=_HERO))

    try:
        actions = get_context(request).actions_for(SessionTokenProvider(request.session))
    except TaskZenError as e:
        body = _error_alert(e.message)
        return HTMLResponse(_LAYOUT.format(account=_account(user), flash=flash, body=body))

    board = TaskBoard(actions)
    result = actions.list_tasks()
    if result.ok:
        board.load(result.data or [])
    else:
        board.load_error = result.error

    suggestions = request.session.pop(SUGGESTIONS_KEY, None) or []
    draft_title = str(request.session.pop(DRAFT_TITLE_KEY, None) or "")
    body = _render_new_task_form(draft_title, [str(s) for s in suggestions])
    body += render_task_list(board)
    return HTMLResponse(_LAYOUT.format(account=_account(user), flash=flash, body=body))


def _back_home() -> RedirectResponse:
    return RedirectResponse("/", status_code=303)


async def _loaded_board(request: Request) -> TaskBoard | None:
    """Board for the logged-in user, loaded with the current tasks."""

    if current_user(request.session) is None:
        return None
    try:
        actions = get_context(request).actions_for(SessionTokenProvider(request.session))
    except TaskZenError as e:
        _remember(request, [Notification("An error occurred", e.message, "destructive")])
        return None

    board = TaskBoard(actions, NotificationCenter())
    if not await board.refresh():
        board.notifications.error("Error Fetching Tasks", board.load_error or "")
    return board


@router.post("/tasks", include_in_schema=False)
async def create_task(
    request: Request, title: str = Form(""), description: str = Form("")
) -> RedirectResponse:
    board = await _loaded_board(request)
    if board is not None:
        await board.submit(title, description)
        _remember(request, board.notifications.drain())
    return _back_home()


@router.post("/tasks/{task_id}/edit", include_in_schema=False)
async def edit_task(
    request: Request, task_id: int, title: str = Form(""), description: str = Form("")
) -> RedirectResponse:
    board = await _loaded_board(request)
    if board is not None:
        await board.submit(title, description, task_id=task_id)
        _remember(request, board.notifications.drain())
    return _back_home()


@router.post("/tasks/{task_id}/toggle", include_in_schema=False)
async def toggle_task(request: Request, task_id: int) -> RedirectResponse:
    board = await _loaded_board(request)
    if board is not None:
        await board.toggle(task_id)
        _remember(request, board.notifications.drain())
    return _back_home()


@router.post("/tasks/{task_id}/delete", include_in_schema=False)
async def delete_task(request: Request, task_id: int) -> RedirectResponse:
    board = await _loaded_board(request)
    if board is not None:
        await board.delete(task_id)
        _remember(request, board.notifications.drain())
    return _back_home()


@router.post("/suggest", include_in_schema=False)
async def suggest(request: Request, title: str = Form("")) -> RedirectResponse:
    if current_user(request.session) is None:
        return _back_home()

    panel = SuggestionPanel(get_context(request).suggestion_flow())
    if await panel.request(title):
        request.session[SUGGESTIONS_KEY] = list(panel.suggestions)
    request.session[DRAFT_TITLE_KEY] = title
    _remember(request, panel.notifications.drain())
    logger.debug("Suggestion request handled", extra={"state": panel.state.value})
    return _back_home()
