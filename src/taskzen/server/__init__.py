"""FastAPI server adapter for TaskZen.

Design intent:
- Keep task and suggestion logic in `taskzen.tasks` and `taskzen.suggestions`
- Keep server-specific concerns (routing, sessions, CORS, page rendering) here

Run with `uvicorn taskzen.server:create_app --factory`.
"""

from __future__ import annotations

__all__ = ["create_app"]

from taskzen.server.app import create_app
