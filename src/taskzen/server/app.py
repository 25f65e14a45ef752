"""FastAPI app factory.

Endpoints are intentionally thin wrappers over the task actions and suggestion flows.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from taskzen import __version__
from taskzen.auth.routes import router as auth_router
from taskzen.config import TaskZenSettings
from taskzen.errors import TaskZenError
from taskzen.logging import configure_logging
from taskzen.server.context import AppContext
from taskzen.server.page import router as page_router
from taskzen.server.tasks_router import STATUS_BY_KIND, ActionFailed
from taskzen.server.tasks_router import router as tasks_router

logger = logging.getLogger(__name__)

# Session cookie lifetime; the access token inside may expire sooner.
SESSION_MAX_AGE_SECONDS = 7 * 24 * 3600


def create_app(
    settings: TaskZenSettings | None = None,
    context: AppContext | None = None,
) -> FastAPI:
    settings = settings or (context.settings if context is not None else TaskZenSettings())
    configure_logging(settings.log_level)

    if context is None:
        context = AppContext.from_settings(settings)

    app = FastAPI(
        title="TaskZen",
        version=__version__,
        description="Personal task manager over a remote task API.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Expose settings and context for request handlers that want to read them.
    app.state.settings = settings
    app.state.context = context

    if settings.session_secret == "change-me":
        logger.warning("TASKZEN_SESSION_SECRET is not set; using an insecure default")

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie="taskzen_session",
        max_age=SESSION_MAX_AGE_SECONDS,
        same_site="lax",
        https_only=settings.base_url.startswith("https://"),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ActionFailed)
    def action_failed(_request: Request, exc: ActionFailed) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.error, "kind": exc.kind},
        )

    @app.exception_handler(TaskZenError)
    def taskzen_error(_request: Request, exc: TaskZenError) -> JSONResponse:
        return JSONResponse(
            status_code=STATUS_BY_KIND.get(exc.kind, 500),
            content={"error": exc.message, "kind": exc.kind},
        )

    app.include_router(auth_router, prefix="/api/auth")
    app.include_router(tasks_router, prefix="/api")
    app.include_router(page_router)

    logger.info(
        "TaskZen app created",
        extra={
            "api_configured": bool(settings.api_base_url.strip()),
            "auth_configured": settings.auth_configured,
            "ai_enabled": context.llm is not None,
        },
    )
    return app
