"""Explicit application context.

Everything request handlers need (settings, the list cache, the LLM provider and
how to build a task client for a session) lives here and is stored on
`app.state.context`. Tests build their own context with fakes.
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from dataclasses import dataclass, field

import requests
from fastapi import HTTPException, Request

from taskzen.auth.session import AccessTokenProvider
from taskzen.config import TaskZenSettings
from taskzen.errors import AuthError, TransportError
from taskzen.llm.factory import LLMFactory
from taskzen.llm.provider import LLMProvider
from taskzen.suggestions.flows import SuggestionFlow
from taskzen.tasks.actions import TaskActions, TaskGateway
from taskzen.tasks.cache import TaskListCache
from taskzen.tasks.client import TaskApiClient

ClientFactory = Callable[[AccessTokenProvider], TaskGateway]


def session_cache_key(token: str) -> str:
    """Cache key for a session; the raw token is never used as a key."""

    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:32]


@dataclass
class AppContext:
    settings: TaskZenSettings
    client_factory: ClientFactory
    cache: TaskListCache = field(default_factory=TaskListCache)
    llm: LLMProvider | None = None

    @classmethod
    def from_settings(cls, settings: TaskZenSettings) -> AppContext:
        http = requests.Session()
        http.headers.update({"User-Agent": "taskzen", "Accept": "application/json"})

        def build_client(provider: AccessTokenProvider) -> TaskGateway:
            if not settings.api_base_url.strip():
                raise TransportError("TASKZEN_API_BASE_URL is not configured.")
            return TaskApiClient(
                base_url=settings.api_base_url,
                token_provider=provider,
                timeout=settings.http_timeout_seconds,
                session=http,
            )

        return cls(
            settings=settings,
            client_factory=build_client,
            llm=LLMFactory.create(settings),
        )

    def actions_for(self, provider: AccessTokenProvider) -> TaskActions:
        try:
            cache_key: str | None = session_cache_key(provider.access_token())
        except AuthError:
            # No caching without a session; the client reports the auth failure.
            cache_key = None
        return TaskActions(
            client=self.client_factory(provider),
            cache=self.cache,
            cache_key=cache_key,
        )

    def suggestion_flow(self) -> SuggestionFlow:
        return SuggestionFlow(self.llm)


def get_context(request: Request) -> AppContext:
    context = getattr(request.app.state, "context", None)
    if not isinstance(context, AppContext):
        # This should never happen for the real app, but keeps the API fail-fast.
        raise HTTPException(status_code=500, detail="Application context not configured")
    return context
