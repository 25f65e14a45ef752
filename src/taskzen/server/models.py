"""Pydantic models for the REST server."""

from __future__ import annotations

from pydantic import BaseModel

from taskzen.suggestions.flows import SuggestionMode


class TaskFormRequest(BaseModel):
    # Title emptiness is checked by the actions so it is reported like every
    # other action failure.
    title: str = ""
    description: str | None = None


class ToggleRequest(BaseModel):
    completed: bool


class SuggestionRequest(BaseModel):
    seed: str = ""
    mode: SuggestionMode = SuggestionMode.DESCRIPTION


class SuggestionResponse(BaseModel):
    suggestions: list[str]


class ApiError(BaseModel):
    error: str
    kind: str
