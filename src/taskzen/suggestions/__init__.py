"""AI-assisted task suggestions."""

from taskzen.suggestions.flows import (
    SUGGESTION_COUNT,
    SuggestionFlow,
    SuggestionMode,
    parse_suggestions,
    render_prompt,
)

__all__ = [
    "SUGGESTION_COUNT",
    "SuggestionFlow",
    "SuggestionMode",
    "parse_suggestions",
    "render_prompt",
]
