"""Unit tests for the suggestion flows."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from taskzen.errors import FlowParseError, TransportError
from taskzen.suggestions.flows import (
    SuggestionFlow,
    SuggestionMode,
    parse_suggestions,
    render_prompt,
)


def test_description_flow_returns_three_suggestions(llm: Mock) -> None:
    result = SuggestionFlow(llm).suggest(SuggestionMode.DESCRIPTION, "Plan vacation")

    assert result.ok
    assert result.data == [
        "Research destinations",
        "Book flights and hotel",
        "Plan a daily itinerary",
    ]
    prompt = llm.generate.call_args.args[0]
    assert "Task Title: Plan vacation" in prompt


def test_title_flow_uses_description_as_seed(llm: Mock) -> None:
    SuggestionFlow(llm).run(SuggestionMode.TITLE, "  Compare hotels near the beach ")

    prompt = llm.generate.call_args.args[0]
    assert "Task Description: Compare hotels near the beach\n" in prompt


def test_empty_seed_does_not_call_model(llm: Mock) -> None:
    result = SuggestionFlow(llm).suggest(SuggestionMode.DESCRIPTION, "   ")

    assert result.error_kind == "validation"
    assert result.error == "A task title is required to generate suggestions."
    llm.generate.assert_not_called()


def test_missing_provider_is_transport_error() -> None:
    result = SuggestionFlow(None).suggest(SuggestionMode.DESCRIPTION, "Plan vacation")

    assert result.error_kind == "transport"


def test_provider_failure_is_reported(llm: Mock) -> None:
    llm.generate.side_effect = TransportError("Failed to get AI suggestions.")

    result = SuggestionFlow(llm).suggest(SuggestionMode.DESCRIPTION, "Plan vacation")

    assert result.error == "Failed to get AI suggestions."
    assert result.error_kind == "transport"


def test_non_json_output_is_flow_parse_error(llm: Mock) -> None:
    llm.generate.return_value = "1. Research\n2. Book\n3. Pack"

    result = SuggestionFlow(llm).suggest(SuggestionMode.DESCRIPTION, "Plan vacation")

    assert result.error_kind == "flow_parse"
    assert result.data is None


def test_fenced_json_is_accepted() -> None:
    text = '```json\n["a", "b", "c"]\n```'

    assert parse_suggestions(text) == ["a", "b", "c"]


@pytest.mark.parametrize(
    "text",
    [
        '["a", "b"]',
        '["a", "b", "c", "d"]',
        '["a", "", "c"]',
        '["a", 2, "c"]',
        '{"suggestions": ["a", "b", "c"]}',
    ],
)
def test_output_outside_schema_is_rejected(text: str) -> None:
    with pytest.raises(FlowParseError):
        parse_suggestions(text)


def test_render_prompt_mentions_count() -> None:
    prompt = render_prompt(SuggestionMode.DESCRIPTION, "Plan vacation", count=5)

    assert "JSON array of 5 strings" in prompt
