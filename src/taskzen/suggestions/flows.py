"""Prompt-template flows that ask a hosted model for task suggestions.

Both flows share one output contract: the model must answer with a JSON array
of exactly `SUGGESTION_COUNT` non-empty strings. Anything else is a
`FlowParseError`.
"""

from __future__ import annotations

import json
import logging
import re
from enum import Enum

from pydantic import StrictStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from taskzen.errors import FlowParseError, TaskZenError, TransportError, ValidationError
from taskzen.llm.provider import LLMProvider
from taskzen.models import ActionResult

logger = logging.getLogger(__name__)

SUGGESTION_COUNT = 3

_SUGGESTIONS_ADAPTER: TypeAdapter[list[StrictStr]] = TypeAdapter(list[StrictStr])

# Models often wrap JSON in a Markdown code fence even when told not to.
_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?(?P<body>.*?)\n?```$", re.DOTALL | re.IGNORECASE)


class SuggestionMode(str, Enum):
    TITLE = "title"
    DESCRIPTION = "description"


_TITLE_TEMPLATE = """You are a helpful assistant that generates creative and descriptive task titles based on a given task description.

Task Description: {seed}

Generate {count} title suggestions that are concise and accurately reflect the task.
Return them as a JSON array of {count} strings and nothing else. Ensure the array is parsable.
"""

_DESCRIPTION_TEMPLATE = """You are a helpful task management assistant. Generate {count} diverse task description suggestions for the task with the following title:

Task Title: {seed}

Format each suggestion as a concise sentence.
Return them as a JSON array of {count} strings and nothing else. Ensure the array is parsable.
"""

PROMPT_TEMPLATES: dict[SuggestionMode, str] = {
    SuggestionMode.TITLE: _TITLE_TEMPLATE,
    SuggestionMode.DESCRIPTION: _DESCRIPTION_TEMPLATE,
}

SEED_REQUIRED: dict[SuggestionMode, str] = {
    SuggestionMode.TITLE: "A task description is required to generate suggestions.",
    SuggestionMode.DESCRIPTION: "A task title is required to generate suggestions.",
}


def render_prompt(mode: SuggestionMode, seed: str, *, count: int = SUGGESTION_COUNT) -> str:
    return PROMPT_TEMPLATES[mode].format(seed=seed.strip(), count=count)


def parse_suggestions(text: str, *, count: int = SUGGESTION_COUNT) -> list[str]:
    """Parse model output into exactly `count` non-empty strings.

    Raises:
        FlowParseError: if the output is not a JSON array of `count` non-empty strings.
    """

    body = text.strip()
    fenced = _FENCE_RE.match(body)
    if fenced:
        body = fenced.group("body").strip()

    try:
        raw = json.loads(body)
    except json.JSONDecodeError as e:
        raise FlowParseError("The AI assistant returned an unreadable response.") from e

    try:
        items = _SUGGESTIONS_ADAPTER.validate_python(raw)
    except PydanticValidationError as e:
        raise FlowParseError("The AI assistant returned suggestions in an unexpected shape.") from e

    suggestions = [item.strip() for item in items]
    if any(not s for s in suggestions):
        raise FlowParseError("The AI assistant returned an empty suggestion.")
    if len(suggestions) != count:
        raise FlowParseError(
            f"The AI assistant returned {len(suggestions)} suggestions instead of {count}."
        )
    return suggestions


class SuggestionFlow:
    """Render a prompt, call the model, and validate its answer."""

    def __init__(self, provider: LLMProvider | None, *, count: int = SUGGESTION_COUNT) -> None:
        self._provider = provider
        self._count = count

    def run(self, mode: SuggestionMode, seed: str) -> list[str]:
        """Return suggestions for `seed`.

        Raises:
            ValidationError: if the seed is empty (the model is not called).
            TransportError: if no provider is configured or the call fails.
            FlowParseError: if the model output does not match the schema.
        """

        if not isinstance(seed, str) or not seed.strip():
            raise ValidationError(SEED_REQUIRED[mode])
        if self._provider is None:
            raise TransportError("AI suggestions are not configured.")

        prompt = render_prompt(mode, seed, count=self._count)
        output = self._provider.generate(prompt)
        suggestions = parse_suggestions(output, count=self._count)
        logger.info("Suggestions generated", extra={"mode": mode.value, "count": len(suggestions)})
        return suggestions

    def suggest(self, mode: SuggestionMode, seed: str) -> ActionResult[list[str]]:
        """Action boundary: never raises taxonomy errors."""

        try:
            return ActionResult.success(self.run(mode, seed))
        except TaskZenError as e:
            logger.info(
                "Suggestion flow failed",
                extra={"mode": mode.value, "kind": e.kind, "error": e.message},
            )
            return ActionResult.failure(e)
