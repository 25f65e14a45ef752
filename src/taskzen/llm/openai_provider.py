"""OpenAI LLM provider implementation."""

import logging
from typing import Any

from openai import OpenAI, OpenAIError

from taskzen.config import TaskZenSettings
from taskzen.errors import TransportError
from taskzen.llm.provider import LLMProvider

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI chat-completions provider."""

    def __init__(self, settings: TaskZenSettings, client: OpenAI | None = None) -> None:
        """Initialize the OpenAI provider.

        Args:
            settings: Application settings.
            client: Preconfigured client; built from settings when omitted.

        Raises:
            ValueError: If no client is given and the API key is not configured.
        """
        if client is None and not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY is required for AI suggestions")

        self.client = client or OpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.llm_timeout_seconds,
        )
        self.model = settings.llm_model
        self.temperature = settings.llm_temperature

        logger.info("OpenAI provider initialized", extra={"model": self.model})

    def generate(
        self,
        prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> str:
        logger.debug("Generating completion", extra={"prompt_chars": len(prompt)})
        return self.chat(
            [{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
            temperature=temperature,
            **kwargs,
        )

    def chat(
        self,
        messages: list[dict[str, str]],
        max_tokens: int | None = None,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> str:
        temp = temperature if temperature is not None else self.temperature

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,  # type: ignore
                max_tokens=max_tokens,
                temperature=temp,
                **kwargs,
            )
        except OpenAIError as e:
            logger.warning("OpenAI request failed", extra={"error": str(e)})
            raise TransportError("Failed to get AI suggestions.") from e

        content = response.choices[0].message.content or ""
        logger.debug("Generated completion", extra={"chars": len(content)})
        return content
