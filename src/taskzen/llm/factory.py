"""Factory for creating LLM providers."""

import logging

from taskzen.config import TaskZenSettings
from taskzen.llm.openai_provider import OpenAIProvider
from taskzen.llm.provider import LLMProvider

logger = logging.getLogger(__name__)


class LLMFactory:
    """Factory for creating LLM provider instances."""

    @staticmethod
    def create(settings: TaskZenSettings) -> LLMProvider | None:
        """Create the configured provider.

        Returns:
            A provider, or None when no API key is configured. The suggestion
            endpoints then report an error instead of the server failing to start.
        """
        if not settings.openai_api_key:
            logger.info("No LLM provider configured; AI suggestions disabled")
            return None

        logger.info("Creating LLM provider", extra={"provider": "openai"})
        return OpenAIProvider(settings)
